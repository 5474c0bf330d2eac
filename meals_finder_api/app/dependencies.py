"""
Dependency factories for the FastAPI routes.

The user service is built once per application by ``build_user_service``
and stored on ``app.state``; ``get_user_service`` hands it to the
routes.  Tests replace it through ``app.dependency_overrides``.
"""

import logging

from fastapi import Request

from meals_finder_api.app.core.config import Settings
from meals_finder_api.app.services.user_service import (
    DatabaseUserService,
    FakeUserService,
    UserService,
)

logger = logging.getLogger(__name__)


def build_user_service(settings: Settings) -> UserService:
    """Compose the ``UserService`` implementation selected by ``settings``."""
    if settings.use_fake_user_service:
        logger.warning("Using the in-memory FakeUserService; no data will be persisted")
        return FakeUserService(
            settings.secret_key,
            token_lifetime=settings.access_token_expire_minutes * 60,
        )
    return DatabaseUserService.from_settings(settings)


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service
