"""
Main entrypoint for the Meals Finder API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  ``create_app`` builds and configures the
app from explicit ``Settings``; the module level ``app`` uses the
settings read from the environment so that it can be served directly::

    uvicorn meals_finder_api.app.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .dependencies import build_user_service

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the settings read from the
        environment at import time.

    Returns
    -------
    FastAPI
        A configured application.  Its ``state`` holds the settings and
        the composed ``UserService``.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None, debug=settings.debug)
    if settings.secret_key == "change_me":
        logger.warning("SECRET_KEY is not set; session tokens are signed with the default key")

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings
    app.state.user_service = build_user_service(settings)

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        if settings.use_fake_user_service:
            return
        version = init_db(settings.database_url)
        logger.info("Database %s ready at schema version %s", settings.database_url, version)

    return app


app = create_app()
