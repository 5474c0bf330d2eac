"""
User endpoints for API v1.

Provide login, registration, the caller's profile and settings, and
management of the caller's tags.  Routes under ``/me`` act on the
username carried by the bearer token.  Service error kinds are turned
into HTTP errors by ``_to_http``; internal details are never returned.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from meals_finder_api.app.core.errors import (
    InvalidInputError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from meals_finder_api.app.core.security import get_current_username
from meals_finder_api.app.dependencies import get_user_service
from meals_finder_api.app.schemas.user import (
    LoginRequest,
    StatusResponse,
    TokenResponse,
    UserCreate,
    UserProfile,
    UserSettingsUpdate,
    UserTag,
)
from meals_finder_api.app.services.user_service import UserService


router = APIRouter()


def _to_http(exc: ServiceError) -> HTTPException:
    if isinstance(exc, UnauthorizedError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(exc, InvalidInputError):
        return HTTPException(status_code=422, detail=exc.problems)
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.post("/login", response_model=TokenResponse)
async def login_user(
    credentials: LoginRequest,
    service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Check the credentials and return a session token valid for 24 hours.

    Unknown usernames and wrong passwords both answer 401.
    """
    try:
        token = await service.login_user(credentials)
    except ServiceError as e:
        raise _to_http(e) from e
    return TokenResponse(access_token=token)


@router.post("/", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
) -> StatusResponse:
    """Register a new account.

    A request that breaks the field rules answers 422 with the list of
    problems.  A duplicate username answers 500 like any other store
    failure.
    """
    try:
        await service.create_user(user)
    except ServiceError as e:
        raise _to_http(e) from e
    return StatusResponse(status="created")


@router.get("/me", response_model=UserProfile)
async def get_profile(
    username: str = Depends(get_current_username),
    service: UserService = Depends(get_user_service),
) -> UserProfile:
    try:
        return await service.get_user(username)
    except ServiceError as e:
        raise _to_http(e) from e


@router.put("/me/settings", response_model=StatusResponse)
async def update_settings(
    body: UserSettingsUpdate,
    username: str = Depends(get_current_username),
    service: UserService = Depends(get_user_service),
) -> StatusResponse:
    """Overwrite the caller's profile fields."""
    try:
        await service.update_user_settings(username, body)
    except ServiceError as e:
        raise _to_http(e) from e
    return StatusResponse(status="updated")


@router.get("/me/tags", response_model=List[UserTag])
async def list_tags(
    username: str = Depends(get_current_username),
    service: UserService = Depends(get_user_service),
) -> List[UserTag]:
    try:
        return await service.display_user_tag(username)
    except ServiceError as e:
        raise _to_http(e) from e


@router.post("/me/tags", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
async def add_tag(
    tag: UserTag,
    username: str = Depends(get_current_username),
    service: UserService = Depends(get_user_service),
) -> StatusResponse:
    try:
        await service.add_user_tag(username, tag)
    except ServiceError as e:
        raise _to_http(e) from e
    return StatusResponse(status="created")


@router.delete("/me/tags/{tag_name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_name: str,
    username: str = Depends(get_current_username),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Remove one of the caller's tags.  Removing a missing tag is not an error."""
    try:
        await service.delete_user_tag(username, tag_name)
    except ServiceError as e:
        raise _to_http(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
