"""
Business logic for user accounts.

``UserService`` is the interface the HTTP handlers depend on.  Two
implementations exist and one of them is chosen when the application
is composed (see ``app.dependencies``):

* ``DatabaseUserService`` performs one ``UserQueries`` call per
  operation, hashes and verifies passwords and signs session tokens.
* ``FakeUserService`` never touches the store.  Login always yields a
  token for ``testUser``; profiles and tags live in process memory.

Failures are reported with the error kinds from ``core.errors``.  The
underlying cause is logged here and not passed on to the caller.
"""

import abc
import logging
import sqlite3
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from meals_finder_api.app.core.config import Settings
from meals_finder_api.app.core.errors import (
    InternalFailureError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from meals_finder_api.app.core.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from meals_finder_api.app.repositories.user_queries import (
    CreateUserParams,
    InsertUserTagParams,
    UpdateUserSettingsParams,
    UserQueries,
)
from meals_finder_api.app.schemas.user import (
    LoginRequest,
    UserCreate,
    UserProfile,
    UserSettingsUpdate,
    UserTag,
)

logger = logging.getLogger(__name__)

FAKE_USERNAME = "testUser"

# Text the driver cannot encode (lone surrogates) fails like any other store error.
STORE_ERRORS = (sqlite3.Error, UnicodeEncodeError)


def derive_bmi(weight: Optional[float], height: Optional[float]) -> Optional[float]:
    """Body-mass index from weight in kilograms and height in centimetres."""
    if not weight or not height:
        return None
    meters = height / 100
    return round(weight / (meters * meters), 2)


class UserService(abc.ABC):
    """Operations on user accounts, profiles and tags."""

    @abc.abstractmethod
    async def login_user(self, login_data: LoginRequest) -> str:
        """Return a signed session token or raise ``UnauthorizedError``."""

    @abc.abstractmethod
    async def create_user(self, data: UserCreate) -> None:
        """Register a new account."""

    @abc.abstractmethod
    async def get_user(self, username: str) -> UserProfile:
        """Return the profile of ``username`` or raise ``NotFoundError``."""

    @abc.abstractmethod
    async def update_user_settings(self, username: str, data: UserSettingsUpdate) -> None:
        """Overwrite the profile fields of ``username``."""

    @abc.abstractmethod
    async def add_user_tag(self, username: str, tag: UserTag) -> None:
        """Attach ``tag`` to ``username``."""

    @abc.abstractmethod
    async def display_user_tag(self, username: str) -> List[UserTag]:
        """Return the tags of ``username`` ordered by name."""

    @abc.abstractmethod
    async def delete_user_tag(self, username: str, tag_name: str) -> None:
        """Remove the tag called ``tag_name`` from ``username``."""


class DatabaseUserService(UserService):
    """``UserService`` backed by the SQL credential store.

    Store calls and password hashing are blocking, so they run in the
    worker thread pool and the event loop keeps serving other requests.
    """

    def __init__(
        self,
        queries: UserQueries,
        secret_key: str,
        token_lifetime: int = 24 * 60 * 60,
        algorithm: str = "HS256",
    ) -> None:
        self.queries = queries
        self._secret_key = secret_key
        self.token_lifetime = token_lifetime
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseUserService":
        return cls(
            UserQueries(settings.database_url),
            secret_key=settings.secret_key,
            token_lifetime=settings.access_token_expire_minutes * 60,
            algorithm=settings.algorithm,
        )

    async def login_user(self, login_data: LoginRequest) -> str:
        try:
            user = await run_in_threadpool(self.queries.login_user_with_username, login_data.login)
        except UnicodeEncodeError:
            logger.info("Rejected login for unencodable username %r", login_data.login)
            raise UnauthorizedError()
        except sqlite3.Error as e:
            logger.error("Looking up user %r failed: %s", login_data.login, e)
            raise InternalFailureError() from e
        if user is None or not await run_in_threadpool(
            verify_password, login_data.password, user.passwdhash
        ):
            logger.info("Rejected login for %r", login_data.login)
            raise UnauthorizedError()
        try:
            return create_access_token(
                user.username,
                self._secret_key,
                expires_delta=self.token_lifetime,
                algorithm=self.algorithm,
            )
        except (TypeError, ValueError) as e:
            logger.error("Signing token for %s failed: %s", user.username, e)
            raise InternalFailureError() from e

    async def create_user(self, data: UserCreate) -> None:
        problems = data.validate_fields()
        if problems:
            logger.info("Rejected registration for %r: %s", data.username, "; ".join(problems))
            raise InvalidInputError(problems)
        try:
            hashed = await run_in_threadpool(hash_password, data.password)
        except (TypeError, ValueError) as e:
            logger.error("Password hashing failed: %s", e)
            raise InternalFailureError() from e
        params = CreateUserParams(
            username=data.username,
            passwdhash=hashed,
            email=data.email,
            phone_number=data.phone_number,
            age=data.age,
            sex=data.sex,
        )
        try:
            await run_in_threadpool(self.queries.create_user, params)
        except STORE_ERRORS as e:
            logger.error("Creating user %s failed: %s", data.username, e)
            raise InternalFailureError() from e
        logger.info("Registered user %s", data.username)

    async def get_user(self, username: str) -> UserProfile:
        try:
            row = await run_in_threadpool(self.queries.get_user_data, username)
        except STORE_ERRORS as e:
            logger.error("Reading profile of %r failed: %s", username, e)
            raise InternalFailureError() from e
        if row is None:
            raise NotFoundError()
        return UserProfile(**asdict(row))

    async def update_user_settings(self, username: str, data: UserSettingsUpdate) -> None:
        bmi = data.bmi if data.bmi is not None else derive_bmi(data.weight, data.height)
        params = UpdateUserSettingsParams(
            username=username,
            email=data.email,
            name=data.name,
            surname=data.surname,
            phone_number=data.phone_number,
            age=data.age,
            sex=data.sex,
            weight=data.weight,
            height=data.height,
            bmi=bmi,
        )
        try:
            changed = await run_in_threadpool(self.queries.update_user_settings, params)
        except STORE_ERRORS as e:
            logger.error("Updating settings of %r failed: %s", username, e)
            raise InternalFailureError() from e
        if not changed:
            logger.warning("Settings update for unknown user %r changed nothing", username)

    async def add_user_tag(self, username: str, tag: UserTag) -> None:
        params = InsertUserTagParams(username=username, tag_name=tag.name, tag_type=tag.tag_type)
        try:
            await run_in_threadpool(self.queries.insert_user_tag, params)
        except STORE_ERRORS as e:
            logger.error("Adding tag %r to %r failed: %s", tag.name, username, e)
            raise InternalFailureError() from e

    async def display_user_tag(self, username: str) -> List[UserTag]:
        try:
            rows = await run_in_threadpool(self.queries.display_user_tag, username)
        except STORE_ERRORS as e:
            logger.error("Listing tags of %r failed: %s", username, e)
            raise InternalFailureError() from e
        return [UserTag(name=row.tag_name, tag_type=row.tag_type) for row in rows]

    async def delete_user_tag(self, username: str, tag_name: str) -> None:
        try:
            await run_in_threadpool(self.queries.delete_user_tag, username, tag_name)
        except STORE_ERRORS as e:
            logger.error("Deleting tag %r of %r failed: %s", tag_name, username, e)
            raise InternalFailureError() from e


class FakeUserService(UserService):
    """In-memory ``UserService`` for test harnesses.

    Registration and login do not check anything: every login returns
    a token for ``testUser`` signed with the configured key.  Profiles
    are created on first access so that authenticated routes work with
    any token subject.
    """

    def __init__(self, secret_key: str, token_lifetime: int = 24 * 60 * 60) -> None:
        self._secret_key = secret_key
        self.token_lifetime = token_lifetime
        self.profiles: Dict[str, UserProfile] = {}
        self.tags: Dict[str, Dict[str, str]] = {}

    async def login_user(self, login_data: LoginRequest) -> str:
        return create_access_token(FAKE_USERNAME, self._secret_key, expires_delta=self.token_lifetime)

    async def create_user(self, data: UserCreate) -> None:
        return None

    async def get_user(self, username: str) -> UserProfile:
        return self.profiles.setdefault(
            username, UserProfile(username=username, email=f"{username}@example.com")
        )

    async def update_user_settings(self, username: str, data: UserSettingsUpdate) -> None:
        fields = data.model_dump()
        if fields["bmi"] is None:
            fields["bmi"] = derive_bmi(data.weight, data.height)
        self.profiles[username] = UserProfile(username=username, **fields)

    async def add_user_tag(self, username: str, tag: UserTag) -> None:
        self.tags.setdefault(username, {})[tag.name] = tag.tag_type

    async def display_user_tag(self, username: str) -> List[UserTag]:
        user_tags = self.tags.get(username, {})
        return [UserTag(name=name, tag_type=user_tags[name]) for name in sorted(user_tags)]

    async def delete_user_tag(self, username: str, tag_name: str) -> None:
        self.tags.get(username, {}).pop(tag_name, None)
