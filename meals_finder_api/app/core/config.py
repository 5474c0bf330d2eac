"""
Simple configuration management.

The ``Settings`` dataclass reads configuration from environment
variables.  A ``.env`` file in the working directory is loaded first
so that local deployments can keep their secrets out of the shell
environment.  Defaults are provided for all fields; in production at
least ``SECRET_KEY`` must be overridden.

Settings are passed explicitly to ``create_app`` and from there into
the services.  Business logic never reads the environment itself.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Meals Finder API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Symmetric key used to sign session tokens.  Tokens signed with a
    # different key are rejected, so rotating it logs everybody out.
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # Path to the SQLite database.  A relative path is resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "meals_finder.db")

    # Compose the in-memory ``FakeUserService`` instead of the database
    # backed one.  Only meant for test harnesses and front-end work.
    use_fake_user_service: bool = _env_flag("USE_FAKE_USER_SERVICE")


# Default instance for scripts that do not build their own.  Because
# the dataclass defaults are computed at import time, environment
# variables should be set before importing this module.
settings = Settings()
