"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables; defaults are provided for all fields.  A
``.env`` file in the working directory is loaded first so local
deployments can keep their database and server settings there.
Values are read when ``Settings`` is instantiated, which lets tests
build fresh settings after patching the environment.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Music Library API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    # Optional path of a log file in addition to console output.
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    # Path of the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "music_library.db"))

    server_host: str = field(default_factory=lambda: os.getenv("SERVER_HOST", "0.0.0.0"))
    server_port: int = field(default_factory=lambda: int(os.getenv("SERVER_PORT", "8080")))

    # When enabled, an update that sends ``text`` or ``link`` as an empty
    # string clears the stored value instead of leaving it unchanged.
    update_clears_empty_fields: bool = field(
        default_factory=lambda: _env_bool("UPDATE_CLEARS_EMPTY_FIELDS")
    )


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
