"""
Settings for the shopcache session/cache layer.

Simple, reliable environment variable configuration focused on the two Redis
stores (session + app) and the logging they report to.
"""

import os
import tomllib
from pathlib import Path

from dotenv import load_dotenv

# Load .env file for local development - look in current working directory
load_dotenv(".env")


def _get_version_from_pyproject() -> str:
    """
    Read version from pyproject.toml file.

    Returns:
        Version string from pyproject.toml, or fallback version
    """
    current_path = Path(__file__)
    for parent in [current_path.parent, *current_path.parents]:
        pyproject_path = parent / "pyproject.toml"
        if pyproject_path.exists():
            try:
                with open(pyproject_path, "rb") as f:
                    pyproject_data = tomllib.load(f)
                    version = pyproject_data.get("project", {}).get("version")
                    if version:
                        return version
            except (OSError, tomllib.TOMLDecodeError):
                continue

    return "0.1.0"


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


class Settings:
    """Application settings with environment-based configuration."""

    def __init__(self):
        # ================================================================
        # Version & General Configuration
        # ================================================================
        self.version: str = _get_version_from_pyproject()
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_dir: str = os.getenv("LOG_DIR", "./logs")
        self.environment: str = os.getenv("ENVIRONMENT", "DEV")

        # ================================================================
        # Redis Configuration
        # ================================================================
        self.redis_host: str = os.getenv("REDIS_HOST", "localhost")
        self.redis_port: int = _int_env("REDIS_PORT", "6379")
        self.redis_password: str | None = os.getenv("REDIS_PASSWORD") or None

        # One DB index per logical store when both share a single server
        self.redis_session_db: int = _int_env("REDIS_SESSION_DB", "0")
        self.redis_app_db: int = _int_env("REDIS_APP_DB", "1")

        self.redis_max_connections: int = _int_env("REDIS_MAX_CONNECTIONS", "64")
        self.redis_connection_timeout: int = _int_env("REDIS_CONNECTION_TIMEOUT", "5")
        self.redis_operation_timeout: float = float(
            os.getenv("REDIS_OPERATION_TIMEOUT", "2.0")
        )
        # A full-keyspace SCAN spans many round trips; bounded separately
        self.redis_scan_timeout: float = float(os.getenv("REDIS_SCAN_TIMEOUT", "30.0"))

        self._validate_settings()

    def _validate_settings(self):
        """Validate settings values."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        self.log_level = self.log_level.upper()

        valid_environments = ["DEV", "PROD"]
        if self.environment.upper() not in valid_environments:
            self.environment = "DEV"  # Default fallback
        self.environment = self.environment.upper()

        if self.redis_operation_timeout <= 0:
            raise ValueError("REDIS_OPERATION_TIMEOUT must be greater than zero")
        if self.redis_scan_timeout <= 0:
            raise ValueError("REDIS_SCAN_TIMEOUT must be greater than zero")

    @property
    def store_db_mapping(self) -> dict[str, int]:
        """DB index used by each logical store."""
        return {"session": self.redis_session_db, "app": self.redis_app_db}

    @property
    def shares_single_db(self) -> bool:
        """True when both stores point at the same DB index."""
        return self.redis_session_db == self.redis_app_db

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "DEV"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "PROD"


# Global settings instance
settings = Settings()
