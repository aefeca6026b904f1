"""
Configuration settings for the terminal application.
"""

import os

from dotenv import load_dotenv

from webterm.exceptions import ConfigurationError

# Load environment variables from .env file
_ = load_dotenv()

BACKENDS = ("http", "local")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.backend: str = self._get_choice_env("WEBTERM_BACKEND", "http", BACKENDS)
        self.api_url: str = self._get_env(
            "WEBTERM_API_URL", "http://localhost:8080/api/v2"
        ).rstrip("/")
        self.local_root: str = os.path.abspath(
            os.path.expanduser(self._get_env("WEBTERM_LOCAL_ROOT", os.getcwd()))
        )
        self.user: str = self._get_env("WEBTERM_USER", "user")
        self.timeout: int = self._get_int_env("WEBTERM_TIMEOUT", 30)
        self.default_extension: str = self._get_extension_env(
            "WEBTERM_DEFAULT_EXTENSION", ".txt"
        )
        self.script_extension: str = self._get_extension_env(
            "WEBTERM_SCRIPT_EXTENSION", ".sh"
        )
        self.history_limit: int = self._get_int_env("WEBTERM_HISTORY_LIMIT", 1000)
        self.max_script_depth: int = self._get_int_env("WEBTERM_MAX_SCRIPT_DEPTH", 8)
        self.max_sessions: int = self._get_int_env("WEBTERM_MAX_SESSIONS", 100)

    def _get_env(self, key: str, default: str) -> str:
        """Get an environment variable with a default value."""
        return os.getenv(key, default)

    def _get_int_env(self, key: str, default: int) -> int:
        """Get a non-negative integer environment variable."""
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ConfigurationError(f"Environment variable {key} must be an integer")
        if value < 0:
            raise ConfigurationError(f"Environment variable {key} must be >= 0")
        return value

    def _get_choice_env(self, key: str, default: str, choices: tuple[str, ...]) -> str:
        value = self._get_env(key, default).strip().lower()
        if value not in choices:
            raise ConfigurationError(
                f"Environment variable {key} must be one of: {', '.join(choices)}"
            )
        return value

    def _get_extension_env(self, key: str, default: str) -> str:
        value = self._get_env(key, default).strip()
        if not value:
            raise ConfigurationError(f"Environment variable {key} must not be empty")
        return value if value.startswith(".") else f".{value}"


# Global settings instance
settings = Settings()
