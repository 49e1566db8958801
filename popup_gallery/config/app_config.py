"""Application configuration settings for PopUp Gallery."""

from dataclasses import dataclass
from typing import Any, Callable, Optional
import os

from dotenv import load_dotenv

from popup_gallery.error_handling.error_handler import RetryConfig


load_dotenv()


SOURCE_KINDS = ("sample", "file", "http")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SourceConfig:
    """Listing source configuration."""
    kind: str = "sample"
    url: Optional[str] = None
    path: Optional[str] = None
    request_timeout_seconds: float = 10.0

    def __post_init__(self):
        if self.kind not in SOURCE_KINDS:
            raise ValueError(
                f"Unknown listing source '{self.kind}', expected one of {', '.join(SOURCE_KINDS)}"
            )


@dataclass
class AppSettings:
    """Main application configuration settings."""
    source: SourceConfig = None
    retry: RetryConfig = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Initialize nested configs if not provided."""
        if self.source is None:
            self.source = SourceConfig()
        if self.retry is None:
            self.retry = RetryConfig()

        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{self.log_level}', expected one of {', '.join(LOG_LEVELS)}"
            )


# Default application configuration, overridden by environment variables
APP_CONFIG = {
    "log_level": "INFO",
    "source": {
        "kind": "sample",
        "url": None,
        "path": None,
        "request_timeout_seconds": 10.0,
    },
    "retry": {
        "max_retries": 3,
        "timeout_multiplier": 1.5,
        "backoff_base_seconds": 2.0,
    },
}


def _env(name: str, default: Any, convert: Callable[[str], Any] = str) -> Any:
    """Read an environment variable, naming it when the value does not parse."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return convert(raw)
    except ValueError:
        raise ValueError(f"{name} must be a valid {convert.__name__}, got '{raw}'") from None


def get_app_settings() -> AppSettings:
    """
    Get application settings from the environment.

    Raises:
        ValueError: If an environment variable holds an invalid value
    """
    source_defaults = APP_CONFIG["source"]
    retry_defaults = APP_CONFIG["retry"]

    source = SourceConfig(
        kind=_env("LISTING_SOURCE", source_defaults["kind"]),
        url=_env("LISTINGS_URL", source_defaults["url"]),
        path=_env("LISTINGS_PATH", source_defaults["path"]),
        request_timeout_seconds=_env(
            "REQUEST_TIMEOUT_SECONDS", source_defaults["request_timeout_seconds"], float
        ),
    )
    retry = RetryConfig(
        max_retries=_env("MAX_RETRIES", retry_defaults["max_retries"], int),
        initial_timeout_seconds=source.request_timeout_seconds,
        timeout_multiplier=_env("TIMEOUT_MULTIPLIER", retry_defaults["timeout_multiplier"], float),
        backoff_base_seconds=_env(
            "BACKOFF_BASE_SECONDS", retry_defaults["backoff_base_seconds"], float
        ),
    )

    return AppSettings(
        source=source,
        retry=retry,
        log_level=_env("LOG_LEVEL", APP_CONFIG["log_level"]),
    )
