"""Configuration module for PopUp Gallery."""

from .app_config import (
    APP_CONFIG,
    LOG_LEVELS,
    SOURCE_KINDS,
    AppSettings,
    RetryConfig,
    SourceConfig,
    get_app_settings,
)

__all__ = [
    'APP_CONFIG',
    'LOG_LEVELS',
    'SOURCE_KINDS',
    'AppSettings',
    'RetryConfig',
    'SourceConfig',
    'get_app_settings',
]
