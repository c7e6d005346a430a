"""
Runtime settings for the API builder.

Every setting is resolved in the same order: an explicit argument, then an
``APIBUILDER_*`` environment variable, then the built-in default.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('true', '1', 'yes', 'on')
_FALSE_VALUES = ('false', '0', 'no', 'off')


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name, '').lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    if value:
        logger.warning(f"Ignoring unrecognised value for {name}: {value!r}")
    return default


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one ApiBuilder instance.

    Attributes:
        log_level: Level name applied to the ``apibuilder`` logger, or None
            to leave logging configuration to the application.
        expose_error_type: Whether JSON error bodies include ``errorType``.
    """

    log_level: Optional[str] = None
    expose_error_type: bool = True

    @classmethod
    def resolve(cls, log_level: Optional[str] = None, expose_error_type: Optional[bool] = None) -> "Settings":
        """Build settings from explicit arguments, falling back to the environment."""
        if log_level is None:
            log_level = os.environ.get('APIBUILDER_LOG_LEVEL') or None
        if expose_error_type is None:
            expose_error_type = _env_flag('APIBUILDER_EXPOSE_ERROR_TYPE', True)
        return cls(
            log_level=log_level.upper() if log_level else None,
            expose_error_type=expose_error_type,
        )


def configure_logging(settings: Settings) -> None:
    """Apply ``settings.log_level`` to the package logger.

    A StreamHandler is attached only when the logger has no handlers yet, so
    applications that configure logging themselves are left alone.
    """
    if not settings.log_level:
        return

    package_logger = logging.getLogger("apibuilder")
    package_logger.setLevel(settings.log_level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)
