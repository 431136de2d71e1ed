"""
=============================================================================
APPLICATION CONFIGURATION
=============================================================================

Centralized configuration for a reqflow application.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Code                                                           │
    │      └── AppConfig(log_level="DEBUG")                               │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── REQFLOW_LOG_LEVEL=DEBUG python examples/hello_app.py       │
    │                                                                      │
    │   3. Defaults                                                       │
    │      └── Defined in the dataclass                                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Configuration is validated eagerly, when the application is created, not
on the first request.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping


LOG_FORMATS = ("text", "json")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AppConfig:
    """
    Configuration for create_app().

    Development:
        AppConfig(log_level="DEBUG")

    Production, shipping logs to an aggregator:
        AppConfig(log_format="json")
    """

    # ─────────────────────────────────────────────────────────────────────
    # PIPELINE
    # ─────────────────────────────────────────────────────────────────────

    base_headers: Dict[str, str] = field(
        default_factory=lambda: {"Connection": "keep-alive"}
    )
    """
    Headers every request's pipeline starts with.

    They are defaults: a middleware header or a handler's own header with
    the same name wins.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    DEBUG also logs routing decisions and middleware short-circuits.
    """

    log_format: str = "text"
    """
    Access log format: 'json' or 'text'.
    """

    access_log: bool = True
    """Emit one reqflow.access record per request."""

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        REQFLOW_LOG_LEVEL    Logging level (default: INFO)
        REQFLOW_LOG_FORMAT   text or json (default: text)
        REQFLOW_ACCESS_LOG   1/0, true/false (default: true)

        =====================================================================
        """
        return cls(
            log_level=os.getenv("REQFLOW_LOG_LEVEL", "INFO"),
            log_format=os.getenv("REQFLOW_LOG_FORMAT", "text"),
            access_log=_env_flag("REQFLOW_ACCESS_LOG", True),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value
        """
        if not isinstance(self.base_headers, Mapping):
            raise ValueError(
                f"base_headers must be a mapping, got {type(self.base_headers).__name__}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid log_format: {self.log_format}. Must be one of {', '.join(LOG_FORMATS)}."
            )

    @property
    def level(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)
