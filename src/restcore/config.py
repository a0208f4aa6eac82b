# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for restcore."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"restcore/{__version__}"
DEFAULT_MEDIA_TYPE = "application/json"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class HttpSettings:
    """HTTP client and polling defaults."""

    timeout: float = 30.0
    max_retries: int = 0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    poll_interval: float = 1.0
    default_media_type: str = DEFAULT_MEDIA_TYPE

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        poll_interval = _float_env("RESTCORE_POLL_INTERVAL", cls.poll_interval)
        if poll_interval < 0:
            poll_interval = cls.poll_interval
        return cls(
            timeout=_float_env("RESTCORE_HTTP_TIMEOUT", cls.timeout),
            max_retries=max(0, _int_env("RESTCORE_HTTP_RETRIES", cls.max_retries)),
            user_agent=os.getenv("RESTCORE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("RESTCORE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("RESTCORE_HTTP_VERIFY_SSL", cls.verify_ssl),
            poll_interval=poll_interval,
            default_media_type=os.getenv("RESTCORE_DEFAULT_MEDIA_TYPE") or cls.default_media_type,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()
