# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for fluentreq."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"fluentreq/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Defaults for the shared client and process-wide switches."""

    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    strict: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("FLUENTREQ_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        return cls(
            timeout=timeout,
            user_agent=os.getenv("FLUENTREQ_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("FLUENTREQ_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("FLUENTREQ_HTTP_VERIFY_SSL", cls.verify_ssl),
            strict=_bool_env("FLUENTREQ_STRICT", cls.strict),
        )


def load_settings() -> Settings:
    """Load settings from environment with sensible defaults."""
    return Settings.from_env()


# Strict mode turns recoverable builder failures (body encoding, None setters)
# into exceptions instead of a logged fallback.
_strict = load_settings().strict


def enable_strict_mode() -> None:
    global _strict
    _strict = True


def disable_strict_mode() -> None:
    global _strict
    _strict = False


def is_strict() -> bool:
    return _strict


__all__ = [
    "DEFAULT_USER_AGENT",
    "Settings",
    "disable_strict_mode",
    "enable_strict_mode",
    "is_strict",
    "load_settings",
]
