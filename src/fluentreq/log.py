# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for fluentreq."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("FLUENTREQ_LOG_LEVEL", "WARNING").upper()

_logger: logging.Logger = logging.getLogger("fluentreq")


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/library use."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_logger() -> logging.Logger:
    """Return the process-wide sink for non-fatal fluentreq failures."""
    return _logger


def set_logger(logger: logging.Logger | None) -> None:
    """Replace the sink; None restores the default ``fluentreq`` logger."""
    global _logger
    _logger = logger if logger is not None else logging.getLogger("fluentreq")


__all__ = ["get_logger", "set_logger", "setup_logging"]
