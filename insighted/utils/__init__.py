# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for InsightEd.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from insighted.utils.datetime import (
    ensure_utc,
    format_iso,
    parse_iso,
    utc_now,
    utc_today,
)
from insighted.utils.logging import (
    bind_context,
    clear_context,
    profile_log_context,
    setup_logging,
)

__all__ = [
    # Logging
    "setup_logging",
    "profile_log_context",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "utc_today",
    "ensure_utc",
    "format_iso",
    "parse_iso",
]
