# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for InsightEd.

Example:
    >>> from insighted.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.activity.page_size
    50
"""

from insighted.core.config.settings import (
    ActivitySettings,
    APISettings,
    CORSSettings,
    DatabaseSettings,
    ReferenceSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "ReferenceSettings",
    "ActivitySettings",
    "CORSSettings",
    "APISettings",
]
