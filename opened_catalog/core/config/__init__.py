# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the OpenEd catalog tools.

Example:
    >>> from opened_catalog.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.export.key_pattern)
    'resource:*'
"""

from opened_catalog.core.config.settings import (
    CatalogDatabaseSettings,
    ExportSettings,
    PartnerAPISettings,
    RedisSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "CatalogDatabaseSettings",
    "RedisSettings",
    "StorageSettings",
    "PartnerAPISettings",
    "ExportSettings",
]
