# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background task actors.

Running Workers:
    dramatiq opened_catalog.infrastructure.background.tasks --processes 1 --threads 1
"""

from opened_catalog.infrastructure.background.tasks.ratings_export import (
    export_resource_ratings,
    get_ratings_export_actors,
    run_ratings_export,
)

__all__ = [
    "export_resource_ratings",
    "get_ratings_export_actors",
    "run_ratings_export",
    "get_all_actors",
]


def get_all_actors() -> list:
    """Get all actors for worker registration."""
    return get_ratings_export_actors()
