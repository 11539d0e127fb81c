# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog domain services.

This package provides:
- TaxonomyStore: catalog queries (taxonomy ID sets, labels, leaf getters)
- RelationshipMatcher: shared-taxonomy checks between two resources
"""

from opened_catalog.domains.catalog.matcher import MatchResult, RelationshipMatcher
from opened_catalog.domains.catalog.store import (
    ResourceLabel,
    RetrievalError,
    StandardLabel,
    TaxonomyDimension,
    TaxonomyStore,
)

__all__ = [
    # Store
    "TaxonomyStore",
    "TaxonomyDimension",
    "ResourceLabel",
    "StandardLabel",
    "RetrievalError",
    # Matcher
    "RelationshipMatcher",
    "MatchResult",
]
