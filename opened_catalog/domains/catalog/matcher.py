# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Relationship matching between catalog resources.

Two resources are related along a taxonomy dimension when their ID sets
for that dimension intersect. The matcher fails closed: when either
lookup fails the answer is "not related", and the error travels with the
result instead of being raised.

Example:
    >>> matcher = RelationshipMatcher(TaxonomyStore(session))
    >>> result = await matcher.shares(TaxonomyDimension.STANDARD, 4123630, 4123755)
    >>> if result.failed:
    ...     logger.warning("Lookup failed: %s", result.error)
    >>> bool(result)
    True
"""

import logging
from dataclasses import dataclass

from opened_catalog.domains.catalog.store import (
    RetrievalError,
    TaxonomyDimension,
    TaxonomyStore,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of one relationship check.

    Attributes:
        dimension: Dimension that was compared.
        shared: True if the resources share at least one ID.
        error: Lookup failure, if any. shared is always False when set.
    """

    dimension: TaxonomyDimension
    shared: bool
    error: RetrievalError | None = None

    @property
    def failed(self) -> bool:
        """Whether the answer comes from a failed lookup."""
        return self.error is not None

    def __bool__(self) -> bool:
        return self.shared


class RelationshipMatcher:
    """Computes shared-taxonomy relations between pairs of resources.

    Nothing is memoized: every call re-issues both lookups.
    """

    def __init__(self, store: TaxonomyStore) -> None:
        """Initialize the matcher.

        Args:
            store: Taxonomy store used for ID set lookups.
        """
        self._store = store

    async def shares(
        self,
        dimension: TaxonomyDimension,
        resource_a: int,
        resource_b: int,
    ) -> MatchResult:
        """Check whether two resources share a taxonomy ID.

        Args:
            dimension: Taxonomy dimension to compare.
            resource_a: First resource id.
            resource_b: Second resource id.

        Returns:
            MatchResult with shared=True iff the ID sets intersect.
            On a lookup failure, shared=False and error is set.
        """
        try:
            ids_a = await self._store.ids_for(dimension, resource_a)
            ids_b = await self._store.ids_for(dimension, resource_b)
        except RetrievalError as e:
            logger.error(
                "Couldn't compare %s for resources %d,%d: %s",
                dimension.value, resource_a, resource_b, e,
            )
            return MatchResult(dimension=dimension, shared=False, error=e)

        # isdisjoint stops at the first common element
        shared = not ids_a.isdisjoint(ids_b)
        if shared:
            logger.debug(
                "Resources %d,%d do share %s", resource_a, resource_b, dimension.value
            )
        else:
            logger.debug(
                "Resources %d,%d do not share %s", resource_a, resource_b, dimension.value
            )
        return MatchResult(dimension=dimension, shared=shared)

    async def share_standard(self, resource_a: int, resource_b: int) -> MatchResult:
        """Check whether two resources are aligned to a common standard."""
        return await self.shares(TaxonomyDimension.STANDARD, resource_a, resource_b)

    async def share_category(self, resource_a: int, resource_b: int) -> MatchResult:
        """Check whether two resources reach a common standard category."""
        return await self.shares(TaxonomyDimension.CATEGORY, resource_a, resource_b)

    async def share_subject(self, resource_a: int, resource_b: int) -> MatchResult:
        """Check whether two resources are tagged with a common subject."""
        return await self.shares(TaxonomyDimension.SUBJECT, resource_a, resource_b)

    async def relations(
        self, resource_a: int, resource_b: int
    ) -> dict[TaxonomyDimension, MatchResult]:
        """Compare two resources along every dimension, one after another."""
        results = {}
        for dimension in TaxonomyDimension:
            results[dimension] = await self.shares(dimension, resource_a, resource_b)
        return results
