# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Taxonomy store: catalog queries over resources and standards.

This module is the only place the catalog tools issue SQL. It provides:
- Taxonomy ID sets per resource (standards, categories, subjects)
- Label resolution for resources and standards, single and batched
- Leaf getters for resources, standards, alignments, users and runs

Taxonomy dimensions:
- Standard: alignments.standard_id for the resource
- Category: distinct standards.category_id reached through alignments
- Subject: resources_subjects.subject_id for the resource

Every query failure is raised as RetrievalError. Missing rows are not
errors: label lookups return empty fields and ID set lookups return an
empty set.

Example:
    >>> store = TaxonomyStore(session)
    >>> standards = await store.ids_for(TaxonomyDimension.STANDARD, 4123630)
    >>> label = await store.resolve_resource_label(4123630)
"""

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from opened_catalog.infrastructure.database.connection import DatabaseError
from opened_catalog.infrastructure.database.models import (
    Alignment,
    AssessmentRun,
    Resource,
    ResourceSubject,
    Standard,
    User,
)

logger = logging.getLogger(__name__)

# Grade selector meaning kindergarten
KINDERGARTEN = "K"


class TaxonomyDimension(str, enum.Enum):
    """Independent taxonomy axes along which two resources may be related."""

    STANDARD = "standard"
    CATEGORY = "category"
    SUBJECT = "subject"


class RetrievalError(DatabaseError):
    """Exception raised when a catalog query fails."""

    pass


@dataclass(frozen=True)
class ResourceLabel:
    """Human-readable labels of a resource.

    Attributes:
        url: Share URL, empty if unknown.
        title: Resource title, empty if unknown.
    """

    url: str = ""
    title: str = ""


@dataclass(frozen=True)
class StandardLabel:
    """Human-readable label of a standard.

    Attributes:
        title: Standard title, empty if unknown.
    """

    title: str = ""


class TaxonomyStore:
    """Read-only query surface over the catalog database.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the taxonomy store.

        Args:
            db: Async database session.
        """
        self._db = db

    async def _scalars(self, stmt, what: str) -> list:
        """Execute a statement and return its scalar column.

        Raises:
            RetrievalError: If the query fails. The session is rolled back
                first so later queries on it can still run.
        """
        try:
            result = await self._db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Couldn't retrieve %s: %s", what, e)
            await self._db.rollback()
            raise RetrievalError(f"Couldn't retrieve {what}", e) from e

    async def _rows(self, stmt, what: str) -> list:
        """Execute a statement and return its rows."""
        try:
            result = await self._db.execute(stmt)
            return list(result.all())
        except SQLAlchemyError as e:
            logger.error("Couldn't retrieve %s: %s", what, e)
            await self._db.rollback()
            raise RetrievalError(f"Couldn't retrieve {what}", e) from e

    # =========================================================================
    # Taxonomy ID sets
    # =========================================================================

    async def ids_for(
        self,
        dimension: TaxonomyDimension,
        resource_id: int,
    ) -> frozenset[int]:
        """Get the taxonomy IDs of a resource along one dimension.

        Args:
            dimension: Taxonomy dimension to read.
            resource_id: Resource identifier.

        Returns:
            Set of standard, category or subject IDs.

        Raises:
            RetrievalError: If the query fails.
        """
        if dimension is TaxonomyDimension.STANDARD:
            stmt = select(Alignment.standard_id).where(Alignment.resource_id == resource_id)
        elif dimension is TaxonomyDimension.CATEGORY:
            stmt = (
                select(Standard.category_id)
                .distinct()
                .join(Alignment, Alignment.standard_id == Standard.id)
                .where(Alignment.resource_id == resource_id)
            )
        elif dimension is TaxonomyDimension.SUBJECT:
            stmt = select(ResourceSubject.subject_id).where(
                ResourceSubject.resource_id == resource_id
            )
        else:
            raise ValueError(f"Unknown taxonomy dimension: {dimension!r}")

        ids = await self._scalars(stmt, f"{dimension.value} ids for resource {resource_id}")
        # Standards without a category carry a NULL category_id
        found = frozenset(i for i in ids if i is not None)
        logger.debug(
            "Retrieved %d %s ids for resource %d", len(found), dimension.value, resource_id
        )
        return found

    # =========================================================================
    # Label resolution
    # =========================================================================

    async def resolve_resource_label(self, resource_id: int) -> ResourceLabel:
        """Resolve the share URL and title of a resource.

        Returns:
            ResourceLabel, with empty fields if the resource does not exist.

        Raises:
            RetrievalError: If the query fails.
        """
        labels = await self.resolve_resource_labels([resource_id])
        return labels.get(resource_id, ResourceLabel())

    async def resolve_resource_labels(
        self, resource_ids: Iterable[int]
    ) -> dict[int, ResourceLabel]:
        """Resolve labels for several resources in one query.

        Args:
            resource_ids: Resource identifiers (duplicates are ignored).

        Returns:
            Mapping of resource id to label. Unknown ids are absent.

        Raises:
            RetrievalError: If the query fails.
        """
        ids = sorted(set(resource_ids))
        if not ids:
            return {}

        stmt = select(Resource.id, Resource.share_url, Resource.title).where(
            Resource.id.in_(ids)
        )
        rows = await self._rows(stmt, f"labels for {len(ids)} resources")
        return {
            row.id: ResourceLabel(url=row.share_url or "", title=row.title or "")
            for row in rows
        }

    async def resolve_standard_label(self, standard_id: int) -> StandardLabel:
        """Resolve the title of a standard.

        Returns:
            StandardLabel, with an empty title if the standard does not exist.

        Raises:
            RetrievalError: If the query fails.
        """
        labels = await self.resolve_standard_labels([standard_id])
        return labels.get(standard_id, StandardLabel())

    async def resolve_standard_labels(
        self, standard_ids: Iterable[int]
    ) -> dict[int, StandardLabel]:
        """Resolve titles for several standards in one query.

        Raises:
            RetrievalError: If the query fails.
        """
        ids = sorted(set(standard_ids))
        if not ids:
            return {}

        stmt = select(Standard.id, Standard.title).where(Standard.id.in_(ids))
        rows = await self._rows(stmt, f"labels for {len(ids)} standards")
        return {row.id: StandardLabel(title=row.title or "") for row in rows}

    # =========================================================================
    # Leaf getters
    # =========================================================================

    async def get_resource(self, resource_id: int) -> Resource | None:
        """Get a resource by id, or None if it does not exist."""
        rows = await self._scalars(
            select(Resource).where(Resource.id == resource_id),
            f"resource {resource_id}",
        )
        return rows[0] if rows else None

    async def get_standard(self, standard_id: int) -> Standard | None:
        """Get a standard by id, or None if it does not exist."""
        rows = await self._scalars(
            select(Standard).where(Standard.id == standard_id),
            f"standard {standard_id}",
        )
        return rows[0] if rows else None

    async def get_alignments(self, resource_id: int) -> list[int]:
        """Get the ids of all standards a resource is aligned to."""
        return await self._scalars(
            select(Alignment.standard_id).where(Alignment.resource_id == resource_id),
            f"alignments for resource {resource_id}",
        )

    async def list_users(self) -> list[User]:
        """List users that have at least one assessment run."""
        stmt = (
            select(User)
            .join(AssessmentRun, AssessmentRun.user_id == User.id)
            .distinct()
        )
        users = await self._scalars(stmt, "users")
        logger.info("Retrieved %d users", len(users))
        return users

    async def list_assessment_runs(self, grade: str | None = None) -> list[AssessmentRun]:
        """List finished assessment runs with a positive score.

        Args:
            grade: Optional grade selector ("K" or a number). When given,
                only runs of assessments covering that grade are returned.

        Returns:
            List of AssessmentRun entities.

        Raises:
            ValueError: If grade is neither "K" nor an integer.
            RetrievalError: If the query fails.
        """
        stmt = (
            select(AssessmentRun)
            .join(Resource, Resource.id == AssessmentRun.assessment_id)
            .where(
                AssessmentRun.finished_at.is_not(None),
                AssessmentRun.score > 0,
            )
            .distinct()
        )
        if grade:
            level = 0 if grade.upper() == KINDERGARTEN else int(grade)
            stmt = stmt.where(Resource.min_grade <= level, Resource.max_grade >= level)

        runs = await self._scalars(stmt, f"assessment runs for grade {grade or 'any'}")
        logger.info("Retrieved %d runs", len(runs))
        return runs
