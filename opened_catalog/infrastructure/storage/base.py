# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Report sink interface.

A report sink stores one named text artifact per call. Writing a name
that already exists replaces it; there is no append and no versioning.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """Exception raised when a report cannot be stored.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying storage client error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the storage error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class ReportSink(ABC):
    """Durable destination for exported reports."""

    @abstractmethod
    async def put(self, name: str, content: str) -> None:
        """Store content under name, replacing any previous artifact.

        Args:
            name: Artifact name (e.g. "K-ratings.csv").
            content: Full report text.

        Raises:
            StorageError: If the artifact could not be stored.
        """
        ...
