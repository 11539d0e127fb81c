# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions for the ratings export.

- RatingsExportError: Base exception for export failures
- ScanError: A SCAN step failed; the enumeration is over
- CursorConsumedError: A keyspace cursor was iterated twice
- ReportBufferClosedError: A row was appended after the report was rendered
"""


class RatingsExportError(Exception):
    """Base exception for ratings export errors.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying exception, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class ScanError(RatingsExportError):
    """Raised when a keyspace scan step fails."""

    pass


class CursorConsumedError(RatingsExportError):
    """Raised when a keyspace cursor is iterated more than once."""

    pass


class ReportBufferClosedError(RatingsExportError):
    """Raised when appending to a report that was already rendered."""

    pass
