# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Custom exceptions for the OpenEd partner API client."""


class PartnerAPIError(Exception):
    """Error from the OpenEd partner API.

    Raised when the API is unreachable, returns an error status or
    returns a body that cannot be parsed.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code from API response.
        response_body: Raw response body if available.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with status code."""
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message
