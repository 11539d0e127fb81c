# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ratings report rows and the per-run report buffer.

Report layout:

    Resource,Rating
    <resource url>,<standard title>,<rating>,<standard title>,<rating>,...

The header always names two columns while data rows carry one field
plus a label/rating pair per rated standard, so rows vary in width.
Consumers must not assume a fixed column count.
"""

import csv
import io
import re
from dataclasses import dataclass, field

from opened_catalog.domains.ratings.exceptions import ReportBufferClosedError

_RESOURCE_ID_RE = re.compile(r"(\d+)$")


@dataclass(frozen=True)
class ResourceRef:
    """A resource identifier with its resolved label.

    Attributes:
        id: Resource id, None if the key carried no numeric suffix.
        label: Resolved share URL, empty if unresolved.
    """

    id: int | None
    label: str = ""

    @classmethod
    def from_key(cls, key: str) -> "ResourceRef":
        """Build an unresolved reference from a key such as "resource:42"."""
        match = _RESOURCE_ID_RE.search(key)
        return cls(id=int(match.group(1)) if match else None)


@dataclass(frozen=True)
class ReportRow:
    """One report line: a resource label and its rated standards.

    Attributes:
        resource_label: Resource share URL, empty if unresolved.
        ratings: (standard title, rating) pairs in hash order.
    """

    resource_label: str
    ratings: tuple[tuple[str, str], ...] = ()

    def fields(self) -> list[str]:
        """Flatten the row into its comma-separated fields."""
        values = [self.resource_label]
        for standard_label, rating in self.ratings:
            values.extend((standard_label, rating))
        return values


@dataclass
class ReportBuffer:
    """Append-only text of one export run.

    render() freezes the buffer: further appends raise
    ReportBufferClosedError.
    """

    header: str
    _stream: io.StringIO = field(default_factory=io.StringIO, init=False, repr=False)
    _rows: int = field(default=0, init=False)
    _closed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self._writer = csv.writer(self._stream, lineterminator="\n")
        self._stream.write(f"{self.header}\n")

    @property
    def row_count(self) -> int:
        return self._rows

    @property
    def closed(self) -> bool:
        return self._closed

    def append(self, row: ReportRow) -> None:
        if self._closed:
            raise ReportBufferClosedError("Report was already rendered")
        self._writer.writerow(row.fields())
        self._rows += 1

    def render(self) -> str:
        """Return the full report text and close the buffer."""
        self._closed = True
        return self._stream.getvalue()
