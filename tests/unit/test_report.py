# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for report rows and the report buffer."""

import pytest

from opened_catalog.domains.ratings import (
    ReportBuffer,
    ReportBufferClosedError,
    ReportRow,
    ResourceRef,
)


class TestResourceRef:
    """Tests for extracting resource ids from keys."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("resource:42", 42),
            ("resource:4123630", 4123630),
            ("resource:v2:17", 17),
        ],
    )
    def test_numeric_suffix(self, key, expected):
        ref = ResourceRef.from_key(key)

        assert ref.id == expected
        assert ref.label == ""

    @pytest.mark.parametrize("key", ["resource:", "resource:abc", "resource:42x"])
    def test_no_numeric_suffix(self, key):
        assert ResourceRef.from_key(key).id is None


class TestReportRow:
    """Tests for flattening rows into fields."""

    def test_fields_alternate_label_and_rating(self):
        row = ReportRow("http://x/42", (("Counting", "3"), ("Shapes", "1")))

        assert row.fields() == ["http://x/42", "Counting", "3", "Shapes", "1"]

    def test_row_without_ratings(self):
        assert ReportRow("http://x/42").fields() == ["http://x/42"]


class TestReportBuffer:
    """Tests for the per-run report buffer."""

    def test_header_first(self):
        buffer = ReportBuffer(header="Resource,Rating")

        assert buffer.render() == "Resource,Rating\n"
        assert buffer.row_count == 0

    def test_rows_in_append_order(self):
        buffer = ReportBuffer(header="Resource,Rating")
        buffer.append(ReportRow("http://x/42", (("Counting", "3"),)))
        buffer.append(ReportRow("http://x/7", (("", "5"),)))

        assert buffer.render() == (
            "Resource,Rating\n"
            "http://x/42,Counting,3\n"
            "http://x/7,,5\n"
        )
        assert buffer.row_count == 2

    def test_empty_resource_label_keeps_position(self):
        buffer = ReportBuffer(header="Resource,Rating")
        buffer.append(ReportRow("", (("Counting", "3"),)))

        assert buffer.render().splitlines()[1] == ",Counting,3"

    def test_fields_containing_commas_are_quoted(self):
        buffer = ReportBuffer(header="Resource,Rating")
        buffer.append(ReportRow("http://x/1", (("Count, compare", "2"),)))

        assert buffer.render().splitlines()[1] == 'http://x/1,"Count, compare",2'

    def test_append_after_render_raises(self):
        buffer = ReportBuffer(header="Resource,Rating")
        buffer.render()

        assert buffer.closed
        with pytest.raises(ReportBufferClosedError):
            buffer.append(ReportRow("http://x/42"))
