# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Local filesystem report sink, used in development."""

import asyncio
import logging
import os
from pathlib import Path

from opened_catalog.infrastructure.storage.base import ReportSink, StorageError

logger = logging.getLogger(__name__)


class LocalReportSink(ReportSink):
    """Report sink writing files into a base directory.

    Files are written to a temporary sibling and renamed into place, so a
    failed write never leaves a half-written report behind.
    """

    def __init__(self, base_path: str | Path = "./reports"):
        self.base_path = Path(base_path).resolve()

    def _resolve_path(self, name: str) -> Path:
        """Resolve a report name to a path inside base_path."""
        full_path = (self.base_path / Path(name).as_posix().lstrip("/")).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError as e:
            raise StorageError(f"Invalid report name: {name} (outside base directory)", e) from e
        return full_path

    def _write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, path)
        finally:
            tmp_path.unlink(missing_ok=True)

    async def put(self, name: str, content: str) -> None:
        """Write the report to base_path/name."""
        path = self._resolve_path(name)
        try:
            await asyncio.to_thread(self._write, path, content)
        except OSError as e:
            raise StorageError(f"Failed to write {path}", e) from e

        logger.info("Wrote report %s (%d chars)", path, len(content))
