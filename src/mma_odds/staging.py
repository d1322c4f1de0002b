"""Editable copy of the export table kept apart from the market selection."""

from __future__ import annotations

import copy
import logging
from typing import Callable, Sequence

from .rows import EXPORT_COLUMNS, ExportRow

logger = logging.getLogger(__name__)


class StagingStore:
    """Holds a deep copy of assembled rows for manual edits before export."""

    def __init__(self) -> None:
        self._rows: list[ExportRow] = []
        self._committed = False

    @property
    def rows(self) -> list[ExportRow]:
        return self._rows

    @property
    def is_open(self) -> bool:
        return bool(self._rows)

    @property
    def committed(self) -> bool:
        return self._committed

    def __len__(self) -> int:
        return len(self._rows)

    def open(self, rows: Sequence[ExportRow]) -> list[ExportRow]:
        self._rows = copy.deepcopy(list(rows))
        self._committed = False
        return self._rows

    def set_cell(self, row_index: int, column: str, value: str) -> bool:
        """Edit one cell; missing rows and unknown columns are ignored."""

        if not 0 <= row_index < len(self._rows):
            logger.debug("Ignoring edit for missing row %s", row_index)
            return False
        if column not in EXPORT_COLUMNS:
            logger.debug("Ignoring edit for unknown column %r", column)
            return False
        self._rows[row_index].set(column, value)
        return True

    def commit(self) -> bool:
        if not self._rows:
            return False
        self._committed = True
        return True

    def close(self) -> None:
        if not self._committed:
            self._rows = []

    def discard(self) -> None:
        self._rows = []
        self._committed = False

    def export_source(self, fallback: Callable[[], list[ExportRow]]) -> list[ExportRow]:
        if self._rows:
            return self._rows
        return fallback()


__all__ = ["StagingStore"]
