"""Accumulates streamed row operations into a column/row snapshot."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Iterable, Mapping

from rb_model.formatters import prune_empty_columns

logger = logging.getLogger(__name__)


class ResultsAggregator:
    """Applies ``insert_or_modify`` / ``delete`` operations keyed by row id.

    Columns grow in first-seen order as rows introduce new keys; rows without
    an id get a generated one.
    """

    def __init__(self) -> None:
        self.columns: list[str] = []
        self._rows: dict[str, dict[str, Any]] = {}
        self._anonymous = itertools.count(1)

    def reset(self) -> None:
        self.columns = []
        self._rows = {}

    def __len__(self) -> int:
        return len(self._rows)

    def upsert(self, data: Mapping[str, Any], row_id: Any = None) -> str:
        for key in data:
            if key not in self.columns:
                self.columns.append(str(key))
        key = str(row_id) if row_id is not None else f"_row{next(self._anonymous)}"
        self._rows[key] = dict(data)
        return key

    def delete(self, row_id: Any) -> bool:
        return self._rows.pop(str(row_id), None) is not None

    def apply(self, operations: Iterable[Mapping[str, Any]]) -> None:
        for op in operations:
            deleted = (op.get("delete") or {}).get("ids")
            if isinstance(deleted, list):
                for row_id in deleted:
                    self.delete(row_id)
            rows = (op.get("insert_or_modify") or {}).get("rows")
            if not isinstance(rows, list):
                continue
            for row in rows:
                if not isinstance(row, Mapping):
                    continue
                data = row.get("data", row)
                if isinstance(data, Mapping):
                    self.upsert(data, row.get("id"))

    def snapshot(self, *, prune: bool = False) -> tuple[list[str], list[list[Any]]]:
        rows = [[data.get(col) for col in self.columns] for data in self._rows.values()]
        if prune:
            return prune_empty_columns(self.columns, rows)
        return list(self.columns), rows
