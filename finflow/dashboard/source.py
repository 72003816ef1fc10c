"""Snapshot sources.

The engine never fetches data. A source hands it one complete snapshot of
raw records, fetched once up front.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field

from finflow.core.exceptions import SnapshotError
from finflow.engine.normalizer import extract_records

logger = logging.getLogger(__name__)


class RawSnapshot(BaseModel):
    """Raw records as served by the data store."""

    transactions: list[Any] = Field(default_factory=list)
    budgets: list[Any] = Field(default_factory=list)
    categories: list[Any] = Field(default_factory=list)


class SnapshotSource(Protocol):
    """Anything that can supply a raw snapshot."""

    def fetch_snapshot(self) -> RawSnapshot: ...


class JsonSnapshotSource:
    """Reads a JSON export of the data store.

    The file holds an object with ``transactions``, ``budgets`` and
    optionally ``categories``; each may be a bare list or an API envelope.
    The file is read on first use and cached for the lifetime of the source.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._snapshot: RawSnapshot | None = None

    def fetch_snapshot(self) -> RawSnapshot:
        """Return the cached snapshot, reading the file on first call.

        Raises:
            SnapshotError: If the file is missing or not valid JSON.
        """
        if self._snapshot is None:
            self._snapshot = self._read()
        return self._snapshot

    def _read(self) -> RawSnapshot:
        if not self.path.exists():
            raise SnapshotError("Snapshot file not found", {"path": str(self.path)})

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Invalid JSON: {e.msg}", {"path": str(self.path)}) from e

        if not isinstance(payload, dict):
            raise SnapshotError("Snapshot root must be an object", {"path": str(self.path)})

        snapshot = RawSnapshot(
            transactions=extract_records(payload.get("transactions"), "transactions"),
            budgets=extract_records(payload.get("budgets"), "budgets"),
            categories=extract_records(payload.get("categories"), "categories"),
        )
        logger.info(
            "Loaded snapshot %s: %d transactions, %d budgets",
            self.path,
            len(snapshot.transactions),
            len(snapshot.budgets),
        )
        return snapshot
