"""Whole-collection snapshot persistence over a single storage slot.

The snapshot is one JSON document::

    {"version": 1, "dimension": 768, "records": [{...}, ...]}

A bare JSON array of records is also accepted on load. Failures never
propagate: a missing or unreadable snapshot loads as an empty collection,
and a failed write is reported as a PersistenceWarning.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from typing import Any

from health_kb.core.errors import PersistenceWarning
from health_kb.core.models import VectorRecord
from health_kb.core.storage.base import StorageBackend
from health_kb.utils import serialization

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def _report(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, PersistenceWarning, stacklevel=3)


class SnapshotPersistence:
    """Saves and loads the full record collection under one named slot.

    Args:
        backend: Storage backend holding the slot
        slot: Slot name
        dimension: Expected vector length; records of another length are
            dropped on load. None accepts any length.
    """

    def __init__(
        self,
        backend: StorageBackend,
        slot: str = "vectorStore",
        dimension: int | None = None,
    ) -> None:
        self._backend = backend
        self._slot = slot
        self._dimension = dimension

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def slot(self) -> str:
        return self._slot

    def encode(self, records: Sequence[VectorRecord]) -> str:
        return serialization.dumps(
            {
                "version": SNAPSHOT_VERSION,
                "dimension": self._dimension,
                "records": [r.to_dict() for r in records],
            }
        )

    def decode(self, data: str) -> list[VectorRecord]:
        """Parse a snapshot.

        Individual records that cannot be read are logged and skipped.

        Raises:
            ValueError, KeyError, TypeError: if the snapshot document itself
                is malformed.
        """
        parsed: Any = serialization.loads(data)
        if isinstance(parsed, dict):
            version = parsed.get("version")
            if version != SNAPSHOT_VERSION:
                raise ValueError(f"unsupported snapshot version {version!r}")
            items = parsed["records"]
        else:
            items = parsed
        if not isinstance(items, list):
            raise TypeError("snapshot records must be a list")

        records: list[VectorRecord] = []
        seen: set[str] = set()
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                logger.warning("Dropping snapshot entry %d: not an object", index)
                continue
            try:
                record = VectorRecord.from_dict(item)
            except (ValueError, KeyError, TypeError) as exc:
                logger.warning(
                    "Dropping unreadable record %r at index %d: %r",
                    item.get("id"),
                    index,
                    exc,
                )
                continue
            if self._dimension is not None and record.dimension != self._dimension:
                logger.warning(
                    "Dropping record %s with %d dimensions (store uses %d)",
                    record.id,
                    record.dimension,
                    self._dimension,
                )
                continue
            if record.id in seen:
                logger.warning("Dropping duplicate record id %s", record.id)
                continue
            seen.add(record.id)
            records.append(record)
        return records

    def save(self, records: Sequence[VectorRecord]) -> bool:
        """Overwrite the slot with ``records``.

        Returns False (after logging and emitting PersistenceWarning) if the
        backend rejected the write.
        """
        try:
            self._backend.write(self._slot, self.encode(records))
        except Exception as exc:
            _report(f"Could not save knowledge store snapshot to {self._slot!r}: {exc}")
            return False
        logger.debug("Saved %d records to slot %r", len(records), self._slot)
        return True

    def load(self) -> list[VectorRecord]:
        """Read the slot. Missing or unreadable content yields an empty list."""
        try:
            data = self._backend.read(self._slot)
        except Exception as exc:
            _report(f"Could not read knowledge store snapshot {self._slot!r}: {exc}")
            return []
        if data is None:
            return []

        try:
            records = self.decode(data)
        except (ValueError, KeyError, TypeError) as exc:
            _report(
                f"Ignoring corrupt knowledge store snapshot {self._slot!r}: {exc}"
            )
            return []
        logger.debug("Loaded %d records from slot %r", len(records), self._slot)
        return records

    def close(self) -> None:
        self._backend.close()
