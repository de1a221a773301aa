"""
Marker annotations and their persistence.

MarkerStore keeps markers in insertion order; that order gives on-screen
numbering and the 1-based persisted index. Persistence replaces the whole
collection for a measurement. Saves through one store are serialized and
each save writes the snapshot taken when it starts.

The store does not know the frame size; callers place markers on valid
pixels and the view session reports stored markers that fall outside the
frame it displays.
"""

import asyncio
import json
import logging
import os
import tempfile
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .exceptions import MarkerNotFoundError, MarkerPersistenceError
from .models import Marker
from .settings import DEFAULT_SETTINGS, Settings

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("element_type", "final_action")
RECORD_KEYS = ("index", "x", "y", "temperature", "elementType", "finalAction")


def _new_marker_id() -> str:
    return uuid.uuid4().hex


def validate_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Check a persistence record has every key and a positive integer index."""
    missing = [k for k in RECORD_KEYS if k not in record]
    if missing:
        raise ValueError(f"Marker record missing keys: {', '.join(missing)}")
    if int(record["index"]) < 1:
        raise ValueError(f"Marker record index must be >= 1, got {record['index']}")
    return record


class MarkerRepository(ABC):
    """Storage collaborator: replace-all persistence keyed by measurement id."""

    @abstractmethod
    async def load(self, measurement_id: str) -> List[Dict[str, Any]]:
        """Return the stored records for a measurement (any order; each has an index)."""

    @abstractmethod
    async def save(self, measurement_id: str, records: List[Dict[str, Any]]) -> None:
        """Replace every stored record for a measurement with records."""


class InMemoryMarkerRepository(MarkerRepository):
    """Dict-backed repository; each save swaps the measurement's list in one assignment."""

    def __init__(self, initial: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self._data: Dict[str, List[Dict[str, Any]]] = {
            key: [dict(r) for r in records] for key, records in (initial or {}).items()
        }
        self.save_calls = 0

    async def load(self, measurement_id: str) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._data.get(measurement_id, [])]

    async def save(self, measurement_id: str, records: List[Dict[str, Any]]) -> None:
        self.save_calls += 1
        self._data[measurement_id] = [dict(validate_record(r)) for r in records]


class JsonMarkerRepository(MarkerRepository):
    """One JSON file per measurement under a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, measurement_id: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in str(measurement_id))
        if not safe.strip("."):
            raise ValueError(f"Invalid measurement id: {measurement_id!r}")
        return self.directory / f"{safe}.markers.json"

    async def load(self, measurement_id: str) -> List[Dict[str, Any]]:
        path = self.path_for(measurement_id)
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise MarkerPersistenceError(f"Cannot read markers from {path}: {e}", measurement_id) from e
        if not isinstance(payload, dict) or not isinstance(payload.get("markers"), list):
            raise MarkerPersistenceError(f"Malformed marker file: {path}", measurement_id)
        return payload["markers"]

    async def save(self, measurement_id: str, records: List[Dict[str, Any]]) -> None:
        path = self.path_for(measurement_id)
        payload = {"measurementId": measurement_id, "markers": [validate_record(r) for r in records]}
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write beside the target then rename over it
            fd, tmp_name = tempfile.mkstemp(dir=str(self.directory), suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise MarkerPersistenceError(f"Cannot write markers to {path}: {e}", measurement_id) from e


def markers_from_records(records: Iterable[Dict[str, Any]], settings: Settings = DEFAULT_SETTINGS) -> List[Marker]:
    """Rebuild markers ordered by their persisted index."""
    ordered = sorted((validate_record(r) for r in records), key=lambda r: int(r["index"]))
    return [
        Marker(
            id=_new_marker_id(),
            x=int(r["x"]),
            y=int(r["y"]),
            temperature=float(r["temperature"]),
            element_type=r["elementType"] if r["elementType"] is not None else settings.default_element_type,
            final_action=r["finalAction"] if r["finalAction"] is not None else settings.default_final_action,
        )
        for r in ordered
    ]


class MarkerStore:
    """Ordered marker collection for one measurement."""

    def __init__(self, measurement_id: Optional[str] = None, repository: Optional[MarkerRepository] = None,
                 settings: Settings = DEFAULT_SETTINGS):
        self.measurement_id = measurement_id
        self.repository = repository
        self.settings = settings
        self._markers: List[Marker] = []
        self._save_lock: Optional[asyncio.Lock] = None
        self._lock_loop = None
        self.pending_saves = 0

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self):
        return iter(list(self._markers))

    @property
    def markers(self) -> List[Marker]:
        return list(self._markers)

    @property
    def is_saving(self) -> bool:
        return self.pending_saves > 0

    def _index_of(self, marker_id: str) -> int:
        for i, marker in enumerate(self._markers):
            if marker.id == marker_id:
                return i
        raise MarkerNotFoundError(marker_id)

    def get(self, marker_id: str) -> Marker:
        return self._markers[self._index_of(marker_id)]

    def number_of(self, marker_id: str) -> int:
        """1-based on-screen number of a marker."""
        return self._index_of(marker_id) + 1

    def add(self, x: int, y: int, temperature: float) -> Marker:
        marker = Marker(
            id=_new_marker_id(),
            x=int(x),
            y=int(y),
            temperature=float(temperature),
            element_type=self.settings.default_element_type,
            final_action=self.settings.default_final_action,
        )
        self._markers.append(marker)
        logger.debug("Added marker %s at (%d, %d)", marker.id, marker.x, marker.y)
        return marker

    def update(self, marker_id: str, **changes) -> Marker:
        """Change element_type and/or final_action of a marker."""
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValueError(f"Cannot update marker fields: {', '.join(unknown)}")
        i = self._index_of(marker_id)
        self._markers[i] = replace(self._markers[i], **changes)
        return self._markers[i]

    def remove(self, marker_id: str) -> Marker:
        return self._markers.pop(self._index_of(marker_id))

    def clear(self):
        self._markers = []

    def load_all(self, records: Iterable[Dict[str, Any]]) -> List[Marker]:
        """Replace the collection with stored records, ordered by their index field."""
        self._markers = markers_from_records(records, self.settings)
        return self.markers

    def to_records(self) -> List[Dict[str, Any]]:
        return [m.to_record(i + 1) for i, m in enumerate(self._markers)]

    def _require_repository(self):
        if self.repository is None or self.measurement_id is None:
            raise MarkerPersistenceError("No marker repository or measurement id configured", self.measurement_id)

    async def load(self) -> List[Marker]:
        """Fetch and replace the collection; on failure the collection is emptied and the error raised."""
        self._require_repository()
        try:
            records = await self.repository.load(self.measurement_id)
            return self.load_all(records)
        except MarkerPersistenceError:
            self.clear()
            raise
        except Exception as e:
            self.clear()
            raise MarkerPersistenceError(f"Failed to load markers: {e}", self.measurement_id) from e

    async def save_all(self) -> int:
        """
        Persist the current collection as a full replace and return the number of records written.

        Concurrent calls queue behind each other. Local markers are never
        rolled back; on failure MarkerPersistenceError is raised and a retry
        writes the then-current collection.
        """
        self._require_repository()
        loop = asyncio.get_running_loop()
        if self._save_lock is None or self._lock_loop is not loop:
            self._save_lock = asyncio.Lock()
            self._lock_loop = loop
        self.pending_saves += 1
        try:
            async with self._save_lock:
                records = self.to_records()
                try:
                    await self.repository.save(self.measurement_id, records)
                except MarkerPersistenceError:
                    raise
                except Exception as e:
                    raise MarkerPersistenceError(f"Failed to save markers: {e}", self.measurement_id) from e
                logger.info("Saved %d markers for measurement %s", len(records), self.measurement_id)
                return len(records)
        finally:
            self.pending_saves -= 1
