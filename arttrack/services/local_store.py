"""
No-backend persistence.

A tiny key/value store with one JSON file per key, plus a CommissionStore
that keeps the whole collection under a single versioned key. Unreadable
content never stops the app: it is logged and replaced by the bundled
default dataset.
"""
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from arttrack.demo_data import get_demo_commissions
from arttrack.services.errors import StoreError, PermissionDeniedError, TransportError
from arttrack.services.pipeline import CommissionStatus
from arttrack.services.records import (
    CommissionRecord,
    CommissionData,
    UNKNOWN_ARTIST,
    newest_first,
    today_str,
)
from arttrack.services.store import CommissionStore

logger = logging.getLogger(__name__)

COMMISSIONS_KEY = "arttrack_commissions_zh_v1"
TYPES_KEY = "arttrack_commission_types_v1"


class LocalStorage:
    """Directory-backed key/value storage for serialized JSON strings."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except PermissionError as e:
            raise PermissionDeniedError() from e
        except OSError as e:
            raise TransportError(str(e)) from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, self._path(key))
        except PermissionError as e:
            raise PermissionDeniedError() from e
        except OSError as e:
            raise TransportError(str(e)) from e

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass


def serialize_commissions(records: List[CommissionRecord]) -> str:
    return json.dumps([c.to_storage() for c in records], ensure_ascii=False)


def load_commissions(raw: Optional[str]) -> List[CommissionRecord]:
    """
    Parse a stored collection.

    Rules:
    - Nothing stored => default dataset
    - Malformed JSON or a non-array => default dataset, failure logged
    - Records without an artistId are migrated to "Unknown"
    - Any record failing validation => default dataset, failure logged
    """
    if raw is None:
        return get_demo_commissions()

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        logger.error("Failed to parse commissions from local storage: %s", e)
        return get_demo_commissions()

    if not isinstance(parsed, list):
        logger.error("Stored commissions are not an array (%s), using defaults", type(parsed).__name__)
        return get_demo_commissions()

    records = []
    try:
        for item in parsed:
            if not isinstance(item, dict):
                raise ValueError(f"commission entry is {type(item).__name__}, expected object")
            item = dict(item)
            item["artistId"] = item.get("artistId") or UNKNOWN_ARTIST
            records.append(CommissionRecord.model_validate(item))
    except (ValidationError, ValueError) as e:
        logger.error("Stored commissions failed validation, using defaults: %s", e)
        return get_demo_commissions()

    return records


class LocalCommissionStore(CommissionStore):
    """Keeps the whole collection as one JSON array under COMMISSIONS_KEY."""

    def __init__(self, storage: LocalStorage, key: str = COMMISSIONS_KEY):
        self.storage = storage
        self.key = key

    def _load(self) -> List[CommissionRecord]:
        return load_commissions(self.storage.get_item(self.key))

    def _save(self, records: List[CommissionRecord]) -> None:
        self.storage.set_item(self.key, serialize_commissions(records))

    def list_all(self) -> List[CommissionRecord]:
        return newest_first(self._load())

    def query_owner(self, artist_id: str) -> List[CommissionRecord]:
        return [c for c in self.list_all() if c.artist_id == artist_id]

    def _next_id(self, records: List[CommissionRecord]) -> str:
        taken = {c.id for c in records}
        stamp = int(time.time() * 1000)
        while f"c-{stamp}" in taken:
            stamp += 1
        return f"c-{stamp}"

    def create(self, data: CommissionData) -> CommissionRecord:
        records = self._load()
        record = data.with_id(self._next_id(records))
        self._save([record] + records)
        return record

    def set_status(self, commission_id: str, status: CommissionStatus) -> None:
        records = self._load()
        for c in records:
            if c.id == commission_id:
                c.status = CommissionStatus(status)
                c.last_updated = max(today_str(), c.date_added)
                break
        else:
            raise StoreError(f"Commission {commission_id} not found")
        self._save(records)

    def delete(self, commission_id: str) -> None:
        records = self._load()
        remaining = [c for c in records if c.id != commission_id]
        if len(remaining) == len(records):
            raise StoreError(f"Commission {commission_id} not found")
        self._save(remaining)
