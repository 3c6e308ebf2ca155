"""
Commission Type Registry

The allowed `type` labels for new commissions. Unlike the status pipeline
this list is open-ended: each artist can add and remove labels from the
creation form. Removing a label never touches existing commissions, so
records may carry a type that is no longer listed.

Stored as one JSON object under TYPES_KEY, keyed by artist display name.
"""
import json
import logging
from typing import Dict, List

from arttrack.demo_data import DEFAULT_COMMISSION_TYPES, DEFAULT_FORM_TYPE
from arttrack.services.errors import LocalValidationError
from arttrack.services.local_store import LocalStorage, TYPES_KEY

logger = logging.getLogger(__name__)

MAX_TYPE_LENGTH = 100


class CommissionTypeRegistry:
    def __init__(self, storage: LocalStorage, artist_id: str):
        self.storage = storage
        self.artist_id = artist_id

    def _load_all(self) -> Dict[str, List[str]]:
        raw = self.storage.get_item(TYPES_KEY)
        if raw is None:
            return {}
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.error("Failed to parse commission types from local storage: %s", e)
            return {}
        if not isinstance(parsed, dict):
            logger.error("Stored commission types are not an object, using defaults")
            return {}
        return parsed

    def _save(self, types: List[str]) -> None:
        everything = self._load_all()
        everything[self.artist_id] = types
        self.storage.set_item(TYPES_KEY, json.dumps(everything, ensure_ascii=False))

    def list(self) -> List[str]:
        types = self._load_all().get(self.artist_id)
        if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
            if types is not None:
                logger.error("Commission types for %s are malformed, using defaults", self.artist_id)
            return list(DEFAULT_COMMISSION_TYPES)
        return types

    def default_type(self) -> str:
        types = self.list()
        if DEFAULT_FORM_TYPE in types:
            return DEFAULT_FORM_TYPE
        return types[0]

    def add(self, label: str) -> List[str]:
        label = (label or "").strip()
        if not label:
            raise LocalValidationError("請輸入類型名稱")
        if len(label) > MAX_TYPE_LENGTH:
            raise LocalValidationError("類型名稱太長了")
        types = self.list()
        if label not in types:
            types.append(label)
            self._save(types)
        return types

    def remove(self, label: str) -> List[str]:
        types = self.list()
        if label not in types:
            return types
        if len(types) == 1:
            raise LocalValidationError("至少需要保留一個委託類型")
        types.remove(label)
        self._save(types)
        return types

    def validate(self, label: str) -> str:
        """Return the label if it is allowed, else raise LocalValidationError."""
        label = (label or "").strip()
        if not label:
            return self.default_type()
        if label not in self.list():
            raise LocalValidationError(f"未知的委託類型：{label}")
        return label
