"""Commission record shape shared by the stores, the engine and the views."""
from datetime import datetime, timezone
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from arttrack.services.pipeline import CommissionStatus, is_active


UNKNOWN_ARTIST = "Unknown"


def today_str() -> str:
    """Calendar date for dateAdded/lastUpdated, UTC, as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


class CommissionRecord(BaseModel):
    """One commission as held in memory and written to JSON storage.

    Field names are snake_case in Python; the stored/JSON form uses the
    camelCase aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    artist_id: str = Field(alias="artistId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    client_name: str = Field(alias="clientName")
    title: str
    description: str = ""
    type: str
    price: float = Field(default=0, ge=0)
    contact: Optional[str] = None
    notes: Optional[str] = None
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")
    status: CommissionStatus = CommissionStatus.QUEUE
    date_added: str = Field(alias="dateAdded")
    last_updated: str = Field(alias="lastUpdated")

    @property
    def is_active(self) -> bool:
        return is_active(self.status)

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CommissionData(BaseModel):
    """A commission without its id, as handed to a store's create()."""

    model_config = ConfigDict(populate_by_name=True)

    artist_id: str = Field(alias="artistId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    client_name: str = Field(alias="clientName")
    title: str
    description: str = ""
    type: str
    price: float = Field(default=0, ge=0)
    contact: Optional[str] = None
    notes: Optional[str] = None
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")
    status: CommissionStatus = CommissionStatus.QUEUE
    date_added: str = Field(alias="dateAdded")
    last_updated: str = Field(alias="lastUpdated")

    def with_id(self, commission_id: str) -> CommissionRecord:
        return CommissionRecord(id=commission_id, **self.model_dump())


def newest_first(records: List[CommissionRecord]) -> List[CommissionRecord]:
    """Order by dateAdded descending; ties keep their incoming order."""
    return sorted(records, key=lambda c: c.date_added, reverse=True)
