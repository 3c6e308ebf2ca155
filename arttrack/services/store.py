"""
Commission persistence collaborators.

Every store returns CommissionRecord objects and raises StoreError subclasses.
No failure is ever reported through a None/False return.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from decimal import Decimal
from typing import List

from sqlalchemy.exc import SQLAlchemyError, ProgrammingError, OperationalError

from arttrack.models import Commission
from arttrack.services.errors import (
    StoreError,
    PermissionDeniedError,
    IndexUnavailableError,
    TransportError,
)
from arttrack.services.pipeline import CommissionStatus
from arttrack.services.records import CommissionRecord, CommissionData, today_str

logger = logging.getLogger(__name__)


class CommissionStore(ABC):
    """Contract consumed by the mutation coordinator and the initial load."""

    @abstractmethod
    def list_all(self) -> List[CommissionRecord]:
        """All commissions, newest dateAdded first."""

    @abstractmethod
    def query_owner(self, artist_id: str) -> List[CommissionRecord]:
        """Owner-scoped query; may raise IndexUnavailableError."""

    @abstractmethod
    def create(self, data: CommissionData) -> CommissionRecord:
        """Persist a new commission and return it with its id assigned."""

    @abstractmethod
    def set_status(self, commission_id: str, status: CommissionStatus) -> None:
        """Change status and stamp a fresh lastUpdated."""

    @abstractmethod
    def delete(self, commission_id: str) -> None:
        pass

    def list_for_owner(self, artist_id: str) -> List[CommissionRecord]:
        """
        Commissions owned by one artist, newest first.

        If the owner query fails for any reason other than permissions,
        fall back to filtering list_all(). Permission errors always propagate.
        """
        try:
            return self.query_owner(artist_id)
        except PermissionDeniedError:
            raise
        except StoreError as e:
            logger.error(
                "Owner query failed for %s (likely missing index), filtering list_all(): %s",
                artist_id,
                e,
            )
            return [c for c in self.list_all() if c.artist_id == artist_id]


def _translate_error(exc: SQLAlchemyError) -> StoreError:
    text = str(exc)
    lowered = text.lower()
    if isinstance(exc, (ProgrammingError, OperationalError)):
        if "permission denied" in lowered:
            return PermissionDeniedError()
        if "index" in lowered:
            return IndexUnavailableError(text)
    return TransportError(text)


def _to_record(row: Commission) -> CommissionRecord:
    return CommissionRecord(
        id=row.id,
        artist_id=row.artist_id,
        user_id=row.user_id,
        client_name=row.client_name,
        title=row.title,
        description=row.description or "",
        type=row.type,
        price=float(row.price or 0),
        contact=row.contact,
        notes=row.notes,
        thumbnail_url=row.thumbnail_url,
        status=CommissionStatus(row.status),
        date_added=row.date_added,
        last_updated=row.last_updated,
    )


class SqlCommissionStore(CommissionStore):
    """Store backed by the `commissions` table."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise _translate_error(e) from e
        finally:
            db.close()

    def list_all(self) -> List[CommissionRecord]:
        with self._session() as db:
            rows = (
                db.query(Commission)
                .order_by(Commission.date_added.desc(), Commission.created_at.desc())
                .all()
            )
            return [_to_record(row) for row in rows]

    def query_owner(self, artist_id: str) -> List[CommissionRecord]:
        with self._session() as db:
            rows = (
                db.query(Commission)
                .filter(Commission.artist_id == artist_id)
                .order_by(Commission.date_added.desc(), Commission.created_at.desc())
                .all()
            )
            return [_to_record(row) for row in rows]

    def create(self, data: CommissionData) -> CommissionRecord:
        record = data.with_id(f"c-{uuid.uuid4().hex[:12]}")
        with self._session() as db:
            db.add(
                Commission(
                    id=record.id,
                    artist_id=record.artist_id,
                    user_id=record.user_id,
                    client_name=record.client_name,
                    title=record.title,
                    description=record.description,
                    type=record.type,
                    price=Decimal(str(record.price)),
                    contact=record.contact,
                    notes=record.notes,
                    thumbnail_url=record.thumbnail_url,
                    status=record.status.value,
                    date_added=record.date_added,
                    last_updated=record.last_updated,
                )
            )
        return record

    def set_status(self, commission_id: str, status: CommissionStatus) -> None:
        with self._session() as db:
            row = db.query(Commission).filter(Commission.id == commission_id).first()
            if not row:
                raise StoreError(f"Commission {commission_id} not found")
            row.status = CommissionStatus(status).value
            row.last_updated = max(today_str(), row.date_added)

    def delete(self, commission_id: str) -> None:
        with self._session() as db:
            row = db.query(Commission).filter(Commission.id == commission_id).first()
            if not row:
                raise StoreError(f"Commission {commission_id} not found")
            db.delete(row)
