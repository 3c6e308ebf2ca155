"""Shared fixtures: in-memory database, temp storage and in-memory fakes."""

import pytest
from sqlalchemy.orm import sessionmaker

from arttrack.database import get_engine, init_db
from arttrack.services.errors import StoreError
from arttrack.services.identity import Identity
from arttrack.services.local_store import LocalStorage
from arttrack.services.pipeline import CommissionStatus
from arttrack.services.records import CommissionRecord
from arttrack.services.store import CommissionStore


def make_record(id="c-1", artist_id="兔兔老師", status=CommissionStatus.QUEUE, **kwargs):
    fields = {
        "id": id,
        "artist_id": artist_id,
        "client_name": kwargs.pop("client_name", "星野光"),
        "title": kwargs.pop("title", "頭像"),
        "type": kwargs.pop("type", "大頭貼"),
        "status": status,
        "date_added": kwargs.pop("date_added", "2024-01-01"),
        "last_updated": kwargs.pop("last_updated", "2024-01-01"),
    }
    fields.update(kwargs)
    return CommissionRecord(**fields)


class FakeProvider:
    """Identity provider holding a fixed identity; no database."""

    def __init__(self, identity=None):
        self._identity = identity
        self._listeners = []
        self.signed_out = False

    def current_identity(self):
        return self._identity

    def subscribe(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def set(self, identity):
        self._identity = identity
        for listener in list(self._listeners):
            listener(identity)

    def sign_out(self):
        self.signed_out = True
        self.set(None)


class FakeStore(CommissionStore):
    """In-memory store; set `fail` to make every mutating call raise."""

    def __init__(self, records=None):
        self.records = list(records or [])
        self.fail = False
        self.calls = []

    def _check(self):
        if self.fail:
            raise StoreError("network down")

    def list_all(self):
        return list(self.records)

    def query_owner(self, artist_id):
        return [c for c in self.records if c.artist_id == artist_id]

    def create(self, data):
        self.calls.append(("create", data))
        self._check()
        record = data.with_id(f"c-new{len(self.records)}")
        self.records.insert(0, record)
        return record

    def set_status(self, commission_id, status):
        self.calls.append(("set_status", commission_id, status))
        self._check()
        for c in self.records:
            if c.id == commission_id:
                c.status = status

    def delete(self, commission_id):
        self.calls.append(("delete", commission_id))
        self._check()
        self.records = [c for c in self.records if c.id != commission_id]


async def direct_call(func, *args):
    """Stand-in for the threadpool hop in coordinator tests."""
    return func(*args)


@pytest.fixture
def artist():
    return Identity(user_id="1", display_name="兔兔老師", email="bunny@example.com")


@pytest.fixture
def engine():
    engine = get_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "storage")
