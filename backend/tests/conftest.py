import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="giftcoupons-tests-")
os.environ["DATABASE_PATH"] = os.path.join(_tmp, "test.db")
os.environ["GIFTCOUPONS_LOG_DIR"] = os.path.join(_tmp, "logs")
os.environ["ADMIN_API_KEY"] = "test-admin-key"

import pytest
from fastapi.testclient import TestClient

from giftcoupons.core.cache import cache_clear
from giftcoupons.core.database import Base, SessionLocal, engine, get_db
import giftcoupons.models  # noqa: F401
from giftcoupons.main import app
from giftcoupons.services.batch_issuer import (
    CodeRegistry,
    CouponStore,
    ItemDescriptor,
    ItemLookup,
)

ADMIN_HEADERS = {"X-Admin-API-Key": "test-admin-key"}


class FakeLookup(ItemLookup):
    def __init__(self, items):
        self.items = {item.id: item for item in items}
        self.calls = []

    def resolve(self, item_id):
        self.calls.append(item_id)
        return self.items.get(item_id)


class FakeRegistry(CodeRegistry):
    def __init__(self, existing=(), always_collide=False):
        self.codes = set(existing)
        self.always_collide = always_collide
        self.checks = 0

    def exists(self, code):
        self.checks += 1
        return self.always_collide or code in self.codes


class FakeStore(CouponStore):
    """Succeeds unless told to fail the first N writes (by returning None or raising)."""

    def __init__(self, registry=None, fail_first=0, raise_on_fail=False):
        self.registry = registry
        self.fail_first = fail_first
        self.raise_on_fail = raise_on_fail
        self.calls = 0
        self.records = []

    def persist(self, record):
        self.calls += 1
        if self.calls <= self.fail_first:
            if self.raise_on_fail:
                raise ConnectionError("store unreachable")
            return None
        self.records.append(record)
        if self.registry is not None:
            self.registry.codes.add(record.code)
        return len(self.records)


@pytest.fixture
def gift_items():
    return [
        ItemDescriptor(id=1, name="Tote Bag"),
        ItemDescriptor(id=2, name="Water Bottle"),
        ItemDescriptor(id=3, name="Sticker Pack"),
    ]


@pytest.fixture(autouse=True)
def _clear_cache():
    cache_clear()
    yield
    cache_clear()


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
