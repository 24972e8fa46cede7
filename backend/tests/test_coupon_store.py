import re
from datetime import datetime, timedelta, timezone

import pytest

from giftcoupons.core.database import SessionLocal, _ensure_sqlite_dir, get_db
from giftcoupons.core.db_transaction import db_transaction, safe_commit
from giftcoupons.models.gift_coupon import DiscountKindEnum, GiftCoupon
from giftcoupons.models.item import Item
from giftcoupons.services.batch_issuer import BatchIssuer, CouponRecord
from giftcoupons.services.coupon_store import SqlCodeRegistry, SqlCouponStore, SqlItemLookup


def _record(code="GIFT-0123456789AB"):
    now = datetime.now(timezone.utc)
    return CouponRecord(
        code=code,
        description="Auto-generated coupon for Mug (Batch 1/1)",
        discount_type=DiscountKindEnum.FREE_GIFT,
        expires_at=now + timedelta(days=365),
        requested_item_ids=[1],
        generated_at=now,
        gift_payload={"1": {"item_id": 1, "variant_id": 0, "quantity": 1}},
    )


def _add_items(db, *names, active=True):
    items = [Item(name=name, price=0, is_active=active) for name in names]
    db.add_all(items)
    db.commit()
    return items


def test_lookup_resolves_existing_items(db_session):
    mug, = _add_items(db_session, "Mug")
    retired, = _add_items(db_session, "Old Poster", active=False)
    lookup = SqlItemLookup(db_session)

    found = lookup.resolve(mug.id)
    assert found.name == "Mug"
    assert found.is_purchasable is True
    assert found.variant_id == 0
    assert lookup.resolve(retired.id).is_purchasable is False
    assert lookup.resolve(9999) is None


def test_store_persists_and_registry_sees_code(db_session):
    store = SqlCouponStore(db_session)
    registry = SqlCodeRegistry(db_session)

    assert registry.exists("GIFT-0123456789AB") is False
    coupon_id = store.persist(_record())

    assert coupon_id is not None
    assert registry.exists("GIFT-0123456789AB") is True
    row = db_session.get(GiftCoupon, coupon_id)
    assert row.usage_limit == 1
    assert row.individual_use is True
    assert row.is_generated is True
    assert row.gift_payload == {"1": {"item_id": 1, "variant_id": 0, "quantity": 1}}
    assert row.requested_item_ids == [1]


def test_duplicate_code_write_fails_and_session_recovers(db_session):
    store = SqlCouponStore(db_session)
    assert store.persist(_record()) is not None

    assert store.persist(_record()) is None
    assert store.persist(_record("GIFT-FFFFFFFFFFFF")) is not None
    assert db_session.query(GiftCoupon).count() == 2


def test_issuer_against_database(db_session):
    mug, tee = _add_items(db_session, "Mug", "T-Shirt")
    issuer = BatchIssuer(
        lookup=SqlItemLookup(db_session),
        registry=SqlCodeRegistry(db_session),
        store=SqlCouponStore(db_session),
        sleep=lambda s: None,
    )

    assert issuer.issue([mug.id, tee.id], 5, "gift") == 5

    rows = db_session.query(GiftCoupon).all()
    assert len(rows) == 5
    assert len({row.code for row in rows}) == 5
    for row in rows:
        assert re.fullmatch(r"GIFT-[0-9A-F]{12}", row.code)
        assert set(row.gift_payload) == {str(mug.id), str(tee.id)}
        assert "Mug and T-Shirt" in row.description


def test_db_transaction_rolls_back_and_reraises(db_session):
    with pytest.raises(RuntimeError):
        with db_transaction(db_session):
            db_session.add(Item(name="Ghost", price=0))
            raise RuntimeError("abort")

    assert db_session.query(Item).count() == 0


def test_safe_commit_reports_failure(db_session):
    store = SqlCouponStore(db_session)
    store.persist(_record())

    db_session.add(GiftCoupon(code="GIFT-0123456789AB", discount_type=DiscountKindEnum.PERCENT))
    assert safe_commit(db_session, "duplicate insert") is False
    assert db_session.query(GiftCoupon).count() == 1


def test_sqlite_directory_created_for_file_urls(tmp_path):
    target = tmp_path / "nested" / "data"
    _ensure_sqlite_dir(f"sqlite:///{target / 'coupons.db'}")
    assert target.is_dir()

    _ensure_sqlite_dir("postgresql://localhost/coupons")


def test_request_session_rolls_back_on_error(db_session):
    sessions = get_db()
    db = next(sessions)
    db.add(Item(name="Half-written", price=0))
    db.flush()

    with pytest.raises(ValueError):
        sessions.throw(ValueError("endpoint failed"))

    check = SessionLocal()
    try:
        assert check.query(Item).count() == 0
    finally:
        check.close()
