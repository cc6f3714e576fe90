"""
Tests for the purchase store against a temporary SQLite database.
"""
from datetime import datetime

import pytest
from sqlalchemy import func, select

from greenshop.db.models import PurchaseModel, UserModel
from greenshop.exceptions import IdentityError, NotFoundError, StoreError
from greenshop.models.purchases import PurchaseRequest
from greenshop.services import purchase_service
from greenshop.services.purchase_service import (
    count_purchases_by_product,
    delete_purchase,
    list_purchases,
    record_purchase,
)


def purchase(code="A", name="Oat drink", price=2.49):
    return PurchaseRequest(
        product_code=code,
        product_name=name,
        price=price,
        image_url=f"https://img.test/{code}.jpg",
    )


async def count_rows(db, model):
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestRecordPurchase:

    async def test_record_then_list(self, db_session):
        await record_purchase(db_session, "u1", "e@x.com", purchase("A"))

        records = await list_purchases(db_session, "u1")

        assert len(records) == 1
        assert records[0].product_code == "A"
        assert records[0].product_name == "Oat drink"
        assert records[0].price == 2.49
        assert records[0].purchased_at is not None

    async def test_upsert_keeps_one_user_with_latest_email(self, db_session):
        await record_purchase(db_session, "u1", "old@x.com", purchase("A"))
        await record_purchase(db_session, "u1", "new@x.com", purchase("B"))

        result = await db_session.execute(select(UserModel).where(UserModel.id == "u1"))
        users = result.scalars().all()

        assert len(users) == 1
        await db_session.refresh(users[0])
        assert users[0].email == "new@x.com"
        assert await count_rows(db_session, PurchaseModel) == 2

    async def test_missing_email_writes_nothing(self, db_session):
        with pytest.raises(IdentityError):
            await record_purchase(db_session, "u1", "", purchase("A"))

        assert await count_rows(db_session, UserModel) == 0
        assert await count_rows(db_session, PurchaseModel) == 0

    async def test_store_failure_rolls_back_user_upsert(self, engine, db_session):
        async with engine.begin() as conn:
            await conn.run_sync(PurchaseModel.__table__.drop)

        with pytest.raises(StoreError) as exc_info:
            await record_purchase(db_session, "u1", "e@x.com", purchase("A"))

        assert exc_info.value.status_code == 500
        assert "hint" in exc_info.value.details
        assert await count_rows(db_session, UserModel) == 0


class TestListPurchases:

    async def test_newest_first(self, db_session):
        for code in ["A", "B", "C"]:
            await record_purchase(db_session, "u1", "e@x.com", purchase(code))

        records = await list_purchases(db_session, "u1")

        assert [r.product_code for r in records] == ["C", "B", "A"]
        timestamps = [r.purchased_at for r in records]
        assert timestamps == sorted(timestamps, reverse=True)

    async def test_only_own_purchases(self, db_session):
        await record_purchase(db_session, "u1", "one@x.com", purchase("A"))
        await record_purchase(db_session, "u2", "two@x.com", purchase("B"))

        assert [r.product_code for r in await list_purchases(db_session, "u2")] == ["B"]

    async def test_empty_history(self, db_session):
        assert await list_purchases(db_session, "nobody") == []

    async def test_same_timestamp_lists_latest_insert_first(self, db_session, monkeypatch):
        monkeypatch.setattr(purchase_service, "utcnow", lambda: datetime(2024, 5, 1, 12, 0, 0))
        for code in ["A", "B", "C"]:
            await record_purchase(db_session, "u1", "e@x.com", purchase(code))

        records = await list_purchases(db_session, "u1")

        assert [r.product_code for r in records] == ["C", "B", "A"]
        assert len({r.purchased_at for r in records}) == 1


class TestDeletePurchase:

    async def test_missing_purchase(self, db_session):
        await record_purchase(db_session, "u1", "e@x.com", purchase("A"))

        with pytest.raises(NotFoundError) as exc_info:
            await delete_purchase(db_session, "u1", "B")
        assert exc_info.value.status_code == 404

    async def test_other_users_purchase_is_not_found(self, db_session):
        await record_purchase(db_session, "u2", "two@x.com", purchase("A"))

        with pytest.raises(NotFoundError):
            await delete_purchase(db_session, "u1", "A")
        assert len(await list_purchases(db_session, "u2")) == 1

    async def test_deletes_matching_rows_only(self, db_session):
        await record_purchase(db_session, "u1", "e@x.com", purchase("A"))
        await record_purchase(db_session, "u1", "e@x.com", purchase("B"))

        deleted = await delete_purchase(db_session, "u1", "A")

        assert [r.product_code for r in deleted] == ["A"]
        assert [r.product_code for r in await list_purchases(db_session, "u1")] == ["B"]

    async def test_deletes_all_duplicates(self, db_session):
        await record_purchase(db_session, "u1", "e@x.com", purchase("A", price=1.0))
        await record_purchase(db_session, "u1", "e@x.com", purchase("A", price=2.0))

        deleted = await delete_purchase(db_session, "u1", "A")

        assert [r.price for r in deleted] == [2.0, 1.0]
        assert await list_purchases(db_session, "u1") == []

    async def test_reports_rows_committed_by_another_session(self, db_session, session_factory):
        await record_purchase(db_session, "u1", "e@x.com", purchase("A", price=1.0))
        async with session_factory() as other:
            await record_purchase(other, "u1", "e@x.com", purchase("A", price=2.0))

        deleted = await delete_purchase(db_session, "u1", "A")

        assert sorted(r.price for r in deleted) == [1.0, 2.0]
        assert await count_rows(db_session, PurchaseModel) == 0

    async def test_duplicates_with_same_timestamp_newest_insert_first(self, db_session, monkeypatch):
        monkeypatch.setattr(purchase_service, "utcnow", lambda: datetime(2024, 5, 1, 12, 0, 0))
        for price in [1.0, 2.0, 3.0]:
            await record_purchase(db_session, "u1", "e@x.com", purchase("A", price=price))

        deleted = await delete_purchase(db_session, "u1", "A")

        assert [r.price for r in deleted] == [3.0, 2.0, 1.0]


async def test_count_purchases_by_product(db_session):
    await record_purchase(db_session, "u1", "one@x.com", purchase("A"))
    await record_purchase(db_session, "u2", "two@x.com", purchase("A"))
    await record_purchase(db_session, "u2", "two@x.com", purchase("B"))

    assert await count_purchases_by_product(db_session) == {"A": 2, "B": 1}
