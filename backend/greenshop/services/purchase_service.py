"""
Purchase Service

Records, lists and deletes purchases for authenticated users.

Every call reads or writes the database directly; the store is the only
source of truth.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models import PurchaseModel, UserModel, utcnow
from ..exceptions import IdentityError, NotFoundError, StoreError
from ..models.purchases import PurchaseRecord, PurchaseRequest

logger = logging.getLogger(__name__)

SCHEMA_HINT = "Ensure your users table has an 'email' column that allows nulls or has a default."


def _upsert_user_statement(db: AsyncSession, user_id: str, email: str):
    """
    INSERT INTO users ... ON CONFLICT (id) DO UPDATE SET email = excluded.email

    Built with the dialect-specific insert construct of the bound engine.
    """
    dialect = db.bind.dialect.name
    if dialect == "postgresql":
        insert = postgresql.insert
    elif dialect == "sqlite":
        insert = sqlite.insert
    else:
        raise StoreError(f"Upsert is not supported for database dialect '{dialect}'")

    stmt = insert(UserModel.__table__).values(id=user_id, email=email, created_at=utcnow())
    return stmt.on_conflict_do_update(
        index_elements=[UserModel.__table__.c.id],
        set_={"email": stmt.excluded.email}
    )


def _to_record(row: PurchaseModel) -> PurchaseRecord:
    return PurchaseRecord(
        product_code=row.product_code,
        product_name=row.product_name,
        price=row.price,
        image_url=row.image_url,
        purchased_at=row.purchased_at,
    )


# ============================================================================
# Purchase Creation
# ============================================================================

async def record_purchase(
    db: AsyncSession,
    user_id: str,
    email: Optional[str],
    purchase: PurchaseRequest
) -> None:
    """
    Upsert the user, then insert the purchase, as one transaction.

    Args:
        db: Database session
        user_id: Identity provider user id
        email: User email; overwrites the stored email on conflict
        purchase: Product being bought

    Raises:
        IdentityError: email is empty (nothing is written)
        StoreError: Any database failure (both writes rolled back)
    """
    if not email:
        logger.error(f"User email not found for {user_id}")
        raise IdentityError("User email not found")

    try:
        await db.execute(_upsert_user_statement(db, user_id, email))
        db.add(PurchaseModel(
            user_id=user_id,
            product_code=purchase.product_code,
            product_name=purchase.product_name,
            price=purchase.price,
            image_url=purchase.image_url,
            purchased_at=utcnow(),
        ))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error inserting purchase for {user_id}: {e}")
        raise StoreError(str(e), hint=SCHEMA_HINT) from e

    logger.info(f"Purchase recorded: user={user_id}, product={purchase.product_code}")


# ============================================================================
# Purchase Retrieval
# ============================================================================

async def list_purchases(db: AsyncSession, user_id: str) -> List[PurchaseRecord]:
    """
    Get a user's purchases, most recent first.

    Purchases with the same timestamp are returned latest insert first.
    """
    try:
        result = await db.execute(
            select(PurchaseModel)
            .where(PurchaseModel.user_id == user_id)
            .order_by(PurchaseModel.purchased_at.desc(), PurchaseModel.id.desc())
        )
        rows = result.scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching purchases for {user_id}: {e}")
        raise StoreError("Failed to fetch purchases") from e

    logger.debug(f"Found {len(rows)} purchases for user {user_id}")
    return [_to_record(row) for row in rows]


async def count_purchases_by_product(db: AsyncSession) -> Dict[str, int]:
    """Number of purchases per product code, across all users."""
    try:
        result = await db.execute(
            select(PurchaseModel.product_code, func.count(PurchaseModel.id))
            .group_by(PurchaseModel.product_code)
        )
        return {code: count for code, count in result.all()}
    except SQLAlchemyError as e:
        logger.error(f"Error counting purchases: {e}")
        raise StoreError("Failed to count purchases") from e


# ============================================================================
# Purchase Deletion
# ============================================================================

async def delete_purchase(
    db: AsyncSession,
    user_id: str,
    product_code: str
) -> List[PurchaseRecord]:
    """
    Delete every purchase of product_code by user_id.

    Returns:
        The deleted records, most recent first

    Raises:
        NotFoundError: No purchase matched
        StoreError: Database failure (nothing deleted)
    """
    # DELETE ... RETURNING: reported rows are exactly the removed rows
    stmt = (
        delete(PurchaseModel)
        .where(PurchaseModel.user_id == user_id, PurchaseModel.product_code == product_code)
        .returning(
            PurchaseModel.id,
            PurchaseModel.product_code,
            PurchaseModel.product_name,
            PurchaseModel.price,
            PurchaseModel.image_url,
            PurchaseModel.purchased_at,
        )
        .execution_options(synchronize_session=False)
    )
    try:
        result = await db.execute(stmt)
        rows = result.all()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error deleting purchase {product_code} for {user_id}: {e}")
        raise StoreError(str(e)) from e

    rows = sorted(rows, key=lambda row: (row.purchased_at, row.id), reverse=True)
    records = [_to_record(row) for row in rows]

    if not records:
        raise NotFoundError(
            "Purchase not found",
            details={"product_code": product_code}
        )

    logger.info(f"Deleted {len(records)} purchase(s) of {product_code} for user {user_id}")
    return records
