"""
Purchases API Endpoints

Purchase recording and history for the authenticated user. All routes
require a valid Clerk session token.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List
import logging

from ..context import AppContext
from ..models.purchases import PurchaseRequest
from ..services.purchase_service import (
    record_purchase,
    list_purchases,
    delete_purchase
)
from .deps import get_context, get_db, require_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/purchase")
async def create_purchase_endpoint(
    purchase: PurchaseRequest,
    user_id: str = Depends(require_user),
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    Record a purchase for the current user.

    Request Body:
        {
            "product_code": str,
            "product_name": str,
            "price": float,
            "image_url": str
        }

    Returns:
        {"success": true}

    Errors:
        401 if unauthenticated
        500 {"error", "details": {"hint"}} if the user has no email or the
        store rejects the write
    """
    logger.info(f"Purchase request from user: {user_id}")

    email = await ctx.identity.get_primary_email(user_id)
    await record_purchase(db, user_id, email, purchase)

    return {"success": True}


@router.get("/purchases")
async def list_purchases_endpoint(
    user_id: str = Depends(require_user),
    db: AsyncSession = Depends(get_db)
) -> List[Dict[str, Any]]:
    """
    Get the current user's purchases, most recent first.

    Returns:
        [{"product_code", "product_name", "price", "image_url"}, ...]
    """
    logger.info(f"Fetching purchases for user: {user_id}")

    purchases = await list_purchases(db, user_id)

    return [p.model_dump(exclude={"purchased_at"}) for p in purchases]


@router.delete("/purchase/{product_code}")
async def delete_purchase_endpoint(
    product_code: str,
    user_id: str = Depends(require_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    Remove a product from the current user's purchase history.

    Every purchase of product_code by the user is deleted.

    Returns:
        {
            "success": true,
            "deleted": PurchaseRecord,  # most recent deleted purchase
            "deleted_count": int
        }

    Errors:
        404 {"error": "Purchase not found"} if nothing matched

    Example:
        DELETE /api/purchase/3017620422003
    """
    logger.info(f"Delete purchase {product_code} for user: {user_id}")

    deleted = await delete_purchase(db, user_id, product_code)

    return {
        "success": True,
        "deleted": deleted[0].model_dump(mode="json"),
        "deleted_count": len(deleted),
    }
