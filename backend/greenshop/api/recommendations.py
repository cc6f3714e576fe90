"""
Recommendations API Endpoints

Catalog sync to the search index and the trending products list.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from typing import Any, Dict, List
import logging

from ..context import AppContext
from ..services.catalog_service import load_catalog
from ..services.purchase_service import count_purchases_by_product
from ..services.sync_service import sync_eco_products
from ..services.trending_service import get_trending
from .deps import get_context, get_db, require_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sync-products")
async def sync_products_endpoint(
    user_id: str = Depends(require_user),
    ctx: AppContext = Depends(get_context),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    Push eco products (environmental score >= eco_score_threshold) to the
    search index. Popularity is each product's purchase count.

    Returns:
        {"synced": int}

    Errors:
        500 {"error", "details": {"suggestion"}} if the index rejects the sync
    """
    logger.info(f"Product sync requested by user: {user_id}")

    all_products = await run_in_threadpool(load_catalog, ctx.settings.catalog_path)
    popularity = await count_purchases_by_product(db)

    synced = await sync_eco_products(
        all_products,
        ctx.search,
        popularity=popularity,
        threshold=ctx.settings.eco_score_threshold,
    )

    return {"synced": synced}


@router.get("/recommend/trending")
async def trending_endpoint(
    ctx: AppContext = Depends(get_context)
) -> List[Dict[str, Any]]:
    """
    Trending eco products.

    Returns:
        Up to trending_limit (8) products:
        [{"objectID", "name", "image", "nutriscore_grade", "environmental_grade",
          "environmental_score", "price", "category", "popularity"}, ...]
    """
    products = await get_trending(
        ctx.search,
        max_results=ctx.settings.trending_limit,
        model=ctx.settings.algolia_recommend_model,
    )

    logger.info(f"Returning {len(products)} trending products")
    return [p.model_dump() for p in products]
