"""
Products API Endpoints

Public catalog listing: the first page of displayable products from the
static catalog file.
"""
from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool
from typing import Any, Dict, List
import logging

from ..context import AppContext
from ..services.catalog_service import load_catalog, list_displayable_products
from .deps import get_context

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/products")
async def list_products_endpoint(
    ctx: AppContext = Depends(get_context)
) -> List[Dict[str, Any]]:
    """
    List displayable products.

    Returns:
        Up to catalog_page_size (50) products in catalog order, each with the
        fields present in the catalog file

    Errors:
        500 {"error": ...} if the catalog file is missing or malformed

    Example:
        GET /api/products
    """
    logger.info("Fetching products...")

    all_products = await run_in_threadpool(load_catalog, ctx.settings.catalog_path)
    products = list_displayable_products(all_products, ctx.settings.catalog_page_size)

    logger.info(f"Returning {len(products)} of {len(all_products)} catalog products")
    return [p.model_dump(exclude_unset=True) for p in products]
