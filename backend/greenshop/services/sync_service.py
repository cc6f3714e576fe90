"""
Catalog Sync Service

Pushes products with a high environmental score to the search index so the
trending endpoint can recommend them.
"""
import logging
from typing import Iterable, List, Mapping, Optional

from ..exceptions import SearchProviderError, SyncError
from ..models.products import Product
from ..models.search import IndexDocument
from .search_service import SearchProvider

logger = logging.getLogger(__name__)

DEFAULT_ECO_THRESHOLD = 80


def to_index_document(product: Product, popularity: int = 0) -> IndexDocument:
    """Map a catalog product to the normalized index shape."""
    return IndexDocument(
        objectID=product.code,
        name=product.product_name,
        image=product.primary_image,
        nutriscore_grade=product.nutriscore_grade,
        environmental_grade=product.environmental_grade,
        environmental_score=product.environmental_score,
        price=product.price,
        category=product.primary_category,
        popularity=popularity,
    )


def select_eco_products(
    all_products: Iterable[Product],
    threshold: int = DEFAULT_ECO_THRESHOLD
) -> List[Product]:
    """Products with a code and an environmental score >= threshold."""
    return [
        p for p in all_products
        if p.code and p.environmental_score is not None and p.environmental_score >= threshold
    ]


async def sync_eco_products(
    all_products: Iterable[Product],
    search: SearchProvider,
    popularity: Optional[Mapping[str, int]] = None,
    threshold: int = DEFAULT_ECO_THRESHOLD
) -> int:
    """
    Index eco products.

    Args:
        all_products: Full catalog
        search: Index collaborator
        popularity: Purchase count per product code
        threshold: Minimum environmental score

    Returns:
        Number of documents synced

    Raises:
        SyncError: If the index rejects the configuration or the documents
    """
    popularity = popularity or {}
    documents = [
        to_index_document(p, popularity.get(p.code, 0)).model_dump()
        for p in select_eco_products(all_products, threshold)
    ]

    if not documents:
        logger.info(f"No products with environmental score >= {threshold}, nothing to sync")
        return 0

    try:
        await search.configure_index()
        synced = await search.save_objects(documents)
    except SearchProviderError as e:
        logger.error(f"Product sync failed: {e.message}")
        raise SyncError(
            f"Failed to sync products: {e.message}",
            suggestion="Check ALGOLIA_APP_ID and ALGOLIA_API_KEY (write access is required)."
        ) from e

    logger.info(f"Synced {synced} eco products (threshold={threshold})")
    return synced
