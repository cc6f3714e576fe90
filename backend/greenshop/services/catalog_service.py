"""
Catalog Service

Loads the static product catalog from disk and selects the products that
can be shown in the storefront.

The file is re-read on every call; there is no in-process cache.
"""
import json
import logging
from pathlib import Path
from typing import Iterable, List, Union

from pydantic import ValidationError

from ..exceptions import CatalogUnavailableError
from ..models.products import Product

logger = logging.getLogger(__name__)

UNKNOWN_GRADE = "unknown"


# ============================================================================
# Loading
# ============================================================================

def load_catalog(path: Union[str, Path]) -> List[Product]:
    """
    Read and validate the catalog document.

    The document must be a JSON object with a list of product objects under
    the "products" key.

    Args:
        path: Location of products.json

    Returns:
        All catalog entries in file order

    Raises:
        CatalogUnavailableError: File missing/unreadable, invalid JSON, or
            unexpected shape
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading catalog {path}: {e}")
        raise CatalogUnavailableError(f"Cannot read catalog file: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Catalog {path} is not valid JSON: {e}")
        raise CatalogUnavailableError(f"Catalog file is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("products"), list):
        raise CatalogUnavailableError(
            "Catalog file must contain a list under the 'products' key",
            details={"path": str(path)}
        )

    try:
        products = [Product.model_validate(entry) for entry in data["products"]]
    except ValidationError as e:
        logger.error(f"Catalog {path} contains an invalid product: {e}")
        raise CatalogUnavailableError(
            f"Catalog file contains an invalid product entry: {e.errors()[0]['msg']}"
        ) from e

    logger.debug(f"Loaded {len(products)} catalog entries from {path}")
    return products


# ============================================================================
# Filtering
# ============================================================================

def is_displayable(product: Product) -> bool:
    """
    A product is displayable when it has a code, a name, an image, a
    nutrition grade, and an environmental grade other than "unknown".

    Products without any environmental data are displayable.
    """
    return bool(
        product.code
        and product.product_name
        and product.primary_image
        and product.nutriscore_grade
        and product.environmental_grade != UNKNOWN_GRADE
    )


def list_displayable_products(all_products: Iterable[Product], limit: int) -> List[Product]:
    """
    Filter to displayable products, keeping catalog order, and keep the first
    `limit` of them.

    Raises:
        ValueError: If limit is not positive
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    displayable: List[Product] = []
    for product in all_products:
        if not is_displayable(product):
            continue
        displayable.append(product)
        if len(displayable) == limit:
            break
    return displayable
