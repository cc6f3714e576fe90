"""
Trending Service

Resolves the trending products list from an ordered chain of strategies:

1. RecommendStrategy - Algolia Recommend "trending-items" model
2. SearchStrategy    - eco grades a/b, most popular first
3. StaticStrategy    - fixed fallback list

Each strategy returns products or an empty list. Later strategies only run
while the merged list is short; results are deduplicated by objectID,
keeping the first occurrence.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import ValidationError

from ..data.fallback_trending import FALLBACK_TRENDING
from ..exceptions import RecommendationError, SearchProviderError
from ..models.search import SearchCriteria, TrendingProduct
from .search_service import SearchProvider

logger = logging.getLogger(__name__)

DEFAULT_TRENDING_LIMIT = 8
ECO_GRADE_FILTER = "environmental_grade:a OR environmental_grade:b"


def parse_hits(hits: Iterable[Dict[str, Any]]) -> List[TrendingProduct]:
    """Parse provider hits, skipping ones without a usable objectID."""
    products = []
    for hit in hits or []:
        if not isinstance(hit, dict):
            logger.debug(f"Skipping non-object hit: {hit!r}")
            continue
        try:
            products.append(TrendingProduct.model_validate(hit))
        except ValidationError:
            logger.debug(f"Skipping malformed hit: {hit.get('objectID')!r}")
    return products


class TrendingStrategy:
    """One source of trending products."""

    name = "base"

    async def fetch(self, max_results: int) -> List[TrendingProduct]:
        raise NotImplementedError


class RecommendStrategy(TrendingStrategy):
    name = "recommend"

    def __init__(self, search: SearchProvider, model: str = "trending-items"):
        self.search = search
        self.model = model

    async def fetch(self, max_results: int) -> List[TrendingProduct]:
        return parse_hits(await self.search.recommend(self.model, max_results))


class SearchStrategy(TrendingStrategy):
    name = "search"

    def __init__(self, search: SearchProvider):
        self.search = search

    async def fetch(self, max_results: int) -> List[TrendingProduct]:
        criteria = SearchCriteria(
            filters=ECO_GRADE_FILTER,
            sort_by="popularity",
            descending=True,
            limit=max_results,
        )
        return parse_hits(await self.search.query(criteria))


class StaticStrategy(TrendingStrategy):
    name = "static"

    def __init__(self, products: Sequence[TrendingProduct] = FALLBACK_TRENDING):
        self.products = list(products)

    async def fetch(self, max_results: int) -> List[TrendingProduct]:
        return self.products[:max_results]


def default_strategies(search: SearchProvider, model: str = "trending-items") -> List[TrendingStrategy]:
    return [
        RecommendStrategy(search, model),
        SearchStrategy(search),
        StaticStrategy(),
    ]


def merge_unique(
    merged: List[TrendingProduct],
    seen: set,
    candidates: Iterable[TrendingProduct],
    max_results: int
) -> None:
    """Append candidates not seen yet until merged holds max_results items."""
    for product in candidates:
        if len(merged) >= max_results:
            return
        if product.objectID in seen:
            continue
        seen.add(product.objectID)
        merged.append(product)


async def get_trending(
    search: SearchProvider,
    max_results: int = DEFAULT_TRENDING_LIMIT,
    strategies: Optional[Sequence[TrendingStrategy]] = None,
    model: str = "trending-items"
) -> List[TrendingProduct]:
    """
    Trending products, at most max_results, unique by objectID.

    Raises:
        RecommendationError: A strategy failed for a reason other than the
            search provider being unavailable
    """
    if max_results <= 0:
        return []

    strategies = strategies if strategies is not None else default_strategies(search, model)
    merged: List[TrendingProduct] = []
    seen: set = set()

    for strategy in strategies:
        if len(merged) >= max_results:
            break
        try:
            candidates = await strategy.fetch(max_results)
        except SearchProviderError as e:
            logger.warning(f"Trending strategy '{strategy.name}' failed: {e.message}")
            continue
        except Exception as e:
            logger.error(f"Unexpected error in trending strategy '{strategy.name}': {e}", exc_info=True)
            raise RecommendationError(
                f"Failed to load trending products: {e}",
                suggestion="Try again later or check the search service configuration."
            ) from e

        before = len(merged)
        merge_unique(merged, seen, candidates, max_results)
        logger.debug(f"Trending strategy '{strategy.name}' added {len(merged) - before} products")

    return merged
