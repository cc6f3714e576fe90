"""
Search Service

Search/recommendation collaborator used by catalog sync and trending.

SearchProvider is the capability interface the rest of the app depends on;
AlgoliaSearchProvider implements it against the Algolia REST API:
- writes go to https://{app_id}.algolia.net with the write key
- searches and recommendations go to https://{app_id}-dsn.algolia.net
  with the search key
"""
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from ..exceptions import SearchProviderError
from ..models.search import SearchCriteria

logger = logging.getLogger(__name__)


def _sort_value(hit: Dict[str, Any], field: str) -> float:
    """Numeric sort value of a hit field; missing or non-numeric values sort as 0."""
    value = hit.get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


class SearchProvider(Protocol):
    """Indexed search and recommendation capability."""

    async def configure_index(self) -> None: ...

    async def save_objects(self, documents: List[Dict[str, Any]]) -> int: ...

    async def query(self, criteria: SearchCriteria) -> List[Dict[str, Any]]: ...

    async def recommend(self, model: str, max_results: int) -> List[Dict[str, Any]]: ...


class AlgoliaSearchProvider:
    """
    Algolia REST client.

    A new httpx.AsyncClient is opened per call so the provider holds no
    connection state between requests.
    """

    def __init__(
        self,
        app_id: str,
        api_key: str,
        index_name: str,
        search_api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.app_id = app_id
        self.index_name = index_name
        self._api_key = api_key
        self._search_api_key = search_api_key or api_key
        self._timeout = timeout
        self._transport = transport

    @property
    def write_url(self) -> str:
        return f"https://{self.app_id}.algolia.net"

    @property
    def read_url(self) -> str:
        return f"https://{self.app_id}-dsn.algolia.net"

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "X-Algolia-Application-Id": self.app_id,
            "X-Algolia-API-Key": api_key,
        }

    async def _request(self, method: str, url: str, api_key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send one JSON request; raise SearchProviderError on any failure."""
        if not self.app_id or not api_key:
            raise SearchProviderError("Algolia credentials are not configured")

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.request(method, url, json=payload, headers=self._headers(api_key))
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("algolia: %s %s HTTP %s body=%s", method, url, e.response.status_code, e.response.text[:500])
            raise SearchProviderError(
                f"Algolia returned HTTP {e.response.status_code}",
                details={"status": e.response.status_code}
            ) from e
        except httpx.RequestError as e:
            logger.error("algolia: %s %s request failed: %s", method, url, e)
            raise SearchProviderError(f"Algolia unreachable: {e}") from e
        except ValueError as e:
            raise SearchProviderError(f"Algolia returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise SearchProviderError("Algolia returned an unexpected response body")
        return body

    async def configure_index(self) -> None:
        """Make environmental_grade filterable and rank by popularity."""
        await self._request(
            "PUT",
            f"{self.write_url}/1/indexes/{self.index_name}/settings",
            self._api_key,
            {
                "attributesForFaceting": ["filterOnly(environmental_grade)"],
                "customRanking": ["desc(popularity)"],
            },
        )

    async def save_objects(self, documents: List[Dict[str, Any]]) -> int:
        """Replace documents by objectID in one batch call."""
        if not documents:
            return 0
        body = await self._request(
            "POST",
            f"{self.write_url}/1/indexes/{self.index_name}/batch",
            self._api_key,
            {"requests": [{"action": "updateObject", "body": doc} for doc in documents]},
        )
        saved = len(body.get("objectIDs", documents))
        logger.info(f"Saved {saved} objects to Algolia index {self.index_name}")
        return saved

    async def query(self, criteria: SearchCriteria) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {"query": criteria.query, "hitsPerPage": criteria.limit}
        if criteria.filters:
            payload["filters"] = criteria.filters

        body = await self._request(
            "POST",
            f"{self.read_url}/1/indexes/{self.index_name}/query",
            self._search_api_key,
            payload,
        )
        hits = [hit for hit in body.get("hits") or [] if isinstance(hit, dict)]
        if criteria.sort_by:
            hits = sorted(
                hits,
                key=lambda hit: _sort_value(hit, criteria.sort_by),
                reverse=criteria.descending,
            )
        return hits[:criteria.limit]

    async def recommend(self, model: str, max_results: int) -> List[Dict[str, Any]]:
        body = await self._request(
            "POST",
            f"{self.read_url}/1/indexes/*/recommendations",
            self._search_api_key,
            {
                "requests": [{
                    "indexName": self.index_name,
                    "model": model,
                    "threshold": 0,
                    "maxRecommendations": max_results,
                }]
            },
        )
        results = body.get("results")
        first = results[0] if isinstance(results, list) and results and isinstance(results[0], dict) else {}
        return [hit for hit in first.get("hits") or [] if isinstance(hit, dict)]
