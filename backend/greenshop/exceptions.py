"""
GreenShop Exception Hierarchy

Every error raised by the services carries an error code and the HTTP status
it maps to. The exception handlers in main.py turn them into JSON bodies that
always contain an "error" field.
"""
from typing import Optional, Dict, Any


class ShopError(Exception):
    """
    Base exception for all GreenShop errors.
    """

    status_code: int = 500

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        body: Dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            body["details"] = self.details
        return body


class CatalogUnavailableError(ShopError):
    """
    Catalog file could not be read or does not have the expected shape.

    Examples:
    - products.json missing
    - Invalid JSON
    - No list under the "products" key
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("catalog:unavailable", message, details, status_code=500)


class AuthenticationError(ShopError):
    """Bearer credential missing or rejected by the identity provider."""

    def __init__(self, message: str = "Unauthenticated", details: Optional[Dict[str, Any]] = None):
        super().__init__("auth:unauthenticated", message, details, status_code=401)


class IdentityError(ShopError):
    """
    Authenticated user could not be resolved to a usable profile.

    Example:
    - Clerk user has no email address
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("identity:unresolved", message, details, status_code=500)


class StoreError(ShopError):
    """Any failure of the relational store."""

    def __init__(self, message: str, hint: Optional[str] = None):
        details = {"hint": hint} if hint else None
        super().__init__("store:failure", message, details, status_code=500)


class NotFoundError(ShopError):
    """Requested record does not exist."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("not_found", message, details, status_code=404)


class SearchProviderError(ShopError):
    """Search/recommendation provider call failed (transport or non-2xx)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("search:provider_error", message, details, status_code=502)


class SyncError(ShopError):
    """Catalog sync to the search index failed."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        details = {"suggestion": suggestion} if suggestion else None
        super().__init__("sync:failed", message, details, status_code=500)


class RecommendationError(ShopError):
    """Trending products could not be produced."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        details = {"suggestion": suggestion} if suggestion else None
        super().__init__("recommend:failed", message, details, status_code=500)
