"""
GreenShop Configuration Module

Loads environment variables for backend configuration: database, catalog file,
Clerk authentication, Algolia search and CORS.
"""
from pydantic_settings import BaseSettings
from typing import List, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Notes:
    - Secrets (Clerk, Algolia) are environment-based only
    - database_url accepts any SQLAlchemy async URL (sqlite+aiosqlite, postgresql+asyncpg)
    - allowed_origins is a comma separated list; subdomains of each origin are also allowed
    """

    # Runtime
    environment: str = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./greenshop.db"
    database_timeout_seconds: float = 30.0

    # Catalog
    catalog_path: str = "products.json"
    catalog_page_size: int = 50

    # Clerk authentication
    clerk_secret_key: str = ""
    clerk_authorized_parties: str = ""

    # Algolia search / recommend
    algolia_app_id: str = ""
    algolia_api_key: str = ""  # Write key, used for index sync
    algolia_search_api_key: str = ""  # Search-only key, falls back to algolia_api_key
    algolia_index_name: str = "products"
    algolia_recommend_model: str = "trending-items"
    eco_score_threshold: int = 80
    trending_limit: int = 8

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # Server
    allowed_origins: str = (
        "http://localhost:5173,"
        "https://greeenshop.vercel.app,"
        "https://amazon-backend-q7s7.onrender.com"
    )
    host: str = "0.0.0.0"
    port: int = 4000

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def allowed_origin_list(self) -> List[str]:
        return [o.strip().rstrip("/") for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def authorized_party_list(self) -> List[str]:
        return [p.strip() for p in self.clerk_authorized_parties.split(",") if p.strip()]


# Global settings instance
settings = Settings()
