"""
Application Context

Holds every long-lived handle the request handlers need (settings, database
engine and session factory, identity and search collaborators). Built once
at startup and stored on app.state; tests build one with fakes instead.
"""
from dataclasses import dataclass
import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from .config import Settings
from .db.init_db import create_engine, create_session_factory
from .services.identity_service import ClerkIdentityProvider, IdentityProvider
from .services.search_service import AlgoliaSearchProvider, SearchProvider

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    identity: IdentityProvider
    search: SearchProvider


def build_context(settings: Settings) -> AppContext:
    """
    Construct production collaborators from settings.

    Raises:
        RuntimeError: If the Clerk secret key is missing
    """
    engine = create_engine(settings.database_url, timeout=settings.database_timeout_seconds)
    identity = ClerkIdentityProvider(
        secret_key=settings.clerk_secret_key,
        authorized_parties=settings.authorized_party_list,
        timeout=settings.http_timeout_seconds,
    )
    search = AlgoliaSearchProvider(
        app_id=settings.algolia_app_id,
        api_key=settings.algolia_api_key,
        search_api_key=settings.algolia_search_api_key,
        index_name=settings.algolia_index_name,
        timeout=settings.http_timeout_seconds,
    )
    if not settings.algolia_app_id:
        logger.warning("ALGOLIA_APP_ID not set: sync will fail and trending will use the static list")

    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        identity=identity,
        search=search,
    )
