"""
Shared fixtures: temporary SQLite database, sample catalog file, and
in-memory identity/search collaborators.
"""
import json

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import NullPool

from greenshop.config import Settings
from greenshop.context import AppContext
from greenshop.db.init_db import create_engine, create_session_factory, initialize_database
from greenshop.exceptions import AuthenticationError, SearchProviderError
from greenshop.main import create_app


def make_product(code, name="Product", grade="a", eco_grade="b", eco_score=50, **extra):
    """Catalog entry that passes the display rules unless fields are overridden."""
    product = {
        "code": code,
        "product_name": name,
        "image_url": f"https://img.test/{code}.jpg",
        "nutriscore_grade": grade,
        "environmental_score_data": {"grade": eco_grade, "score": eco_score},
        "price": 1.5,
    }
    product.update(extra)
    return product


SAMPLE_CATALOG = {
    "products": [
        make_product("A", "Oat drink", eco_grade="a", eco_score=88, categories="Plant-based drinks,Beverages"),
        {"code": "B", "product_name": "Incomplete"},
        make_product("C", "Unknown impact", eco_grade="unknown"),
        {
            "code": "D",
            "product_name": "Front image only",
            "image_front_url": "https://img.test/D.jpg",
            "nutriscore_grade": "c",
        },
        make_product("E", "Lentils", eco_grade="a", eco_score=80),
        make_product("F", "Crisps", grade="e", eco_grade="d", eco_score=20),
    ]
}


class FakeIdentityProvider:
    """Maps bearer tokens to user ids; emails looked up from a dict."""

    def __init__(self):
        self.tokens = {}
        self.emails = {}

    def add_user(self, token, user_id, email=None):
        self.tokens[token] = user_id
        self.emails[user_id] = email

    async def authenticate(self, request):
        header = request.headers.get("Authorization", "")
        token = header[len("Bearer "):] if header.startswith("Bearer ") else ""
        if token not in self.tokens:
            raise AuthenticationError()
        return self.tokens[token]

    async def get_primary_email(self, user_id):
        return self.emails.get(user_id)


class FakeSearchProvider:
    """Records calls; returns canned hits or raises SearchProviderError."""

    def __init__(self):
        self.configured = False
        self.saved = []
        self.queries = []
        self.recommend_calls = []
        self.recommend_hits = []
        self.query_hits = []
        self.fail_recommend = False
        self.fail_query = False
        self.fail_save = False

    async def configure_index(self):
        if self.fail_save:
            raise SearchProviderError("index unavailable")
        self.configured = True

    async def save_objects(self, documents):
        if self.fail_save:
            raise SearchProviderError("index unavailable")
        self.saved.extend(documents)
        return len(documents)

    async def query(self, criteria):
        self.queries.append(criteria)
        if self.fail_query:
            raise SearchProviderError("search unavailable")
        return list(self.query_hits)

    async def recommend(self, model, max_results):
        self.recommend_calls.append((model, max_results))
        if self.fail_recommend:
            raise SearchProviderError("recommend unavailable")
        return list(self.recommend_hits)


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(json.dumps(SAMPLE_CATALOG), encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path, catalog_file):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        catalog_path=str(catalog_file),
        environment="test",
        allowed_origins="http://localhost:5173,https://greeenshop.vercel.app",
    )


@pytest.fixture
async def engine(settings):
    engine = create_engine(settings.database_url, poolclass=NullPool)
    await initialize_database(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def identity():
    provider = FakeIdentityProvider()
    provider.add_user("token-u1", "user_1", "first@example.com")
    provider.add_user("token-u2", "user_2", "second@example.com")
    provider.add_user("token-noemail", "user_noemail", None)
    return provider


@pytest.fixture
def search():
    return FakeSearchProvider()


@pytest.fixture
def context(settings, engine, session_factory, identity, search):
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        identity=identity,
        search=search,
    )


@pytest.fixture
async def client(context):
    app = create_app(context)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def auth(token="token-u1"):
    return {"Authorization": f"Bearer {token}"}
