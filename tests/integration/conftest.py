import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

from config import ApplicationConfig
from src.adapter.repositories.rest_invoice_repository import RestInvoiceRepository
from src.adapter.repositories.sqlite_invoice_repository import SqliteInvoiceRepository

JWT_SECRET = "test-jwt-secret"
TOKEN_ALGORITHM = "HS256"


def make_token(role: str = "admin", expires_in: timedelta = timedelta(hours=12), secret: str = JWT_SECRET) -> str:
    claims = {"role": role, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(claims, secret, algorithm=TOKEN_ALGORITHM)


class FakePostgrest:
    """In-memory stand-in for one PostgREST table, served through httpx.MockTransport"""

    def __init__(self, table: str = "invoices"):
        self.table = table
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.fail_status: Optional[int] = None
        self.fail_network = False
        self.garbage_body: Optional[bytes] = None

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_network:
            raise httpx.ConnectError("connection refused", request=request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"message": "injected failure"})
        if self.garbage_body is not None:
            return httpx.Response(200, content=self.garbage_body, headers={"Content-Type": "text/html"})
        if request.url.path != f"/rest/v1/{self.table}":
            return httpx.Response(404, json={"message": "relation does not exist"})

        params = request.url.params
        handler = getattr(self, f"_{request.method.lower()}")
        return handler(request, params)

    def _matching(self, params) -> List[Dict[str, Any]]:
        rows = list(self.rows.values())
        id_filter = params.get("id")
        if id_filter is not None:
            wanted = id_filter[len("eq."):]
            rows = [row for row in rows if row["id"] == wanted]
        return rows

    @staticmethod
    def _select(rows, params) -> List[Dict[str, Any]]:
        columns = params.get("select")
        if not columns:
            return rows
        names = columns.split(",")
        return [{name: row[name] for name in names} for row in rows]

    def _get(self, request, params):
        rows = self._matching(params)
        if params.get("order"):
            rows.sort(key=lambda row: (datetime.fromisoformat(row["created_at"]), row["id"]))
        if params.get("limit"):
            rows = rows[: int(params["limit"])]
        return httpx.Response(200, json=self._select(rows, params))

    def _post(self, request, params):
        row = json.loads(request.content)
        if row["id"] in self.rows:
            return httpx.Response(409, json={"message": "duplicate key value"})
        self.rows[row["id"]] = row
        return httpx.Response(201)

    def _patch(self, request, params):
        changes = json.loads(request.content)
        rows = self._matching(params)
        for row in rows:
            row.update(changes)
        return httpx.Response(200, json=self._select(rows, params))

    def _delete(self, request, params):
        rows = self._matching(params)
        for row in rows:
            del self.rows[row["id"]]
        return httpx.Response(200, json=self._select(rows, params))


@pytest.fixture
def token_factory():
    """Signs bearer tokens with the test secret"""
    return make_token


@pytest.fixture
def fake_postgrest():
    return FakePostgrest()


@pytest_asyncio.fixture
async def sqlite_store(tmp_path):
    store = SqliteInvoiceRepository(str(tmp_path / "data" / "app.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def rest_store(fake_postgrest):
    store = RestInvoiceRepository(
        base_url="https://project.supabase.test",
        api_key="service-role-key",
        transport=fake_postgrest.transport(),
    )
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["sqlite", "rest"])
async def store(request, tmp_path, fake_postgrest):
    """Each store scenario runs once per backend"""
    if request.param == "sqlite":
        backend = SqliteInvoiceRepository(str(tmp_path / "contract.db"))
    else:
        backend = RestInvoiceRepository(
            base_url="https://project.supabase.test",
            api_key="service-role-key",
            transport=fake_postgrest.transport(),
        )
    await backend.initialize()
    yield backend
    await backend.close()


@pytest.fixture
def test_config(tmp_path):
    """ApplicationConfig pointing every path into the test's temp dir"""

    class TestConfig(ApplicationConfig):
        STORE_BACKEND = "sqlite"
        SQLITE_PATH = str(tmp_path / "data" / "app.db")
        LEGACY_INVOICES_SNAPSHOT = str(tmp_path / "data" / "invoices.json")
        UPLOADS_DIR = str(tmp_path / "uploads")
        LOGO_PATH = str(tmp_path / "public" / "logo.jpg")
        AUTH_DISABLED = False
        JWT_SECRET_KEY = JWT_SECRET
        JWT_ALGORITHM = TOKEN_ALGORITHM
        CORS_ORIGINS = []
        DEFAULT_TAX_PERCENT = 10

    return TestConfig


@pytest_asyncio.fixture
async def app(test_config):
    from src.api.app import create_app

    app = create_app(test_config)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app):
    """Authenticated admin client"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {make_token()}"},
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def anonymous_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
