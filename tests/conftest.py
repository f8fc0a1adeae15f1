import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")
os.environ.setdefault("GOOGLE_CLIENT_ID", "client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "client-secret")
os.environ.setdefault("SMTP_HOST", "")

from datetime import date, timedelta  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from app.core.security import create_access_token  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import ROLE_ADMIN, ROLE_USER  # noqa: E402
from app.routers.deps import get_today  # noqa: E402
from app.services import accounts  # noqa: E402
from app.services.google_oauth import get_http_client  # noqa: E402
from app.services.mailer import get_mailer  # noqa: E402
from app.services.streak import _claim_locks, _claim_waiters  # noqa: E402

TODAY = date(2026, 10, 19)
PASSWORD = "correct-horse"


class Clock:
    def __init__(self, today: date):
        self.today = today

    def advance(self, days: int = 1) -> None:
        self.today += timedelta(days=days)


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.error = None

    async def send_password_reset(self, to_email: str, link: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((to_email, link))


class FakeGoogle:
    """Answers Google's token and userinfo endpoints."""

    def __init__(self):
        self.profile = {"sub": "g-123", "email": "ada@example.com", "email_verified": True}
        self.token_status = 200
        self.codes = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/token":
            self.codes.append(request.content.decode())
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "google-access", "token_type": "Bearer"})
        if request.url.path == "/v1/userinfo":
            assert request.headers["Authorization"] == "Bearer google-access"
            return httpx.Response(200, json=self.profile)
        return httpx.Response(404)


@pytest.fixture(autouse=True)
def _reset_claim_locks():
    _claim_locks.clear()
    _claim_waiters.clear()
    yield
    _claim_locks.clear()
    _claim_waiters.clear()


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return Clock(TODAY)


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def google():
    return FakeGoogle()


@pytest.fixture
async def client(session_factory, clock, mailer, google):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(google.handler)) as http:
            yield http

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: clock.today
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_http_client] = override_http_client

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make(email="user@example.com", password=PASSWORD, role=ROLE_USER):
        return await accounts.create_user(db, email, password, role=role)

    return _make


@pytest.fixture
async def user(make_user):
    return await make_user()


@pytest.fixture
async def admin(make_user):
    return await make_user("admin@example.com", role=ROLE_ADMIN)


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def auth():
    return auth_headers
