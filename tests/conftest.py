import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("CLEANUP_ENABLED", "false")

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from menucard.api.deps import get_mailer
from menucard.core.config import Settings, settings
from menucard.db.base import Base
from menucard.db.session import get_db
from menucard.main import app
from menucard.services.email import Mailer


class RecordingMailer(Mailer):
    def __init__(self):
        super().__init__(settings)
        self.outbox: list[tuple[str, str]] = []

    async def send_verification_code(self, to_email: str, code: str) -> bool:
        self.outbox.append((to_email, code))
        return True

    def last_code(self, email: str) -> str:
        return [code for to, code in self.outbox if to == email][-1]


class BrokenTransportMailer(Mailer):
    def _send_sync(self, to_email, subject, body):
        raise ConnectionRefusedError("smtp down")


def smtp_settings(**overrides):
    values = {"SMTP_HOST": "smtp.internal", "EMAIL_ENABLED": True}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _fk_pragma(dbapi_conn, _):
        # sqlite ignores ON DELETE CASCADE unless asked
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_sessions(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def file_db_sessions(tmp_path):
    """Sessions on separate sqlite connections, for interleaving transactions."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'menucard.db'}",
        connect_args={"timeout": 10},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
async def client(db_sessions, mailer):
    async def _get_db():
        async with db_sessions() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def auth(token: str) -> dict:
    return {"Cookie": f"{settings.SESSION_COOKIE_NAME}={token}"}


@pytest.fixture
def sign_in(client, mailer):
    """Register (or re-register) an email and return a fresh session token."""

    async def _sign_in(email: str, full_name: str = "Owner", country: str = "US") -> str:
        r = await client.post(
            "/auth/request-code", json={"email": email, "full_name": full_name, "country": country}
        )
        assert r.status_code == 200, r.text
        r = await client.post("/auth/verify", json={"email": email, "code": mailer.last_code(email)})
        assert r.status_code == 200, r.text
        token = r.cookies[settings.SESSION_COOKIE_NAME]
        # tests pass tokens explicitly so several users can share one client
        client.cookies.clear()
        return token

    return _sign_in
