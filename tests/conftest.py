"""
Shared fixtures: throwaway SQLite database, fast bcrypt, recording mailer.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from api.app import create_app
from config.settings import Settings
from database.session import build_engine, build_session_factory, init_db


class RecordingMailer:
    """Stands in for SmtpMailer; keeps every (address, code) it was asked to send."""

    def __init__(self):
        self.sent = []

    async def send(self, to_address, code):
        self.sent.append((to_address, code))

    @property
    def last_code(self):
        return self.sent[-1][1]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}",
        mail_user="sender@example.com",
        mail_password="app-password",
        secret_key="test-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(settings, mailer):
    app = create_app(settings)
    app.state.mailer = mailer
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def db_session(settings):
    engine = build_engine(settings)
    await init_db(engine)
    factory = build_session_factory(engine)
    async with factory() as session:
        yield session
    await engine.dispose()
