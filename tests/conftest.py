import os

# Settings are read at import time, so the environment must be in place first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["RATE_LIMIT_MAX_CALLS"] = "100000"
os.environ["SUMMARY_FAILURE_POLICY"] = "preview"
os.environ.pop("DEEPSEEK_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.auth.deps import get_db, get_default_user
from app.config import settings
from app.db.session import init_db
from app.errors import ProviderError
from app.summaries import providers
from app.utils.security import ALGORITHM


class FakeProvider:
    """Records calls and returns a distinct summary per call."""

    def __init__(self):
        self.calls = []
        self.fail = False

    def summarize(self, content, config):
        self.calls.append((content, config.model))
        if self.fail:
            raise ProviderError("provider down")
        return f"summary #{len(self.calls)} by {config.model}"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user(db):
    return get_default_user(db)


def _override(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()
    return override_get_db


@pytest.fixture
def client(session_factory):
    app.dependency_overrides[get_db] = _override(session_factory)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(session_factory):
    """Build a TestClient for another app instance sharing the test database."""
    def _make(other_app):
        other_app.dependency_overrides[get_db] = _override(session_factory)
        return TestClient(other_app)
    return _make


@pytest.fixture
def fake_provider(monkeypatch):
    fake = FakeProvider()
    monkeypatch.setitem(providers.MODELS, "deepseek-chat",
                        providers.SupportedModel("DeepSeek Chat", "fake chat", fake))
    monkeypatch.setitem(providers.MODELS, "deepseek-reasoner",
                        providers.SupportedModel("DeepSeek Reasoner", "fake reasoner", fake))
    return fake


@pytest.fixture(autouse=True)
def _no_provider_credentials(monkeypatch):
    monkeypatch.setattr(settings, "deepseek_api_key", None)
    monkeypatch.setattr(settings, "summary_failure_policy", "preview")


@pytest.fixture
def make_group(client):
    def _make(name="Notes", files=None):
        r = client.post("/api/content-groups", json={"name": name, "files": files or []})
        assert r.status_code == 200, r.text
        return r.json()
    return _make


@pytest.fixture
def document(client, make_group):
    group = make_group(files=[{"name": "a.md", "path": "/a.md", "content": "# A\n\nSome **long** text about A."}])
    r = client.get("/api/documents", params={"groupId": group["id"], "path": "/a.md"})
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def make_token():
    """Sign a token the way the external identity provider does."""
    def _make(subject):
        return jwt.encode({"sub": subject}, settings.secret_key, algorithm=ALGORITHM)
    return _make
