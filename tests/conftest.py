import os
import tempfile
import uuid

import pytest

# Point the app at a throwaway SQLite file before anything imports app.*
_TMP_DIR = tempfile.mkdtemp(prefix="release-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["OPENAI_API_KEY"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from app.core.deps import get_completion_provider  # noqa: E402
from app.core.errors import UpstreamUnavailable  # noqa: E402
from app.db.base import SessionLocal  # noqa: E402
from app.main import app  # noqa: E402
from app.users.domain import TIER_FREE, TIER_PREMIUM  # noqa: E402
from app.users.store import UserStore  # noqa: E402


class FakeCompletionProvider:
    """Records calls; replies with a fixed text or fails like a dead upstream."""

    def __init__(self, reply="That sounds really hard. What feels most present for you right now?"):
        self.reply = reply
        self.fail = False
        self.calls = []

    def generate(self, system_instructions, messages):
        self.calls.append((system_instructions, [dict(m) for m in messages]))
        if self.fail:
            raise UpstreamUnavailable("upstream down")
        return self.reply


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(db_session):
    return UserStore(db_session)


@pytest.fixture
def make_user(store):
    def _make(premium=False, screen_name="sam"):
        if premium:
            return store.create(
                screen_name=screen_name,
                email=f"{uuid.uuid4().hex}@example.com",
                subscription_tier=TIER_PREMIUM,
                subscription_status="active",
            )
        return store.create(
            screen_name=screen_name,
            email=f"{uuid.uuid4().hex}@example.com",
            subscription_tier=TIER_FREE,
        )

    return _make


@pytest.fixture
def provider():
    return FakeCompletionProvider()


@pytest.fixture
def client(provider):
    app.dependency_overrides[get_completion_provider] = lambda: provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_completion_provider, None)
