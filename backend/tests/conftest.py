"""Pytest fixtures: file-backed SQLite database, fixed clock, recording notifier."""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import random  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import event  # noqa: E402

from journal.database import Database  # noqa: E402
from journal.dependencies import get_clock, get_rng  # noqa: E402
from journal.exceptions import NotifierError  # noqa: E402
from journal.main import create_app  # noqa: E402
from journal.models.user import Role  # noqa: E402
from journal.services import credential_service  # noqa: E402
from journal.services.notifier import Notifier  # noqa: E402
from journal.timeutil import utcnow  # noqa: E402

SQLITE_URL = "sqlite:///./test.db"


class FixedClock:
    """A clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingNotifier(Notifier):
    """Keeps every code it is asked to deliver; can be told to fail."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    def send_verification_code(self, email: str, code: str) -> None:
        if self.fail:
            raise NotifierError()
        self.sent.append((email, code))

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


@pytest.fixture(scope="function")
def database():
    """Create a fresh SQLite database for each test."""
    database = Database(SQLITE_URL)

    # Enable WAL mode for better concurrency
    @event.listens_for(database.engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    database.drop_all()
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture(scope="function")
def db(database):
    """Yield a database session bound to the test database."""
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def clock():
    # Start at the real current time so issued tokens are not already expired
    return FixedClock(utcnow())


@pytest.fixture(scope="function")
def rng():
    return random.Random(1234)


@pytest.fixture(scope="function")
def notifier():
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(database, clock, rng, notifier):
    """TestClient over an app wired to the test database, clock and notifier."""
    app = create_app(database=database, notifier=notifier)
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_rng] = lambda: rng
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def register_user(client: TestClient, email: str = "alice@example.com", password: str = "pw1") -> None:
    """Helper: POST /register and assert success."""
    resp = client.post("/register", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"success": True}


def login(client: TestClient, email: str = "alice@example.com", password: str = "pw1", code=None) -> str:
    """Helper: POST /login and return the bearer token."""
    body = {"email": email, "password": password}
    if code is not None:
        body["verificationCode"] = code
    resp = client.post("/login", json=body)
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_and_login(client: TestClient, email: str = "alice@example.com", password: str = "pw1") -> dict:
    """Helper: register, log in, and return auth headers."""
    register_user(client, email, password)
    return auth(login(client, email, password))


def create_admin(db, email: str = "admin@example.com", password: str = "adminpw"):
    """Helper: insert an admin user directly through the credential store."""
    return credential_service.register(db, email, password, role=Role.admin)


def submit_entry(client: TestClient, headers: dict, text: str, question_id: int = None, answer_id: int = None):
    """Helper: POST /submit, answering the current random question if none is given."""
    if question_id is None:
        question_id = client.get("/question", headers=headers).json()["id"]
    body = {"question_id": question_id, "text": text}
    if answer_id is not None:
        body["answer_id"] = answer_id
    return client.post("/submit", json=body, headers=headers)
