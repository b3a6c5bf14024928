import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path
from typing import Callable, List

import pytest
from fastapi.testclient import TestClient

from simpleblog.app import create_app
from simpleblog.config import Settings
from simpleblog.infra.db import Database

BASE_URL = "https://testserver"  # Secure cookies are only sent over https


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(secret_key="test-secret", db_path=tmp_path / "blog.db")


@pytest.fixture()
def db(settings: Settings) -> Database:
    d = Database(settings.db_path)
    d.init_schema()
    return d


@pytest.fixture()
def conn(db: Database):
    with db.connection() as c:
        yield c


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def make_client(app) -> Callable[[], TestClient]:
    """Factory for independent browsers (separate cookie jars) on the same app."""
    opened: List[TestClient] = []

    def _make() -> TestClient:
        c = TestClient(app, base_url=BASE_URL)
        c.__enter__()
        opened.append(c)
        return c

    yield _make
    for c in opened:
        c.__exit__(None, None, None)


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()


def register(client: TestClient, username: str, password: str = "password1"):
    return client.post(
        "/register",
        data={"username": username, "password": password},
        follow_redirects=False,
    )


def create_post(client: TestClient, title: str, body: str) -> int:
    r = client.post("/create-post", data={"title": title, "body": body}, follow_redirects=False)
    assert r.status_code == 303, r.text
    location = r.headers["location"]
    assert location.startswith("/post/")
    return int(location.rsplit("/", 1)[1])


def count_users(conn) -> int:
    return int(conn.execute("SELECT COUNT(*) FROM users").fetchone()[0])
