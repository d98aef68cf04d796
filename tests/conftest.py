import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from vrec.app import create_app
from vrec.auth.users import create_user
from vrec.db import init_db, make_engine, make_session_factory
from vrec.models import Role
from vrec.settings import Settings

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass-123"


class FakeS3Client:
    """Just enough of boto3's S3 client for the remote backend."""

    def __init__(self, fail_delete: bool = False, fail_put: bool = False):
        self.objects = {}
        self.deleted = []
        self.fail_delete = fail_delete
        self.fail_put = fail_put

    def put_object(self, Bucket, Key, Body, ContentType, Metadata=None):
        if self.fail_put:
            raise RuntimeError("provider unavailable")
        self.objects[(Bucket, Key)] = {"body": Body, "content_type": ContentType, "metadata": Metadata or {}}
        return {"ETag": '"abc"'}

    def delete_object(self, Bucket, Key):
        if self.fail_delete:
            raise RuntimeError("provider unavailable")
        self.objects.pop((Bucket, Key), None)
        self.deleted.append(Key)
        return {}


@pytest.fixture()
def env(tmp_path: Path, monkeypatch):
    """Point the app at a throwaway data dir with local storage."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("VREC_SECRET_KEY", "test-secret")
    monkeypatch.setenv("VREC_DATA_DIR", str(data_dir))
    monkeypatch.setenv("VREC_DATABASE_URL", f"sqlite:///{tmp_path / 'vrec.db'}")
    monkeypatch.setenv("VREC_UPLOAD_DIR", str(tmp_path / "uploads"))
    for name in ("VREC_S3_BUCKET", "VREC_S3_ACCESS_KEY_ID", "VREC_S3_SECRET_ACCESS_KEY", "VERCEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("VREC_ADMIN_MIRROR_ENABLED", raising=False)
    return tmp_path


@pytest.fixture()
def remote_env(env, monkeypatch):
    monkeypatch.setenv("VREC_S3_BUCKET", "recordings-bucket")
    monkeypatch.setenv("VREC_S3_ACCESS_KEY_ID", "AKIATEST")
    monkeypatch.setenv("VREC_S3_SECRET_ACCESS_KEY", "shh")
    monkeypatch.setenv("VREC_S3_PUBLIC_BASE_URL", "https://cdn.example.com")
    return env


@pytest.fixture()
def settings(env) -> Settings:
    return Settings.from_env()


@pytest.fixture()
def db(settings):
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    engine = make_engine(settings.database_url)
    init_db(engine)
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def app(env):
    return create_app()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


def seed_admin(app, email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD):
    db = app.state.session_factory()
    try:
        return create_user(db, email, password, Role.ADMINISTRATOR)
    finally:
        db.close()


def login(client: TestClient, email: str, password: str):
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r


def register(client: TestClient, email: str, password: str = "secret-123"):
    r = client.post("/api/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()["user"]


@pytest.fixture()
def admin_client(app):
    seed_admin(app)
    with TestClient(app) as c:
        login(c, ADMIN_EMAIL, ADMIN_PASSWORD)
        yield c
