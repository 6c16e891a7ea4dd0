import pytest
from fastapi.testclient import TestClient

from school_api.config import get_settings
from school_api.database import Database
from school_api.main import create_app


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file per test."""
    return get_settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        LOG_DIR="",
        STATIC_DIR=str(tmp_path / "public"),
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session(settings):
    db = Database(settings.DATABASE_URL)
    db.create_db_and_tables()
    with db.session() as s:
        yield s
    db.dispose()


@pytest.fixture
def make_course(client):
    def _make(name="Software Development", **extra):
        payload = {"name": name, "description": f"{name} course", "duration": 12, **extra}
        r = client.post("/api/courses", json=payload)
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def make_student(client):
    def _make(email, course_id, **extra):
        payload = {
            "name": email.split("@")[0],
            "email": email,
            "course": course_id,
            "enrollmentDate": "2024-02-01",
            **extra,
        }
        r = client.post("/api/students", json=payload)
        assert r.status_code == 201, r.text
        return r.json()
    return _make
