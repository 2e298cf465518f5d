import os
import tempfile

# Must be in place before main/images are imported
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="portfolio-storage-")
os.environ["ADMIN_EMAIL"] = "admin@portfolio.dev"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ.pop("ADMIN_PASSWORD_HASH", None)
os.environ.setdefault("JWT_SECRET", "test-secret")

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
import images
import main

ADMIN_PASSWORD = "admin123"


@pytest.fixture
def db(monkeypatch):
    mock_db = mongomock.MongoClient()["portfolio_test"]
    database.ensure_indexes(mock_db)
    monkeypatch.setattr(database, "db", mock_db)
    return mock_db


@pytest.fixture
def client(db):
    return TestClient(main.app)


@pytest.fixture
def admin_headers(client):
    res = client.post("/api/login", json={"email": main.ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture(autouse=True)
def clean_images():
    images.ensure_storage()
    yield
    for name in os.listdir(images.image_dir()):
        os.remove(os.path.join(images.image_dir(), name))
