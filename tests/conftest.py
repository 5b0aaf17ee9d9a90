import mongomock
import pytest
from fastapi.testclient import TestClient

import crud
import main
from blob_storage import get_blob_store
from config import Settings, get_settings
from db import get_db
from utils.auth_utils import create_access_token

SECRET = "test-secret"


class DummyBlobStore:
    def __init__(self, error=None):
        self.error = error
        self.uploads = []

    def put(self, key, data, content_type="image/png"):
        if self.error:
            raise self.error
        self.uploads.append((key, data, content_type))
        return f"https://test-bucket.s3.amazonaws.com/{key}"


@pytest.fixture
def settings():
    return Settings(secret_key=SECRET, s3_bucket="test-bucket")


@pytest.fixture
def db():
    database = mongomock.MongoClient()["movie_api_test"]
    crud.ensure_indexes(database)
    return database


@pytest.fixture
def blob_store():
    return DummyBlobStore()


@pytest.fixture
def client(settings, db, blob_store):
    # no context manager: the lifespan would try to reach a real MongoDB and S3
    main.app.dependency_overrides[get_settings] = lambda: settings
    main.app.dependency_overrides[get_db] = lambda: db
    main.app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token("tester1", SECRET, 60)
    return {"Authorization": f"Bearer {token}"}
