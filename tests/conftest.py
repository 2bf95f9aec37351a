import mongomock
import pytest
from fastapi.testclient import TestClient

from coursetrack.config.settings import Settings
from coursetrack.repositories.mongo_repository import TrackedCourseRepository
from main import create_app


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def db():
    return mongomock.MongoClient()["coursetrack_test"]


@pytest.fixture
def collection(db, settings):
    return db[settings.mongo_collection]


@pytest.fixture
def repo(collection):
    return TrackedCourseRepository(collection)


@pytest.fixture
def app(db, settings):
    app = create_app(db=db, settings=settings)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def course_payload():
    return {"courseName": "Golang", "status": "Ongoing", "progress": 50}
