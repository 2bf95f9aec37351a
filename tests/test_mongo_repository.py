import bson
import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from coursetrack.models.tracked_course import validate_course_fields
from coursetrack.repositories.mongo_repository import TrackedCourseRepository
from coursetrack.services.errors import PersistenceError, UnexpectedStoreFailure


@pytest.fixture
def fields(course_payload):
    return validate_course_fields(course_payload)


def test_create_sets_owner_and_timestamps(repo, fields, collection):
    created = repo.create("alice", fields)
    assert created["userId"] == "alice"
    assert created["createdAt"] == created["updatedAt"]
    assert isinstance(created["_id"], str)
    stored = collection.find_one({"_id": ObjectId(created["_id"])})
    assert stored["courseName"] == "Golang"
    assert stored["instructor"] is None


def test_create_ignores_forged_immutable_fields(repo, fields):
    forged = dict(fields, userId="mallory", createdAt="yesterday", _id="x" * 24)
    created = repo.create("alice", forged)
    assert created["userId"] == "alice"
    assert created["_id"] != "x" * 24


def test_list_by_owner_is_scoped_and_newest_first(repo, fields):
    ids = [repo.create("alice", dict(fields, courseName=f"Course {i}"))["_id"] for i in range(3)]
    repo.create("bob", fields)
    listed = repo.list_by_owner("alice")
    assert [d["_id"] for d in listed] == list(reversed(ids))
    assert {d["userId"] for d in listed} == {"alice"}
    assert repo.list_by_owner("nobody") == []


def test_read_one_requires_matching_owner(repo, fields):
    rid = repo.create("alice", fields)["_id"]
    assert repo.read_one("alice", rid)["_id"] == rid
    assert repo.read_one("bob", rid) is None
    assert repo.read_one("alice", str(ObjectId())) is None
    assert repo.read_one("alice", "not-an-object-id") is None


def test_update_is_scoped_and_refreshes_updated_at(repo, fields):
    created = repo.create("alice", fields)
    rid = created["_id"]

    assert repo.update("bob", rid, dict(fields, progress=99)) is None
    assert repo.read_one("alice", rid)["progress"] == 50

    updated = repo.update("alice", rid, dict(fields, progress=80, userId="bob"))
    assert updated["progress"] == 80
    assert updated["userId"] == "alice"
    assert updated["createdAt"] == created["createdAt"]
    assert updated["updatedAt"] >= updated["createdAt"]


def test_delete_is_scoped(repo, fields):
    rid = repo.create("alice", fields)["_id"]
    assert repo.delete("bob", rid) is False
    assert repo.delete("alice", "garbage") is False
    assert repo.delete("alice", rid) is True
    assert repo.delete("alice", rid) is False


def test_ensure_indexes(repo, collection):
    repo.ensure_indexes()
    indexed = [[k for k, _ in spec["key"]] for spec in collection.index_information().values()]
    assert ["userId", "createdAt"] in indexed
    assert ["userId", "_id"] in indexed


class _BrokenCollection:
    def __init__(self, exc):
        self.exc = exc

    def insert_one(self, doc):
        raise self.exc

    def find(self, query):
        raise self.exc

    def delete_one(self, query):
        raise self.exc


def test_rejected_write_maps_to_persistence_error(fields):
    repo = TrackedCourseRepository(_BrokenCollection(DuplicateKeyError("E11000 duplicate key")))
    with pytest.raises(PersistenceError):
        repo.create("alice", fields)


def test_connectivity_fault_maps_to_unexpected_failure():
    repo = TrackedCourseRepository(_BrokenCollection(ServerSelectionTimeoutError("no servers")))
    with pytest.raises(UnexpectedStoreFailure):
        repo.list_by_owner("alice")
    with pytest.raises(UnexpectedStoreFailure):
        repo.delete("alice", str(ObjectId()))


class _EncodingCollection:
    """Codifica a BSON antes de delegar, como hace el driver real."""

    def __init__(self, inner):
        self.inner = inner

    def insert_one(self, doc):
        bson.encode(doc)
        return self.inner.insert_one(doc)

    def find(self, query):
        bson.encode(query)
        return self.inner.find(query)


def test_unencodable_strings_map_to_persistence_error(collection, fields):
    repo = TrackedCourseRepository(_EncodingCollection(collection))
    with pytest.raises(PersistenceError):
        repo.create("\ud800", fields)
    with pytest.raises(PersistenceError):
        repo.create("alice", dict(fields, notes="bad \udfff"))
    with pytest.raises(PersistenceError):
        repo.list_by_owner("\ud800")
    assert collection.count_documents({}) == 0
