"""
Tests for the in-memory storage collaborator.
"""

import asyncio

import pytest

from bugbounty.storage import Collections, DuplicateKeyError, InMemoryMetadataStorage


@pytest.fixture
def storage():
    return InMemoryMetadataStorage()


def run(coro):
    return asyncio.run(coro)


class TestInMemoryMetadataStorage:
    def test_save_and_get(self, storage):
        run(storage.save("things", "t1", {"id": "t1", "name": "one"}))

        assert run(storage.get("things", "t1")) == {"id": "t1", "name": "one"}
        assert run(storage.get("things", "t2")) is None

    def test_returned_documents_are_copies(self, storage):
        run(storage.save("things", "t1", {"id": "t1", "tags": ["a"]}))

        run(storage.get("things", "t1"))["tags"].append("b")

        assert run(storage.get("things", "t1"))["tags"] == ["a"]

    def test_unique_email(self, storage):
        run(storage.save(Collections.USERS, "u1", {"email": "a@example.com"}))

        with pytest.raises(DuplicateKeyError) as exc:
            run(storage.save(Collections.USERS, "u2", {"email": "a@example.com"}))

        assert exc.value.field == "email"
        assert len(run(storage.query(Collections.USERS))) == 1

    def test_resaving_same_document_is_not_a_duplicate(self, storage):
        run(storage.save(Collections.USERS, "u1", {"email": "a@example.com", "name": "A"}))
        run(storage.save(Collections.USERS, "u1", {"email": "a@example.com", "name": "B"}))

        assert run(storage.get(Collections.USERS, "u1"))["name"] == "B"

    def test_query_filters(self, storage):
        run(storage.save("r", "1", {"program_id": "p1", "researcher_id": "a"}))
        run(storage.save("r", "2", {"program_id": "p1", "researcher_id": "b"}))
        run(storage.save("r", "3", {"program_id": "p2", "researcher_id": "a"}))

        assert len(run(storage.query("r", {"program_id": "p1"}))) == 2
        assert len(run(storage.query("r", {"program_id": "p1", "researcher_id": "a"}))) == 1
        assert run(storage.query("missing")) == []

    def test_update_merges(self, storage):
        run(storage.save("r", "1", {"status": "OPEN", "severity": "LOW"}))

        updated = run(storage.update("r", "1", {"status": "RESOLVED"}))

        assert updated == {"status": "RESOLVED", "severity": "LOW"}
        assert run(storage.update("r", "nope", {"status": "OPEN"})) is None

    def test_delete_many(self, storage):
        run(storage.save("r", "1", {"program_id": "p1"}))
        run(storage.save("r", "2", {"program_id": "p1"}))
        run(storage.save("r", "3", {"program_id": "p2"}))

        assert run(storage.delete_many("r", {"program_id": "p1"})) == 2
        assert [d["program_id"] for d in run(storage.query("r"))] == ["p2"]

    def test_delete(self, storage):
        run(storage.save("r", "1", {}))

        assert run(storage.delete("r", "1")) is True
        assert run(storage.delete("r", "1")) is False
