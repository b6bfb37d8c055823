"""
Notes API - HTTP Route Tests
=============================

What:  The HTTP contract: paths, status codes, JSON shape, error bodies.
How:   HTTPX AsyncClient over ASGITransport against a fresh app per test.
"""

import logging
import uuid

import pytest

from notes_api.exceptions import StoreFault


async def create(client, title="T", text="X"):
    response = await client.post("/notes", json={"Title": title, "Text": text})
    assert response.status_code == 201
    return response.json()


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestListRoute:

    @pytest.mark.asyncio
    async def test_empty_list_is_array(self, test_client):
        response = await test_client.get("/notes")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_round_trip(self, test_client):
        created = await create(test_client, "T", "X")

        response = await test_client.get("/notes")

        body = response.json()
        assert body == [created]
        assert set(body[0]) == {"Id", "Title", "Text"}
        assert body[0]["Id"]
        assert body[0]["Title"] == "T"
        assert body[0]["Text"] == "X"

    @pytest.mark.asyncio
    async def test_store_fault_is_500(self, test_client, monkeypatch):
        def broken_list(self):
            raise StoreFault(message="index corrupted", context={"table": "notes"})

        monkeypatch.setattr("notes_api.services.note_service.NoteService.list_notes", broken_list)

        response = await test_client.get("/notes")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "index corrupted" not in body["message"]


class TestCreateRoute:

    @pytest.mark.asyncio
    async def test_create_returns_record(self, test_client):
        body = await create(test_client, "hello", "world")
        assert body["Title"] == "hello"
        assert body["Text"] == "world"
        assert str(uuid.UUID(body["Id"])) == body["Id"]

    @pytest.mark.asyncio
    async def test_lowercase_keys_accepted(self, test_client):
        response = await test_client.post("/notes", json={"title": "a", "text": "b"})
        assert response.status_code == 201
        assert response.json()["Title"] == "a"
        assert response.json()["Text"] == "b"

    @pytest.mark.asyncio
    async def test_client_id_is_ignored(self, test_client):
        mine = str(uuid.uuid4())
        response = await test_client.post("/notes", json={"Id": mine, "Title": "a", "Text": "b"})
        assert response.status_code == 201
        assert response.json()["Id"] != mine

    @pytest.mark.asyncio
    async def test_missing_and_null_fields_become_empty(self, test_client):
        response = await test_client.post("/notes", json={"Title": None})
        assert response.status_code == 201
        assert response.json()["Title"] == ""
        assert response.json()["Text"] == ""

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/notes",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert (await test_client.get("/notes")).json() == []

    @pytest.mark.asyncio
    async def test_wrong_field_type_is_400(self, test_client):
        response = await test_client.post("/notes", json={"Title": 5, "Text": "x"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_object_body_is_400(self, test_client):
        response = await test_client.post("/notes", json=["Title", "Text"])
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_creates_are_distinct(self, test_client):
        for i in range(5):
            await create(test_client, f"t{i}", "x")
        ids = [n["Id"] for n in (await test_client.get("/notes")).json()]
        assert len(ids) == 5
        assert len(set(ids)) == 5


class TestUpdateRoute:

    @pytest.mark.asyncio
    async def test_update_replaces(self, test_client):
        created = await create(test_client, "T", "X")

        response = await test_client.put(
            f"/notes/{created['Id']}", json={"Title": "T2", "Text": "X2"}
        )

        assert response.status_code == 200
        assert response.json() == {"Id": created["Id"], "Title": "T2", "Text": "X2"}
        listed = (await test_client.get("/notes")).json()
        assert listed == [response.json()]

    @pytest.mark.asyncio
    async def test_update_missing_is_404(self, test_client):
        await create(test_client)
        before = (await test_client.get("/notes")).json()

        response = await test_client.put(
            f"/notes/{uuid.uuid4()}", json={"Title": "T2", "Text": "X2"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert (await test_client.get("/notes")).json() == before

    @pytest.mark.asyncio
    async def test_update_malformed_id_is_404(self, test_client):
        response = await test_client.put("/notes/abc", json={"Title": "T2", "Text": "X2"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_unhyphenated_id_is_404(self, test_client):
        created = await create(test_client, "T", "X")
        bare = uuid.UUID(created["Id"]).hex

        response = await test_client.put(f"/notes/{bare}", json={"Title": "T2", "Text": "X2"})

        assert response.status_code == 404
        assert (await test_client.get("/notes")).json() == [created]

    @pytest.mark.asyncio
    async def test_update_malformed_body_is_400(self, test_client):
        created = await create(test_client)
        response = await test_client.put(
            f"/notes/{created['Id']}",
            content=b"[[[",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert (await test_client.get("/notes")).json() == [created]


class TestDeleteRoute:

    @pytest.mark.asyncio
    async def test_delete_existing(self, test_client):
        created = await create(test_client)
        response = await test_client.delete(f"/notes/{created['Id']}")
        assert response.status_code == 204
        assert response.content == b""
        assert (await test_client.get("/notes")).json() == []

    @pytest.mark.asyncio
    async def test_delete_absent_succeeds(self, test_client):
        response = await test_client.delete(f"/notes/{uuid.uuid4()}")
        assert response.status_code == 204
        response = await test_client.delete("/notes/not-a-uuid")
        assert response.status_code == 204


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_request_id(self, test_client):
        response = await test_client.get("/notes")
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_client_request_id_echoed(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.put(
            f"/notes/{uuid.uuid4()}",
            json={"Title": "a", "Text": "b"},
            headers={"X-Request-ID": "trace-1"},
        )
        assert response.status_code == 404
        assert response.json()["request_id"] == "trace-1"


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_note_routes_log_id_and_version(self, test_client, caplog):
        created = await create(test_client)
        caplog.set_level(logging.INFO, logger="notes_api.access")

        await test_client.put(f"/notes/{created['Id']}", json={"Title": "a", "Text": "b"})

        [record] = [r for r in caplog.records if r.name == "notes_api.access"]
        assert record.method == "PUT"
        assert record.note_id == created["Id"]
        assert record.status == 200
        assert record.store_version == 2
        assert created["Id"] in record.getMessage()

    @pytest.mark.asyncio
    async def test_missing_note_logs_warning(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")

        await test_client.put(f"/notes/{uuid.uuid4()}", json={"Title": "a", "Text": "b"})

        [record] = [r for r in caplog.records if r.name == "notes_api.access"]
        assert record.levelno == logging.WARNING
        assert record.store_version == 0

    @pytest.mark.asyncio
    async def test_health_is_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="notes_api.access")
        await test_client.get("/api/health")
        assert not [r for r in caplog.records if r.name == "notes_api.access"]
