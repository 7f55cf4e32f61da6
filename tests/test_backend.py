"""Tests for the table backends."""

import json

import httpx
import pytest

from mohero_admin.db.backend import SQLiteBackend, check_identifier
from mohero_admin.db.engine import seed_exercise_bank
from mohero_admin.db.rest import RestBackend, build_filter_params
from mohero_admin.db.schema import DAYS, EXERCISE_BANK, PROGRAMS
from mohero_admin.errors import BackendError
from mohero_admin.models.exercises import STARTER_EXERCISES


class TestSQLiteBackend:
    """Tests for the local SQLite backend."""

    @pytest.mark.asyncio
    async def test_insert_assigns_ids(self, backend):
        """Test that inserted rows come back with generated ids."""
        rows = await backend.insert(PROGRAMS, [{"name": "A", "duration": 2}, {"name": "B", "duration": 3}])

        assert [r["name"] for r in rows] == ["A", "B"]
        assert all(r["id"] for r in rows)
        assert rows[0]["id"] != rows[1]["id"]

    @pytest.mark.asyncio
    async def test_json_and_bool_columns(self, backend):
        """Test that JSON and boolean columns survive storage."""
        rows = await backend.insert(
            PROGRAMS,
            [{"name": "A", "duration": 1, "tags": ["x", "y"], "active": False}],
        )

        stored = await backend.get(PROGRAMS, rows[0]["id"])
        assert stored["tags"] == ["x", "y"]
        assert stored["active"] is False

    @pytest.mark.asyncio
    async def test_select_filters(self, backend):
        """Test equality, IN and empty IN filters."""
        programs = await backend.insert(PROGRAMS, [{"name": "P", "duration": 3}])
        program_id = programs[0]["id"]
        await backend.insert(DAYS, [{"program_id": program_id, "ordinal": n} for n in (3, 1, 2)])

        ordered = await backend.select(DAYS, {"program_id": program_id}, order_by="ordinal")
        assert [d["ordinal"] for d in ordered] == [1, 2, 3]

        some = await backend.select(DAYS, {"ordinal": [1, 3]}, order_by="ordinal")
        assert [d["ordinal"] for d in some] == [1, 3]

        assert await backend.select(DAYS, {"ordinal": []}) == []
        assert await backend.count(DAYS, {"program_id": program_id}) == 3

    @pytest.mark.asyncio
    async def test_update_and_delete_require_filters(self, backend):
        """Test that whole-table updates and deletes are refused."""
        with pytest.raises(ValueError):
            await backend.update(PROGRAMS, {"name": "X"}, {})
        with pytest.raises(ValueError):
            await backend.delete(PROGRAMS, {})

    @pytest.mark.asyncio
    async def test_upsert_updates_existing_rows(self, backend):
        """Test that upsert replaces rows keyed on id."""
        rows = await backend.insert(PROGRAMS, [{"name": "Old", "duration": 1}])
        row_id = rows[0]["id"]

        updated = await backend.upsert(PROGRAMS, [{"id": row_id, "name": "New", "duration": 4}])

        assert updated[0]["name"] == "New"
        assert await backend.count(PROGRAMS) == 1

    @pytest.mark.asyncio
    async def test_upsert_requires_id(self, backend):
        with pytest.raises(ValueError):
            await backend.upsert(PROGRAMS, [{"name": "No id", "duration": 1}])

    @pytest.mark.asyncio
    async def test_constraint_violation_raises_backend_error(self, backend):
        """Test that a duplicate day ordinal is reported as a backend error."""
        programs = await backend.insert(PROGRAMS, [{"name": "P", "duration": 1}])
        day = {"program_id": programs[0]["id"], "ordinal": 1}
        await backend.insert(DAYS, [day])

        with pytest.raises(BackendError):
            await backend.insert(DAYS, [day])
        assert await backend.count(DAYS) == 1

    @pytest.mark.asyncio
    async def test_atomic_rolls_back_on_error(self, backend):
        """Test that a failed atomic block leaves no trace."""
        with pytest.raises(RuntimeError):
            async with backend.atomic():
                await backend.insert(PROGRAMS, [{"name": "Temp", "duration": 1}])
                raise RuntimeError("boom")

        assert await backend.count(PROGRAMS) == 0

    @pytest.mark.asyncio
    async def test_not_connected(self):
        """Test that using a closed backend raises a backend error."""
        with pytest.raises(BackendError):
            await SQLiteBackend().select(PROGRAMS)

    def test_check_identifier(self):
        assert check_identifier("exercise_bank") == "exercise_bank"
        with pytest.raises(ValueError):
            check_identifier("programs; DROP TABLE days")


class TestSeed:
    """Tests for seeding the exercise bank."""

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, backend):
        """Test that seeding twice adds nothing the second time."""
        assert await seed_exercise_bank(backend) == len(STARTER_EXERCISES)
        assert await seed_exercise_bank(backend) == 0
        assert await backend.count(EXERCISE_BANK) == len(STARTER_EXERCISES)


def make_rest(handler) -> RestBackend:
    return RestBackend(
        "https://example.test/",
        "secret",
        transport=httpx.MockTransport(handler),
    )


class TestRestBackend:
    """Tests for the hosted REST backend."""

    def test_filter_params(self):
        """Test filter translation."""
        params = build_filter_params({"program_id": "p1", "ordinal": [1, 2], "clan_id": None, "active": True})

        assert params == [
            ("program_id", "eq.p1"),
            ("ordinal", 'in.("1","2")'),
            ("clan_id", "is.null"),
            ("active", "eq.true"),
        ]

    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            RestBackend("", "key")
        with pytest.raises(ValueError):
            RestBackend("https://example.test", "")

    @pytest.mark.asyncio
    async def test_select_request(self):
        """Test that select builds the expected request."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=[{"id": "d1", "program_id": "p1", "ordinal": 1}])

        backend = make_rest(handler)
        rows = await backend.select(DAYS, {"program_id": "p1"}, order_by="ordinal")
        await backend.close()

        request = seen["request"]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/days"
        assert request.url.params["program_id"] == "eq.p1"
        assert request.url.params["order"] == "ordinal.asc"
        assert request.headers["apikey"] == "secret"
        assert request.headers["authorization"] == "Bearer secret"
        assert rows[0]["id"] == "d1"

    @pytest.mark.asyncio
    async def test_insert_is_one_batch(self):
        """Test that several rows are inserted with a single request."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json=json.loads(request.content))

        backend = make_rest(handler)
        rows = await backend.insert(DAYS, [{"program_id": "p1", "ordinal": n} for n in (1, 2, 3)])
        await backend.close()

        assert len(requests) == 1
        assert requests[0].headers["prefer"] == "return=representation"
        assert [r["ordinal"] for r in rows] == [1, 2, 3]
        assert all(r["id"] for r in rows)

    @pytest.mark.asyncio
    async def test_upsert_merges_on_id(self):
        """Test the upsert request parameters."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(201, json=json.loads(request.content))

        backend = make_rest(handler)
        await backend.upsert("exercise_assignments", [{"id": "a1", "ordinal": 2}])
        await backend.close()

        request = seen["request"]
        assert request.url.params["on_conflict"] == "id"
        assert "resolution=merge-duplicates" in request.headers["prefer"]

    @pytest.mark.asyncio
    async def test_count_reads_content_range(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"id": "x"}], headers={"content-range": "0-0/42"})

        backend = make_rest(handler)
        assert await backend.count(PROGRAMS) == 42
        await backend.close()

    @pytest.mark.asyncio
    async def test_http_error_becomes_backend_error(self):
        """Test that server errors carry the server's message."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, json={"message": "duplicate key value"})

        backend = make_rest(handler)
        with pytest.raises(BackendError, match="duplicate key value"):
            await backend.insert(DAYS, [{"program_id": "p1", "ordinal": 1}])
        await backend.close()

    @pytest.mark.asyncio
    async def test_network_error_becomes_backend_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        backend = make_rest(handler)
        with pytest.raises(BackendError):
            await backend.select(PROGRAMS)
        await backend.close()
