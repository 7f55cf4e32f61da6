"""Tests for the dashboard JSON API."""

import pytest
from fastapi.testclient import TestClient

from mohero_admin.config import Settings
from mohero_admin.db.repositories import ExerciseAssignmentRepository
from mohero_admin.errors import BackendError
from mohero_admin.web import create_app


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, backend_url="", database_path=":memory:", **overrides)


@pytest.fixture
def client():
    """A test client over an in-memory database."""
    with TestClient(create_app(make_settings())) as client:
        yield client


@pytest.fixture
def program(client):
    response = client.post(
        "/programs",
        json={"name": "Foundations", "duration": 3, "type": "discovery", "tags": ["beginner"]},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def bank_exercise(client):
    response = client.post(
        "/bank",
        json={"name": "Push-ups", "type": "push", "level": 1, "zones": ["chest"]},
    )
    assert response.status_code == 201
    return response.json()


class TestApp:
    """Tests for application wiring."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["backend"] == "sqlite"

    def test_root_redirects(self, client):
        response = client.get("/", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/programs"


class TestProgramRoutes:
    """Tests for program CRUD."""

    def test_create_and_get(self, client, program):
        response = client.get(f"/programs/{program['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Foundations"
        assert response.json()["tags"] == ["beginner"]

    def test_list(self, client, program):
        response = client.get("/programs")
        assert [p["id"] for p in response.json()["programs"]] == [program["id"]]

    def test_invalid_duration(self, client):
        response = client.post("/programs", json={"name": "Bad", "duration": 0})
        assert response.status_code == 422

    def test_missing_program(self, client):
        assert client.get("/programs/missing").status_code == 404
        assert client.get("/programs/missing/board").status_code == 404

    def test_update(self, client, program):
        response = client.put(
            f"/programs/{program['id']}",
            json={"name": "Foundations 2", "duration": 5, "type": "premium"},
        )
        assert response.status_code == 200
        assert response.json()["duration"] == 5
        assert response.json()["type"] == "premium"

    def test_delete(self, client, program):
        client.get(f"/programs/{program['id']}/board")

        response = client.delete(f"/programs/{program['id']}")

        assert response.json() == {"deleted": program["id"]}
        assert client.get(f"/programs/{program['id']}").status_code == 404


class TestBoardRoutes:
    """Tests for the exercise manager routes."""

    def test_board_creates_days(self, client, program):
        """Test that opening the board fills in every day."""
        response = client.get(f"/programs/{program['id']}/board")

        assert response.status_code == 200
        board = response.json()
        assert [d["ordinal"] for d in board["days"]] == [1, 2, 3]
        assert all(d["exercises"] == [] for d in board["days"])
        assert board["error"] is None

    def test_add_reorder_delete(self, client, program, bank_exercise):
        """Test the full add, reorder and delete flow on day 2."""
        board = client.get(f"/programs/{program['id']}/board").json()
        day_id = board["days"][1]["id"]
        url = f"/programs/{program['id']}/days/{day_id}"

        response = client.post(
            f"{url}/exercises",
            json={"bank_exercise_id": bank_exercise["id"], "target_value": "3x15"},
        )
        assert response.status_code == 201
        client.post(
            f"{url}/exercises",
            json={"bank_exercise_id": bank_exercise["id"], "target_value": "2x20", "level": 2},
        )

        board = client.post(f"{url}/reorder", json={"index": 1, "direction": "up"}).json()
        exercises = board["days"][1]["exercises"]
        assert [e["target_value"] for e in exercises] == ["2x20", "3x15"]
        assert [e["ordinal"] for e in exercises] == [1, 2]

        board = client.delete(f"/programs/{program['id']}/exercises/{exercises[0]['id']}").json()
        exercises = board["days"][1]["exercises"]
        assert [e["target_value"] for e in exercises] == ["3x15"]
        assert exercises[0]["ordinal"] == 1

    def test_reorder_out_of_range(self, client, program):
        board = client.get(f"/programs/{program['id']}/board").json()
        day_id = board["days"][0]["id"]

        response = client.post(
            f"/programs/{program['id']}/days/{day_id}/reorder",
            json={"index": 0, "direction": "up"},
        )
        assert response.status_code == 400

    def test_invalid_direction(self, client, program):
        board = client.get(f"/programs/{program['id']}/board").json()
        day_id = board["days"][0]["id"]

        response = client.post(
            f"/programs/{program['id']}/days/{day_id}/reorder",
            json={"index": 0, "direction": "sideways"},
        )
        assert response.status_code == 422

    def test_edit_and_copy(self, client, program, bank_exercise):
        board = client.get(f"/programs/{program['id']}/board").json()
        first, second = board["days"][0]["id"], board["days"][1]["id"]
        board = client.post(
            f"/programs/{program['id']}/days/{first}/exercises",
            json={"bank_exercise_id": bank_exercise["id"], "target_value": "3x10"},
        ).json()
        assignment_id = board["days"][0]["exercises"][0]["id"]

        response = client.patch(
            f"/programs/{program['id']}/exercises/{assignment_id}",
            json={"target_value": "4x10", "variant": "On knees"},
        )
        assert response.status_code == 200
        assert response.json()["days"][0]["exercises"][0]["variant"] == "On knees"

        response = client.patch(
            f"/programs/{program['id']}/exercises/{assignment_id}",
            json={"ordinal": 3},
        )
        assert response.status_code == 400

        board = client.post(
            f"/programs/{program['id']}/days/{second}/copy",
            json={"source_day_id": first},
        ).json()
        assert board["days"][1]["exercises"][0]["target_value"] == "4x10"

    def test_edit_rejects_null_and_mistyped_values(self, client, program, bank_exercise):
        """Test that bad edit bodies are client errors and leave the exercise unchanged."""
        board = client.get(f"/programs/{program['id']}/board").json()
        day_id = board["days"][0]["id"]
        board = client.post(
            f"/programs/{program['id']}/days/{day_id}/exercises",
            json={"bank_exercise_id": bank_exercise["id"], "target_value": "3x10"},
        ).json()
        url = f"/programs/{program['id']}/exercises/{board['days'][0]['exercises'][0]['id']}"

        for body in ({"level": None}, {"type": None}, {"name": None}, {"type": "juggling"}):
            assert client.patch(url, json=body).status_code == 400

        for body in ({"type": 5}, {"level": 4}, {"level": "high"}, {"name": ""}):
            assert client.patch(url, json=body).status_code == 422

        exercise = client.get(f"/programs/{program['id']}/board").json()["days"][0]["exercises"][0]
        assert exercise["name"] == "Push-ups"
        assert exercise["type"] == "push"
        assert exercise["level"] == 1

    def test_board_fetch_failure_is_reported(self, client, program, monkeypatch):
        """Test that a failed exercise fetch is a 502, not a board of empty days."""
        async def failing(self, day_ids):
            raise BackendError("connection reset")

        monkeypatch.setattr(ExerciseAssignmentRepository, "list_for_days", failing)

        response = client.get(f"/programs/{program['id']}/board")

        assert response.status_code == 502
        assert "days" not in response.json()
        assert "connection reset" in response.json()["detail"]

    def test_prune_days(self, client, program):
        client.get(f"/programs/{program['id']}/board")
        client.put(f"/programs/{program['id']}", json={"name": "Foundations", "duration": 2})

        board = client.get(f"/programs/{program['id']}/board").json()
        assert [d["ordinal"] for d in board["days"]] == [1, 2]

        response = client.post(f"/programs/{program['id']}/prune-days")
        assert response.json() == {"removed": 1}


class TestDisabledFeatures:
    """Tests for turned-off manager affordances."""

    def test_reorder_disabled(self):
        app = create_app(make_settings(enable_reorder=False, enable_bank_panel=False))
        with TestClient(app) as client:
            program = client.post("/programs", json={"name": "P", "duration": 1}).json()
            board = client.get(f"/programs/{program['id']}/board").json()
            day_id = board["days"][0]["id"]

            response = client.post(
                f"/programs/{program['id']}/days/{day_id}/reorder",
                json={"index": 0, "direction": "up"},
            )
            assert response.status_code == 409

            response = client.post(
                f"/programs/{program['id']}/days/{day_id}/exercises",
                json={"bank_exercise_id": "any"},
            )
            assert response.status_code == 409


class TestBankAndBlogRoutes:
    """Tests for the bank, blog and stats routes."""

    def test_bank_search_and_filter(self, client, bank_exercise):
        client.post("/bank", json={"name": "Plank", "type": "core"})

        names = [e["name"] for e in client.get("/bank").json()["exercises"]]
        assert names == ["Plank", "Push-ups"]
        assert [e["name"] for e in client.get("/bank", params={"q": "push"}).json()["exercises"]] == ["Push-ups"]
        assert [e["name"] for e in client.get("/bank", params={"type": "core"}).json()["exercises"]] == ["Plank"]

    def test_bank_update_and_delete(self, client, bank_exercise):
        response = client.put(
            f"/bank/{bank_exercise['id']}",
            json={"name": "Wide push-ups", "type": "push", "level": 2},
        )
        assert response.json()["level"] == 2

        assert client.delete(f"/bank/{bank_exercise['id']}").status_code == 200
        assert client.get(f"/bank/{bank_exercise['id']}").status_code == 404

    def test_blog_crud(self, client):
        response = client.post("/blog", json={"title": "Welcome", "content": "Hello"})
        assert response.status_code == 201
        post_id = response.json()["id"]

        assert client.get("/blog").json()["posts"][0]["title"] == "Welcome"
        assert client.delete(f"/blog/{post_id}").status_code == 200
        assert client.get(f"/blog/{post_id}").status_code == 404

    def test_stats(self, client, program, bank_exercise):
        board = client.get(f"/programs/{program['id']}/board").json()
        client.post(
            f"/programs/{program['id']}/days/{board['days'][0]['id']}/exercises",
            json={"bank_exercise_id": bank_exercise["id"], "target_value": "3x10"},
        )

        stats = client.get("/stats").json()

        assert stats["total_programs"] == 1
        assert stats["programs_by_type"]["discovery"] == 1
        assert stats["programs_by_type"]["premium"] == 0
        assert stats["programs_by_clan"] == {"unassigned": 1}
        assert stats["bank_exercises"] == 1
        assert stats["total_assignments"] == 1
        content = stats["program_content"][0]
        assert content["days"] == 3
        assert content["empty_days"] == 2
