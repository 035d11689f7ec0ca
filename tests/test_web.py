"""Tests for the web API."""

import pytest
from fastapi.testclient import TestClient

from lift_tracker.web import create_app

WORKOUT = """# Strength
[Back Squat]: 5x5
[Zercher Squat]: 3x5
[Bench Press]: 5x5x5

# Finisher
AMRAP 5min:
10 [Push ups]
"""


@pytest.fixture
def client(db_path):
    """TestClient bound to the temporary database."""
    with TestClient(create_app(db_path)) as test_client:
        yield test_client


@pytest.fixture
def headers(user):
    return {"X-User-Id": str(user.id)}


@pytest.fixture
def other_headers(other_user):
    return {"X-User-Id": str(other_user.id)}


def _exercise_id(client, headers, title):
    data = client.get("/exercises", headers=headers).json()
    return next(e["id"] for e in data["user"] + data["global"] if e["title"] == title)


class TestRequestContext:
    """The acting user comes from the X-User-Id header."""

    def test_health_needs_no_user(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_missing_header(self, client):
        assert client.get("/exercises").status_code == 401

    def test_unknown_user(self, client):
        assert client.get("/exercises", headers={"X-User-Id": "999"}).status_code == 401


class TestExerciseRoutes:
    """Tests for /exercises."""

    def test_list_groups_own_and_global(self, client, headers):
        client.post("/exercises", json={"title": "Sled Push"}, headers=headers)

        data = client.get("/exercises", headers=headers).json()

        assert [e["title"] for e in data["user"]] == ["Sled Push"]
        assert "Push-ups" in [e["title"] for e in data["global"]]

    def test_validation_error(self, client, headers):
        response = client.post("/exercises", json={"title": ""}, headers=headers)

        assert response.status_code == 422
        assert "title" in response.json()["errors"]

    def test_delete_foreign_exercise(self, client, headers, other_headers):
        created = client.post("/exercises", json={"title": "Sled Push"}, headers=other_headers)

        response = client.delete(f"/exercises/{created.json()['id']}", headers=headers)

        assert response.status_code == 403

    def test_alias(self, client, headers):
        squat_id = _exercise_id(client, headers, "Back Squat")

        response = client.put(
            f"/exercises/{squat_id}/alias", json={"alias_name": "Squat"}, headers=headers
        )

        assert response.status_code == 200
        names = {e["id"]: e["name"] for e in client.get("/exercises", headers=headers).json()["global"]}
        assert names[squat_id] == "Squat"

    def test_remove_alias(self, client, headers):
        squat_id = _exercise_id(client, headers, "Back Squat")
        client.put(f"/exercises/{squat_id}/alias", json={"alias_name": "Squat"}, headers=headers)

        assert client.delete(f"/exercises/{squat_id}/alias", headers=headers).status_code == 204
        assert client.delete(f"/exercises/{squat_id}/alias", headers=headers).status_code == 404
        names = {e["id"]: e["name"] for e in client.get("/exercises", headers=headers).json()["global"]}
        assert names[squat_id] == "Back Squat"

    def test_patch_band_type(self, client, headers):
        created = client.post(
            "/exercises", json={"title": "Ring Dips", "exercise_type": "bodyweight"}, headers=headers
        ).json()

        response = client.patch(
            f"/exercises/{created['id']}", json={"band_type": "assistance"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["band_type"] == "assistance"
        assert response.json()["is_bodyweight"] is False
        assert response.json()["supports_one_rep_max"] is False

    def test_patch_invalid_band_type(self, client, headers):
        created = client.post("/exercises", json={"title": "Ring Dips"}, headers=headers).json()

        response = client.patch(
            f"/exercises/{created['id']}", json={"band_type": "elastic"}, headers=headers
        )

        assert response.status_code == 422


class TestLiftLogRoutes:
    """Tests for /lift-logs."""

    def test_create_reports_pr(self, client, headers):
        squat_id = _exercise_id(client, headers, "Back Squat")
        results = []
        for day, weight in ((1, 200), (2, 210), (3, 205)):
            response = client.post(
                "/lift-logs",
                json={
                    "exercise_id": squat_id,
                    "sets": [{"weight": weight, "reps": 5}],
                    "logged_at": f"2024-05-0{day}T07:00:00",
                },
                headers=headers,
            )
            assert response.status_code == 201
            results.append(response.json())

        assert [r["is_pr"] for r in results] == [True, True, False]
        assert results[0]["one_rep_max"] == "233.3 lbs"

        prs = client.get("/prs", headers=headers).json()
        assert len(prs) == 2

    def test_naive_and_utc_timestamps_mix(self, client, headers):
        squat_id = _exercise_id(client, headers, "Back Squat")
        responses = [
            client.post(
                "/lift-logs",
                json={
                    "exercise_id": squat_id,
                    "sets": [{"weight": weight, "reps": 5}],
                    "logged_at": logged_at,
                },
                headers=headers,
            )
            for weight, logged_at in ((200, "2024-01-01T09:00:00"), (210, "2024-01-02T09:00:00Z"))
        ]

        assert [r.status_code for r in responses] == [201, 201]
        assert responses[1].json()["is_pr"] is True
        assert "+" not in responses[1].json()["logged_at"]
        assert len(client.get("/lift-logs", headers=headers).json()) == 2
        assert len(client.get("/prs", headers=headers).json()) == 2

    def test_patch_comments(self, client, headers):
        squat_id = _exercise_id(client, headers, "Back Squat")
        created = client.post(
            "/lift-logs",
            json={"exercise_id": squat_id, "sets": [{"weight": 200, "reps": 5}]},
            headers=headers,
        ).json()

        response = client.patch(
            f"/lift-logs/{created['id']}", json={"comments": "belt on"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["comments"] == "belt on"
        assert response.json()["is_pr"] is True

    def test_banded_log_has_no_one_rep_max(self, client, headers):
        band_id = _exercise_id(client, headers, "Banded Pull-Apart")

        response = client.post(
            "/lift-logs",
            json={"exercise_id": band_id, "sets": [{"weight": 40, "reps": 15, "band_color": "blue"}]},
            headers=headers,
        )

        assert response.status_code == 201
        assert response.json()["one_rep_max"] is None
        assert response.json()["is_pr"] is False

    def test_other_users_log(self, client, headers, other_headers):
        squat_id = _exercise_id(client, headers, "Back Squat")
        created = client.post(
            "/lift-logs",
            json={"exercise_id": squat_id, "sets": [{"weight": 100, "reps": 5}]},
            headers=other_headers,
        ).json()

        assert client.get(f"/lift-logs/{created['id']}", headers=headers).status_code == 403
        assert client.delete(f"/lift-logs/{created['id']}", headers=headers).status_code == 403
        assert client.get("/lift-logs", headers=headers).json() == []

    def test_missing_log(self, client, headers):
        assert client.get("/lift-logs/12345", headers=headers).status_code == 404

    def test_import_twice(self, client, headers):
        tsv = "01/15/2024\t08:30\tBack Squat\t225\t5\t3\n01/17/2024\t08:30\tpush ups\t0\t20\t2\n"
        send = {**headers, "Content-Type": "text/plain"}

        first = client.post("/lift-logs/import", content=tsv, headers=send).json()
        second = client.post("/lift-logs/import", content=tsv, headers=send).json()

        assert first["imported"] == 2
        assert second["imported"] == 0
        assert second["message"] == "No new data to import."

        exported = client.get("/lift-logs/export", headers=headers)
        assert len(exported.text.splitlines()) == 2

    def test_import_empty(self, client, headers):
        response = client.post(
            "/lift-logs/import", content="", headers={**headers, "Content-Type": "text/plain"}
        )

        assert response.status_code == 400
        assert "cannot be empty" in response.json()["detail"]


class TestWorkoutRoutes:
    """Tests for /workouts."""

    def test_create_keeps_scheme_errors(self, client, headers):
        response = client.post(
            "/workouts", json={"name": "Monday", "wod_syntax": WORKOUT}, headers=headers
        )

        assert response.status_code == 201
        errors = response.json()["wod_parsed"]["errors"]
        assert len(errors) == 1
        assert errors[0]["line"] == 4

    def test_get_resolves_exercises(self, client, headers):
        workout_id = client.post(
            "/workouts", json={"name": "Monday", "wod_syntax": WORKOUT}, headers=headers
        ).json()["id"]

        data = client.get(f"/workouts/{workout_id}", headers=headers).json()

        by_name = {line["name"]: line for line in data["exercises"]}
        assert by_name["Back Squat"]["can_log_now"] is True
        assert by_name["Zercher Squat"]["can_log_now"] is False
        assert by_name["Push ups"]["exercise_name"] == "Push-ups"

    def test_view_only_links_matched_lines(self, client, headers):
        workout_id = client.post(
            "/workouts", json={"name": "Monday", "wod_syntax": WORKOUT}, headers=headers
        ).json()["id"]

        response = client.get(f"/workouts/{workout_id}/view", headers=headers)

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        # Back Squat, Bench Press and Push-ups match; Zercher Squat does not
        assert response.text.count("Log now") == 3
        assert f'action="/workouts/{workout_id}/log"' in response.text
        assert "Zercher Squat" in response.text
        assert "5x5x5" in response.text

    def test_other_users_workout(self, client, headers, other_headers):
        workout_id = client.post(
            "/workouts", json={"name": "Theirs", "wod_syntax": WORKOUT}, headers=other_headers
        ).json()["id"]

        assert client.get(f"/workouts/{workout_id}", headers=headers).status_code == 403
        assert client.get(f"/workouts/{workout_id}/view", headers=headers).status_code == 403

    def test_delete(self, client, headers):
        workout_id = client.post(
            "/workouts", json={"name": "Monday", "wod_syntax": WORKOUT}, headers=headers
        ).json()["id"]

        assert client.delete(f"/workouts/{workout_id}", headers=headers).status_code == 204
        assert client.get(f"/workouts/{workout_id}", headers=headers).status_code == 404

    def test_put_updates_name_and_syntax(self, client, headers):
        workout_id = client.post(
            "/workouts", json={"name": "A", "wod_syntax": WORKOUT}, headers=headers
        ).json()["id"]

        response = client.put(
            f"/workouts/{workout_id}",
            json={"name": "B", "wod_syntax": "[Back Squat]: 3x3"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == "B"
        assert response.json()["wod_parsed"]["errors"] == []

    def test_put_without_syntax_keeps_it(self, client, headers):
        workout_id = client.post(
            "/workouts", json={"name": "A", "wod_syntax": WORKOUT}, headers=headers
        ).json()["id"]

        response = client.put(f"/workouts/{workout_id}", json={"name": "B"}, headers=headers)

        assert response.json()["name"] == "B"
        assert response.json()["wod_syntax"] == WORKOUT
        assert response.json()["wod_parsed"] is not None

    def test_put_blank_name(self, client, headers):
        workout_id = client.post(
            "/workouts", json={"name": "A", "wod_syntax": WORKOUT}, headers=headers
        ).json()["id"]

        response = client.put(f"/workouts/{workout_id}", json={"name": " "}, headers=headers)

        assert response.status_code == 422

    def test_log_now_form_creates_log(self, client, headers):
        workout_id = client.post(
            "/workouts", json={"name": "Monday", "wod_syntax": WORKOUT}, headers=headers
        ).json()["id"]
        squat_id = _exercise_id(client, headers, "Back Squat")

        response = client.post(
            f"/workouts/{workout_id}/log",
            data={"exercise_id": str(squat_id), "weight": "225", "reps": "5", "rounds": "5"},
            headers=headers,
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == f"/workouts/{workout_id}/view"
        logs = client.get("/lift-logs", headers=headers).json()
        assert len(logs) == 1
        assert logs[0]["workout_id"] == workout_id
        assert len(logs[0]["sets"]) == 5
        view = client.get(f"/workouts/{workout_id}/view", headers=headers)
        assert "1 lift log(s) recorded" in view.text
