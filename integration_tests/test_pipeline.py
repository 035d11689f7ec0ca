"""Integration tests for the full flow.

A user imports their history over HTTP, writes a workout, logs a lift from
it, rebuilds PRs from the command line and reads the result back.
"""

import asyncio

import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient

from lift_tracker.cli import main
from lift_tracker.db import UserRepository, get_db_path, init_db, seed_exercises
from lift_tracker.models.user import User
from lift_tracker.web import create_app

HISTORY = (
    "03/01/2024\t06:00\tDeadlift\t315\t5\t3\n"
    "03/08/2024\t06:00\tDeadlift\t335\t5\t3\n"
    "03/15/2024\t06:00\tDEADLIFT\t325\t5\t3\tgrip slipping\n"
    "03/15/2024\t06:30\tBanded Pull-Apart\tgreen\t20\t2\n"
    "03/16/2024\t06:30\tFarmer Carry\t100\t1\t2\n"
)

WORKOUT = """# Pull
[Deadlift]: 5x5
[Farmer Carry]: 40m
[Banded Pull-Apart]: 2x20
"""


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("LIFT_TRACKER_DATA_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def db_path(data_dir):
    path = get_db_path(data_dir)
    asyncio.run(init_db(path))
    asyncio.run(seed_exercises(path))
    asyncio.run(UserRepository(path).create(User(name="Alex")))
    return path


class TestLiftTrackingFlow:
    """End-to-end flow across web, services and CLI."""

    def test_history_workout_and_recalculation(self, db_path):
        headers = {"X-User-Id": "1"}

        with TestClient(create_app(db_path)) as client:
            imported = client.post(
                "/lift-logs/import",
                content=HISTORY,
                headers={**headers, "Content-Type": "text/plain"},
            ).json()
            assert imported["imported"] == 4
            assert imported["errors"] == ["No exercises found for: Farmer Carry"]

            workout = client.post(
                "/workouts", json={"name": "Pull day", "wod_syntax": WORKOUT}, headers=headers
            ).json()
            resolved = client.get(f"/workouts/{workout['id']}", headers=headers).json()
            loggable = [line["name"] for line in resolved["exercises"] if line["can_log_now"]]
            assert loggable == ["Deadlift", "Banded Pull-Apart"]

            deadlift_id = next(
                line["exercise_id"] for line in resolved["exercises"] if line["name"] == "Deadlift"
            )
            # Backdated log that beats everything after it
            response = client.post(
                "/lift-logs",
                json={
                    "exercise_id": deadlift_id,
                    "workout_id": workout["id"],
                    "logged_at": "2024-02-20T06:00:00",
                    "sets": [{"weight": 345, "reps": 5}],
                },
                headers=headers,
            )
            assert response.json()["is_pr"] is True

        runner = CliRunner()
        result = runner.invoke(main, ["prs", "calculate-historical", "--force", "--user", "1"])
        assert result.exit_code == 0, result.output
        assert "Processed 5 lift log(s), found 1 PR(s)." in result.output

        with TestClient(create_app(db_path)) as client:
            logs = client.get(
                "/lift-logs", params={"exercise_id": deadlift_id}, headers=headers
            ).json()
            by_date = {log["logged_at"][:10]: log["is_pr"] for log in logs}
            assert by_date == {
                "2024-02-20": True,
                "2024-03-01": False,
                "2024-03-08": False,
                "2024-03-15": False,
            }

            prs = client.get("/prs", params={"exercise_id": deadlift_id}, headers=headers).json()
            assert len(prs) == 1
            assert prs[0]["value"] == pytest.approx(345 * (1 + 5 / 30))
