"""Data access layer for lift-tracker.

Every read filters out soft-deleted rows (`deleted_at IS NULL`) unless asked
otherwise, and lift logs are always returned with their sets loaded.
"""

import json
from datetime import datetime
from pathlib import Path

import aiosqlite

from ..models.exercises import Exercise, ExerciseAlias
from ..models.lift_log import LiftLog, LiftSet, PersonalRecord, PRStatus, to_naive_local
from ..models.user import RequestContext, User
from ..models.workout import ParsedWorkout, Workout
from .engine import connect, get_db_path


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


class UserRepository:
    """Repository for users."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, user: User) -> int:
        """Create a new user."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO users (name, email, show_global_exercises, bodyweight)
                VALUES (?, ?, ?, ?)
                """,
                (user.name, user.email, int(user.show_global_exercises), user.bodyweight),
            )
            await db.commit()
            user.id = cursor.lastrowid
            return cursor.lastrowid

    async def get(self, user_id: int) -> User | None:
        """Get a user by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_user(row)

    async def list_all(self) -> list[User]:
        """List all users."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM users ORDER BY id")
            rows = await cursor.fetchall()
            return [self._row_to_user(row) for row in rows]

    async def set_show_global_exercises(self, user_id: int, show: bool) -> None:
        """Update the global exercise visibility preference."""
        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE users SET show_global_exercises = ? WHERE id = ?",
                (int(show), user_id),
            )
            await db.commit()

    async def set_bodyweight(self, user_id: int, bodyweight: float | None) -> None:
        """Update the bodyweight used for bodyweight exercise 1RMs."""
        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE users SET bodyweight = ? WHERE id = ?", (bodyweight, user_id)
            )
            await db.commit()

    def _row_to_user(self, row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            show_global_exercises=bool(row["show_global_exercises"]),
            bodyweight=row["bodyweight"],
            created_at=_parse_timestamp(row["created_at"]),
        )


class ExerciseRepository:
    """Repository for the exercise catalog."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, exercise: Exercise) -> int:
        """Create a new exercise."""
        data = exercise.to_dict()
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO exercises
                (user_id, title, exercise_type, band_type, is_bodyweight, description)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    data["user_id"],
                    data["title"],
                    data["exercise_type"],
                    data["band_type"],
                    int(data["is_bodyweight"]),
                    data["description"],
                ),
            )
            await db.commit()
            exercise.id = cursor.lastrowid
            return cursor.lastrowid

    async def get(self, exercise_id: int, include_deleted: bool = False) -> Exercise | None:
        """Get an exercise by ID."""
        query = "SELECT * FROM exercises WHERE id = ?"
        if not include_deleted:
            query += " AND deleted_at IS NULL"
        async with connect(self.db_path) as db:
            cursor = await db.execute(query, (exercise_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_exercise(row)

    async def list_visible(self, context: RequestContext) -> list[Exercise]:
        """Exercises the acting user can see: their own, plus global ones if enabled.

        The user's own exercises come first.
        """
        async with connect(self.db_path) as db:
            if context.show_global_exercises:
                cursor = await db.execute(
                    """
                    SELECT * FROM exercises
                    WHERE deleted_at IS NULL AND (user_id = ? OR user_id IS NULL)
                    ORDER BY user_id IS NULL, title
                    """,
                    (context.user_id,),
                )
            else:
                cursor = await db.execute(
                    """
                    SELECT * FROM exercises
                    WHERE deleted_at IS NULL AND user_id = ?
                    ORDER BY title
                    """,
                    (context.user_id,),
                )
            rows = await cursor.fetchall()
            return [self._row_to_exercise(row) for row in rows]

    async def list_global(self) -> list[Exercise]:
        """List global exercises."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE user_id IS NULL AND deleted_at IS NULL ORDER BY title"
            )
            rows = await cursor.fetchall()
            return [self._row_to_exercise(row) for row in rows]

    async def update(self, exercise: Exercise) -> None:
        """Update an existing exercise."""
        if exercise.id is None:
            raise ValueError("Exercise must have an ID to update")

        data = exercise.to_dict()
        async with connect(self.db_path) as db:
            await db.execute(
                """
                UPDATE exercises SET
                    title = ?, exercise_type = ?, band_type = ?,
                    is_bodyweight = ?, description = ?
                WHERE id = ?
                """,
                (
                    data["title"],
                    data["exercise_type"],
                    data["band_type"],
                    int(data["is_bodyweight"]),
                    data["description"],
                    exercise.id,
                ),
            )
            await db.commit()

    async def soft_delete(self, exercise_id: int) -> None:
        """Mark an exercise as deleted."""
        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE exercises SET deleted_at = ? WHERE id = ?",
                (_now(), exercise_id),
            )
            await db.commit()

    def _row_to_exercise(self, row: aiosqlite.Row) -> Exercise:
        """Convert a database row to an Exercise."""
        data = {
            "title": row["title"],
            "exercise_type": row["exercise_type"],
            "user_id": row["user_id"],
            "band_type": row["band_type"],
            "is_bodyweight": row["is_bodyweight"],
            "description": row["description"],
            "deleted_at": row["deleted_at"],
        }
        return Exercise.from_dict(data, id=row["id"])


class ExerciseAliasRepository:
    """Repository for per-user exercise aliases."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def upsert(self, alias: ExerciseAlias) -> int:
        """Create or replace the user's alias for an exercise."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO exercise_aliases (user_id, exercise_id, alias_name)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id, exercise_id) DO UPDATE SET alias_name = excluded.alias_name
                """,
                (alias.user_id, alias.exercise_id, alias.alias_name),
            )
            await db.commit()
            cursor = await db.execute(
                "SELECT id FROM exercise_aliases WHERE user_id = ? AND exercise_id = ?",
                (alias.user_id, alias.exercise_id),
            )
            row = await cursor.fetchone()
            alias.id = row["id"]
            return alias.id

    async def get_for_user(self, user_id: int) -> dict[int, ExerciseAlias]:
        """Aliases for a user, keyed by exercise ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercise_aliases WHERE user_id = ?", (user_id,)
            )
            rows = await cursor.fetchall()
            return {
                row["exercise_id"]: ExerciseAlias(
                    id=row["id"],
                    user_id=row["user_id"],
                    exercise_id=row["exercise_id"],
                    alias_name=row["alias_name"],
                )
                for row in rows
            }

    async def delete(self, user_id: int, exercise_id: int) -> None:
        """Remove a user's alias for an exercise."""
        async with connect(self.db_path) as db:
            await db.execute(
                "DELETE FROM exercise_aliases WHERE user_id = ? AND exercise_id = ?",
                (user_id, exercise_id),
            )
            await db.commit()


class LiftLogRepository:
    """Repository for lift logs and their sets."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, log: LiftLog) -> int:
        """Insert a lift log and all of its sets in one transaction."""
        async with connect(self.db_path) as db:
            try:
                cursor = await db.execute(
                    """
                    INSERT INTO lift_logs
                    (user_id, exercise_id, workout_id, logged_at, comments,
                     is_pr, pr_count, pr_status)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        log.user_id,
                        log.exercise_id,
                        log.workout_id,
                        log.logged_at.isoformat(),
                        log.comments,
                        int(log.is_pr),
                        log.pr_count,
                        log.pr_status.value,
                    ),
                )
                log_id = cursor.lastrowid
                for position, lift_set in enumerate(log.sets):
                    set_cursor = await db.execute(
                        """
                        INSERT INTO lift_sets
                        (lift_log_id, position, weight, reps, band_color, notes)
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (
                            log_id,
                            position,
                            lift_set.weight,
                            lift_set.reps,
                            lift_set.band_color,
                            lift_set.notes,
                        ),
                    )
                    lift_set.id = set_cursor.lastrowid
                    lift_set.lift_log_id = log_id
                await db.commit()
            except aiosqlite.Error:
                await db.rollback()
                raise
            log.id = log_id
            return log_id

    async def get(self, log_id: int) -> LiftLog | None:
        """Get a lift log with its sets."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM lift_logs WHERE id = ? AND deleted_at IS NULL", (log_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            logs = await self._materialize(db, [row])
            return logs[0]

    async def list_for_user(
        self, user_id: int, exercise_id: int | None = None
    ) -> list[LiftLog]:
        """List a user's lift logs, newest first."""
        async with connect(self.db_path) as db:
            if exercise_id is not None:
                cursor = await db.execute(
                    """
                    SELECT * FROM lift_logs
                    WHERE user_id = ? AND exercise_id = ? AND deleted_at IS NULL
                    ORDER BY logged_at DESC, id DESC
                    """,
                    (user_id, exercise_id),
                )
            else:
                cursor = await db.execute(
                    """
                    SELECT * FROM lift_logs
                    WHERE user_id = ? AND deleted_at IS NULL
                    ORDER BY logged_at DESC, id DESC
                    """,
                    (user_id,),
                )
            rows = await cursor.fetchall()
            return await self._materialize(db, rows)

    async def list_history(self, user_id: int, exercise_id: int) -> list[LiftLog]:
        """All logs for a user and exercise in chronological order (logged_at, id)."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM lift_logs
                WHERE user_id = ? AND exercise_id = ? AND deleted_at IS NULL
                ORDER BY logged_at ASC, id ASC
                """,
                (user_id, exercise_id),
            )
            rows = await cursor.fetchall()
            logs = await self._materialize(db, rows)
            # ISO strings of mixed precision do not always sort like datetimes
            return sorted(logs, key=LiftLog.sort_key)

    async def list_for_workout(self, workout_id: int) -> list[LiftLog]:
        """Logs recorded against a workout."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM lift_logs
                WHERE workout_id = ? AND deleted_at IS NULL
                ORDER BY logged_at ASC, id ASC
                """,
                (workout_id,),
            )
            rows = await cursor.fetchall()
            return await self._materialize(db, rows)

    async def find_duplicate(self, log: LiftLog) -> LiftLog | None:
        """Find an existing log with the same exercise, time and sets."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM lift_logs
                WHERE user_id = ? AND exercise_id = ? AND logged_at = ?
                  AND deleted_at IS NULL
                """,
                (log.user_id, log.exercise_id, log.logged_at.isoformat()),
            )
            rows = await cursor.fetchall()
            candidates = await self._materialize(db, rows)

        wanted = [(s.weight, s.reps, s.band_color) for s in log.sets]
        for candidate in candidates:
            if [(s.weight, s.reps, s.band_color) for s in candidate.sets] == wanted:
                return candidate
        return None

    async def distinct_combinations(
        self, user_id: int | None = None, exercise_id: int | None = None
    ) -> list[tuple[int, int]]:
        """Distinct (user_id, exercise_id) pairs that have lift logs."""
        query = "SELECT DISTINCT user_id, exercise_id FROM lift_logs WHERE deleted_at IS NULL"
        params: list[int] = []
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        if exercise_id is not None:
            query += " AND exercise_id = ?"
            params.append(exercise_id)
        query += " ORDER BY user_id, exercise_id"

        async with connect(self.db_path) as db:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
            return [(row["user_id"], row["exercise_id"]) for row in rows]

    async def record_pr_evaluation(
        self, log: LiftLog, record: PersonalRecord | None = None
    ) -> None:
        """Store the PR evaluation of a log, and its PR row when it is a PR."""
        if log.id is None:
            raise ValueError("Lift log must have an ID to record a PR evaluation")

        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE lift_logs SET is_pr = ?, pr_count = ?, pr_status = ? WHERE id = ?",
                (int(log.is_pr), log.pr_count, log.pr_status.value, log.id),
            )
            if record is not None:
                record.id = await PersonalRecordRepository.insert(db, record)
            await db.commit()

    async def update_comments(self, log_id: int, comments: str) -> None:
        """Update a log's comments."""
        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE lift_logs SET comments = ? WHERE id = ?", (comments, log_id)
            )
            await db.commit()

    async def purge(self, log_id: int) -> None:
        """Remove a log, its sets and its PR rows outright."""
        async with connect(self.db_path) as db:
            await db.execute("DELETE FROM personal_records WHERE lift_log_id = ?", (log_id,))
            await db.execute("DELETE FROM lift_sets WHERE lift_log_id = ?", (log_id,))
            await db.execute("DELETE FROM lift_logs WHERE id = ?", (log_id,))
            await db.commit()

    async def soft_delete(self, log_id: int) -> None:
        """Mark a lift log as deleted."""
        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE lift_logs SET deleted_at = ? WHERE id = ?", (_now(), log_id)
            )
            await db.commit()

    async def _materialize(
        self, db: aiosqlite.Connection, rows: list[aiosqlite.Row]
    ) -> list[LiftLog]:
        """Build LiftLog objects with their sets from lift_logs rows."""
        if not rows:
            return []

        ids = [row["id"] for row in rows]
        placeholders = ",".join("?" for _ in ids)
        cursor = await db.execute(
            f"""
            SELECT * FROM lift_sets
            WHERE lift_log_id IN ({placeholders})
            ORDER BY lift_log_id, position
            """,
            ids,
        )
        sets_by_log: dict[int, list[LiftSet]] = {log_id: [] for log_id in ids}
        for set_row in await cursor.fetchall():
            sets_by_log[set_row["lift_log_id"]].append(
                LiftSet(
                    id=set_row["id"],
                    lift_log_id=set_row["lift_log_id"],
                    weight=set_row["weight"],
                    reps=set_row["reps"],
                    band_color=set_row["band_color"],
                    notes=set_row["notes"],
                )
            )

        return [
            LiftLog(
                id=row["id"],
                user_id=row["user_id"],
                exercise_id=row["exercise_id"],
                workout_id=row["workout_id"],
                logged_at=to_naive_local(datetime.fromisoformat(row["logged_at"])),
                comments=row["comments"] or "",
                is_pr=bool(row["is_pr"]),
                pr_count=row["pr_count"],
                pr_status=PRStatus(row["pr_status"]),
                deleted_at=_parse_timestamp(row["deleted_at"]),
                sets=sets_by_log[row["id"]],
            )
            for row in rows
        ]


class PersonalRecordRepository:
    """Repository for the personal record ledger."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    @staticmethod
    async def insert(db: aiosqlite.Connection, record: PersonalRecord) -> int:
        """Insert a record using an open connection (caller commits)."""
        cursor = await db.execute(
            """
            INSERT INTO personal_records
            (user_id, exercise_id, lift_log_id, pr_type, value,
             previous_value, previous_lift_log_id, achieved_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.user_id,
                record.exercise_id,
                record.lift_log_id,
                record.pr_type,
                record.value,
                record.previous_value,
                record.previous_lift_log_id,
                record.achieved_at.isoformat(),
            ),
        )
        return cursor.lastrowid

    async def list_for_user(
        self, user_id: int, exercise_id: int | None = None
    ) -> list[PersonalRecord]:
        """List PR events for a user, newest first."""
        async with connect(self.db_path) as db:
            if exercise_id is not None:
                cursor = await db.execute(
                    """
                    SELECT * FROM personal_records
                    WHERE user_id = ? AND exercise_id = ?
                    ORDER BY achieved_at DESC, id DESC
                    """,
                    (user_id, exercise_id),
                )
            else:
                cursor = await db.execute(
                    """
                    SELECT * FROM personal_records
                    WHERE user_id = ?
                    ORDER BY achieved_at DESC, id DESC
                    """,
                    (user_id,),
                )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    async def replace_for_exercise(
        self,
        user_id: int,
        exercise_id: int,
        logs: list[LiftLog],
        records: list[PersonalRecord],
    ) -> None:
        """Rewrite PR state for one (user, exercise) pair in a single transaction.

        Deletes the pair's PR rows, stores `is_pr`/`pr_count`/`pr_status` of
        every given log, then inserts the new records.
        """
        async with connect(self.db_path) as db:
            try:
                await db.execute(
                    "DELETE FROM personal_records WHERE user_id = ? AND exercise_id = ?",
                    (user_id, exercise_id),
                )
                for log in logs:
                    await db.execute(
                        "UPDATE lift_logs SET is_pr = ?, pr_count = ?, pr_status = ? WHERE id = ?",
                        (int(log.is_pr), log.pr_count, log.pr_status.value, log.id),
                    )
                for record in records:
                    record.id = await self.insert(db, record)
                await db.commit()
            except aiosqlite.Error:
                await db.rollback()
                raise

    def _row_to_record(self, row: aiosqlite.Row) -> PersonalRecord:
        return PersonalRecord(
            id=row["id"],
            user_id=row["user_id"],
            exercise_id=row["exercise_id"],
            lift_log_id=row["lift_log_id"],
            pr_type=row["pr_type"],
            value=row["value"],
            previous_value=row["previous_value"],
            previous_lift_log_id=row["previous_lift_log_id"],
            achieved_at=datetime.fromisoformat(row["achieved_at"]),
        )


class WorkoutRepository:
    """Repository for workouts."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, workout: Workout) -> int:
        """Create a new workout."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO workouts (user_id, name, description, wod_syntax, wod_parsed)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    workout.user_id,
                    workout.name,
                    workout.description,
                    workout.wod_syntax,
                    json.dumps(workout.wod_parsed.to_dict()) if workout.wod_parsed else None,
                ),
            )
            await db.commit()
            workout.id = cursor.lastrowid
            return cursor.lastrowid

    async def get(self, workout_id: int) -> Workout | None:
        """Get a workout by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM workouts WHERE id = ? AND deleted_at IS NULL", (workout_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_workout(row)

    async def list_for_user(self, user_id: int) -> list[Workout]:
        """List a user's workouts, newest first."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM workouts
                WHERE user_id = ? AND deleted_at IS NULL
                ORDER BY created_at DESC, id DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_workout(row) for row in rows]

    async def update(self, workout: Workout) -> None:
        """Update an existing workout."""
        if workout.id is None:
            raise ValueError("Workout must have an ID to update")

        async with connect(self.db_path) as db:
            await db.execute(
                """
                UPDATE workouts SET name = ?, description = ?, wod_syntax = ?, wod_parsed = ?
                WHERE id = ?
                """,
                (
                    workout.name,
                    workout.description,
                    workout.wod_syntax,
                    json.dumps(workout.wod_parsed.to_dict()) if workout.wod_parsed else None,
                    workout.id,
                ),
            )
            await db.commit()

    async def soft_delete(self, workout_id: int) -> None:
        """Delete a workout and detach the lift logs that referenced it."""
        async with connect(self.db_path) as db:
            await db.execute(
                "UPDATE lift_logs SET workout_id = NULL WHERE workout_id = ?", (workout_id,)
            )
            await db.execute(
                "UPDATE workouts SET deleted_at = ? WHERE id = ?", (_now(), workout_id)
            )
            await db.commit()

    def _row_to_workout(self, row: aiosqlite.Row) -> Workout:
        """Convert a database row to a Workout."""
        parsed = json.loads(row["wod_parsed"]) if row["wod_parsed"] else None
        return Workout(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            description=row["description"] or "",
            wod_syntax=row["wod_syntax"],
            wod_parsed=ParsedWorkout.from_dict(parsed) if parsed else None,
            created_at=_parse_timestamp(row["created_at"]),
            deleted_at=_parse_timestamp(row["deleted_at"]),
        )
