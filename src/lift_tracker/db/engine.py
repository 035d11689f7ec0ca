"""Database engine setup and initialization."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from ..config import get_settings

logger = logging.getLogger(__name__)


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = get_settings().data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "lift_tracker.db"


@asynccontextmanager
async def connect(db_path: Path):
    """Open a connection with row access by name and foreign keys enforced."""
    async with aiosqlite.connect(db_path) as db:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys = ON")
        yield db


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with connect(db_path) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                email TEXT UNIQUE,
                show_global_exercises INTEGER DEFAULT 1,
                bodyweight REAL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # user_id NULL marks a global exercise
        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercises (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER,
                title TEXT NOT NULL,
                exercise_type TEXT NOT NULL DEFAULT 'regular',
                band_type TEXT,
                is_bodyweight INTEGER DEFAULT 0,
                description TEXT DEFAULT '',
                deleted_at TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercise_aliases (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                exercise_id INTEGER NOT NULL,
                alias_name TEXT NOT NULL,
                UNIQUE (user_id, exercise_id),
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS workouts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                description TEXT DEFAULT '',
                wod_syntax TEXT,
                wod_parsed TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                deleted_at TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS lift_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                exercise_id INTEGER NOT NULL,
                workout_id INTEGER,
                logged_at TIMESTAMP NOT NULL,
                comments TEXT DEFAULT '',
                is_pr INTEGER DEFAULT 0,
                pr_count INTEGER DEFAULT 0,
                pr_status TEXT DEFAULT 'unknown',
                deleted_at TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id),
                FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE SET NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS lift_sets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                lift_log_id INTEGER NOT NULL,
                position INTEGER NOT NULL,
                weight REAL DEFAULT 0,
                reps INTEGER DEFAULT 0,
                band_color TEXT,
                notes TEXT,
                FOREIGN KEY (lift_log_id) REFERENCES lift_logs(id) ON DELETE CASCADE
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS personal_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                exercise_id INTEGER NOT NULL,
                lift_log_id INTEGER NOT NULL,
                pr_type TEXT NOT NULL DEFAULT 'one_rm',
                value REAL NOT NULL,
                previous_value REAL,
                previous_lift_log_id INTEGER,
                achieved_at TIMESTAMP NOT NULL,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY (lift_log_id) REFERENCES lift_logs(id) ON DELETE CASCADE
            )
        """)

        # Create indexes for common queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_exercises_user
            ON exercises(user_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_lift_logs_user_exercise
            ON lift_logs(user_id, exercise_id, logged_at)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_lift_sets_log
            ON lift_sets(lift_log_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_personal_records_user_exercise
            ON personal_records(user_id, exercise_id)
        """)

        await db.commit()
    logger.debug("Schema ready at %s", db_path)


async def seed_exercises(db_path: Path | None = None) -> int:
    """Seed the database with the global exercise library.

    Returns the number of exercises added.
    """
    from ..models.exercises import COMMON_EXERCISES

    if db_path is None:
        db_path = get_db_path()

    added = 0
    async with connect(db_path) as db:
        for exercise in COMMON_EXERCISES:
            cursor = await db.execute(
                "SELECT id FROM exercises WHERE user_id IS NULL AND title = ?",
                (exercise.title,),
            )
            if await cursor.fetchone() is not None:
                continue
            data = exercise.to_dict()
            await db.execute(
                """
                INSERT INTO exercises
                (user_id, title, exercise_type, band_type, is_bodyweight, description)
                VALUES (NULL, ?, ?, ?, ?, ?)
                """,
                (
                    data["title"],
                    data["exercise_type"],
                    data["band_type"],
                    int(data["is_bodyweight"]),
                    data["description"],
                ),
            )
            added += 1

        await db.commit()
    logger.info("Seeded %d global exercises", added)
    return added
