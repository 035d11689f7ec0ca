"""Tab separated import and export of lift logs and exercises.

Lift log rows:

    date (m/d/Y) <TAB> time (H:M) <TAB> exercise <TAB> weight <TAB> reps <TAB> rounds [<TAB> notes]

For banded exercises the weight column holds the band color.

Exercise rows:

    title [<TAB> exercise type]
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..db.repositories import ExerciseRepository, LiftLogRepository
from ..errors import LiftTrackerError, TsvImportError
from ..models.exercises import BAND_COLORS, Exercise, ExerciseType
from ..models.lift_log import LiftLog, LiftSet
from ..models.user import RequestContext
from ..utils.exercise_utils import display_name, normalize_exercise_name
from .exercise_matching import ExerciseResolver
from .lift_logging import LiftLogService, build_sets

logger = logging.getLogger(__name__)

DATE_FORMAT = "%m/%d/%Y"
TIME_FORMAT = "%H:%M"


@dataclass
class ImportResult:
    """What an import did, row by row."""

    imported: int = 0
    updated: int = 0
    skipped: int = 0
    invalid_rows: list[str] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    entity: str = "lift logs"

    @property
    def has_new_data(self) -> bool:
        return self.imported > 0 or self.updated > 0

    def errors(self) -> list[str]:
        """User-facing error messages."""
        messages = []
        if self.not_found:
            messages.append(f"No exercises found for: {', '.join(self.not_found)}")
        for row in self.invalid_rows:
            messages.append(f"Invalid row: \"{row}\"")
        return messages

    def summary(self) -> str:
        """One line summary of counts."""
        if not self.has_new_data and not self.invalid_rows and not self.not_found:
            return "No new data to import."
        parts = [f"Imported {self.imported} {self.entity}"]
        if self.updated:
            parts.append(f"updated {self.updated}")
        if self.skipped:
            parts.append(f"skipped {self.skipped} duplicates")
        if self.invalid_rows:
            parts.append(f"{len(self.invalid_rows)} invalid rows")
        return ", ".join(parts) + "."

    def to_dict(self) -> dict:
        return {
            "imported": self.imported,
            "updated": self.updated,
            "skipped": self.skipped,
            "invalid_rows": self.invalid_rows,
            "not_found": self.not_found,
            "message": self.summary(),
            "errors": self.errors(),
        }


def _split_rows(text: str) -> list[tuple[str, list[str]]]:
    """Non-empty rows as (raw line, cells)."""
    if text is None or not text.strip():
        raise TsvImportError("TSV data cannot be empty.")

    rows = []
    for raw in text.strip().splitlines():
        if not raw.strip():
            continue
        cells = next(csv.reader(io.StringIO(raw), delimiter="\t"))
        rows.append((raw, [cell.strip() for cell in cells]))
    return rows


@dataclass
class _PendingLog:
    """Rows gathered into one log before it is written."""

    exercise: Exercise
    logged_at: datetime
    sets: list[LiftSet]
    comments: str
    rows: list[str]


def _set_runs(sets: list[LiftSet]) -> list[tuple[LiftSet, int]]:
    """Group consecutive identical sets as (set, rounds)."""
    runs: list[tuple[LiftSet, int]] = []
    for lift_set in sets:
        key = (lift_set.weight, lift_set.reps, lift_set.band_color)
        if runs:
            previous, count = runs[-1]
            if (previous.weight, previous.reps, previous.band_color) == key:
                runs[-1] = (previous, count + 1)
                continue
        runs.append((lift_set, 1))
    return runs


class TsvImporter:
    """Imports and exports TSV for the acting user."""

    def __init__(self, db_path: Path | None = None):
        self.log_repo = LiftLogRepository(db_path)
        self.exercise_repo = ExerciseRepository(db_path)
        self.resolver = ExerciseResolver(db_path)
        self.log_service = LiftLogService(db_path)

    async def import_lift_logs(self, text: str, context: RequestContext) -> ImportResult:
        """Import lift log rows, skipping logs that already exist.

        Consecutive rows with the same date, time and exercise are sets of one
        log, which is how the export writes logs with mixed sets.

        Raises:
            TsvImportError: when the input is empty
        """
        rows = _split_rows(text)
        result = ImportResult()
        exercises, aliases = await self.resolver.load_catalog(context)
        matcher = self.resolver.matcher
        pending: list[_PendingLog] = []

        for raw, cells in rows:
            if len(cells) < 6:
                result.invalid_rows.append(raw)
                continue

            date_text, time_text, name, weight_text, reps_text, rounds_text = cells[:6]
            notes = cells[6] if len(cells) > 6 else ""

            exercise = matcher.find_best_match(name, exercises, aliases)
            if exercise is None:
                if name not in result.not_found:
                    result.not_found.append(name)
                continue

            try:
                logged_at = datetime.strptime(f"{date_text} {time_text}", f"{DATE_FORMAT} {TIME_FORMAT}")
                reps = int(reps_text)
                rounds = int(rounds_text)
                band_color = None
                if exercise.is_banded:
                    band_color = weight_text.lower()
                    if band_color not in BAND_COLORS:
                        raise ValueError(f"unknown band color {weight_text}")
                    weight = 0.0
                else:
                    weight = float(weight_text)
            except ValueError:
                result.invalid_rows.append(raw)
                continue

            sets = build_sets(weight, reps, rounds, band_color=band_color)
            last = pending[-1] if pending else None
            if last is not None and last.exercise.id == exercise.id and last.logged_at == logged_at:
                last.sets.extend(sets)
                last.comments = last.comments or notes
                last.rows.append(raw)
            else:
                pending.append(_PendingLog(exercise, logged_at, sets, notes, [raw]))

        for entry in pending:
            candidate = LiftLog(
                user_id=context.user_id,
                exercise_id=entry.exercise.id,
                logged_at=entry.logged_at,
                sets=entry.sets,
            )
            if await self.log_repo.find_duplicate(candidate) is not None:
                result.skipped += 1
                continue

            try:
                await self.log_service.create(
                    context, entry.exercise.id, entry.sets,
                    logged_at=entry.logged_at, comments=entry.comments,
                )
            except LiftTrackerError:
                result.invalid_rows.extend(entry.rows)
                continue
            result.imported += 1

        logger.info(
            "TSV lift log import for user %s: %d imported, %d skipped, %d invalid, %d unknown",
            context.user_id, result.imported, result.skipped,
            len(result.invalid_rows), len(result.not_found),
        )
        return result

    async def export_lift_logs(self, context: RequestContext) -> str:
        """The user's lift logs in the import format, oldest first.

        A log with mixed sets becomes one row per run of identical sets.
        """
        logs = await self.log_repo.list_for_user(context.user_id)
        exercises, aliases = await self.resolver.load_catalog(context)
        by_id = {exercise.id: exercise for exercise in exercises}

        lines = []
        for log in sorted(logs, key=LiftLog.sort_key):
            exercise = by_id.get(log.exercise_id)
            if exercise is None:
                exercise = await self.exercise_repo.get(log.exercise_id, include_deleted=True)
            comments = log.comments
            for lift_set, rounds in _set_runs(log.sets):
                weight = lift_set.band_color if lift_set.band_color else f"{lift_set.weight:g}"
                lines.append(
                    "\t".join(
                        [
                            log.logged_at.strftime(DATE_FORMAT),
                            log.logged_at.strftime(TIME_FORMAT),
                            display_name(exercise, aliases),
                            weight,
                            str(lift_set.reps),
                            str(rounds),
                            comments,
                        ]
                    )
                )
                # Comments go on the first row only
                comments = ""
        return "\n".join(lines)

    async def import_exercises(self, text: str, context: RequestContext) -> ImportResult:
        """Create or update the user's exercises from `title <TAB> type` rows."""
        rows = _split_rows(text)
        result = ImportResult(entity="exercises")
        visible = await self.exercise_repo.list_visible(context)
        own = {
            normalize_exercise_name(e.title): e for e in visible if not e.is_global
        }

        for raw, cells in rows:
            title = cells[0] if cells else ""
            if not title:
                result.invalid_rows.append(raw)
                continue
            try:
                exercise_type = ExerciseType(cells[1]) if len(cells) > 1 and cells[1] else None
            except ValueError:
                result.invalid_rows.append(raw)
                continue

            existing = own.get(normalize_exercise_name(title))
            if existing is not None:
                if exercise_type is None or existing.exercise_type == exercise_type:
                    result.skipped += 1
                    continue
                existing.exercise_type = exercise_type
                await self.exercise_repo.update(existing)
                result.updated += 1
                continue

            exercise = Exercise(
                title=title,
                exercise_type=exercise_type or ExerciseType.REGULAR,
                user_id=context.user_id,
            )
            await self.exercise_repo.create(exercise)
            own[normalize_exercise_name(title)] = exercise
            result.imported += 1

        return result
