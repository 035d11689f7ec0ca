"""Personal record detection and historical recalculation.

A lift log is a PR when its best estimated 1RM strictly exceeds the best
1RM of every earlier log for the same user and exercise (ordered by
`logged_at`, ties broken by id). The first log with a positive 1RM is a PR.
`pr_count` is the number of sets in the log that beat the previous record.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..db.repositories import (
    ExerciseRepository,
    LiftLogRepository,
    PersonalRecordRepository,
    UserRepository,
)
from ..errors import NotFoundError
from ..models.exercises import Exercise
from ..models.lift_log import LiftLog, PersonalRecord, PRStatus
from .one_rep_max import OneRepMaxCalculator

logger = logging.getLogger(__name__)


@dataclass
class PREvaluation:
    """Outcome of comparing one log against the record before it."""

    is_pr: bool
    pr_count: int
    best_one_rep_max: float | None
    previous_best: float | None = None
    previous_lift_log_id: int | None = None

    @property
    def status(self) -> PRStatus:
        return PRStatus.EVALUATED_PR if self.is_pr else PRStatus.EVALUATED_NON_PR

    def reason(self) -> str:
        """Human readable explanation of the outcome."""
        if self.best_one_rep_max is None:
            return "1RM not applicable"
        if self.is_pr and self.previous_best is None:
            return f"First recorded 1RM: {self.best_one_rep_max:.1f}"
        if self.is_pr:
            return (
                f"New 1RM: {self.best_one_rep_max:.1f} "
                f"(previous: {self.previous_best:.1f} from lift #{self.previous_lift_log_id})"
            )
        return (
            f"1RM {self.best_one_rep_max:.1f} did not exceed previous best "
            f"{self.previous_best:.1f} from lift #{self.previous_lift_log_id}"
        )


def evaluate_log(
    log: LiftLog,
    exercise: Exercise,
    previous_best: float | None,
    previous_lift_log_id: int | None = None,
    calculator: OneRepMaxCalculator | None = None,
) -> PREvaluation:
    """Compare a log against the best 1RM that came before it."""
    calculator = calculator or OneRepMaxCalculator()
    best = calculator.best_one_rep_max(log, exercise)

    if best is None or best <= 0:
        return PREvaluation(False, 0, best, previous_best, previous_lift_log_id)

    threshold = previous_best if previous_best is not None else 0.0
    pr_count = sum(
        1
        for lift_set in log.sets
        if (value := calculator.set_one_rep_max(lift_set, exercise)) is not None
        and value > threshold
    )
    is_pr = best > threshold
    return PREvaluation(is_pr, pr_count if is_pr else 0, best, previous_best, previous_lift_log_id)


def replay_history(
    logs: list[LiftLog],
    exercise: Exercise,
    calculator: OneRepMaxCalculator | None = None,
) -> list[tuple[LiftLog, PREvaluation]]:
    """Evaluate logs in chronological order, carrying the running record."""
    calculator = calculator or OneRepMaxCalculator()
    results: list[tuple[LiftLog, PREvaluation]] = []
    best: float | None = None
    best_log_id: int | None = None

    for log in sorted(logs, key=LiftLog.sort_key):
        evaluation = evaluate_log(log, exercise, best, best_log_id, calculator)
        results.append((log, evaluation))
        if evaluation.is_pr:
            best = evaluation.best_one_rep_max
            best_log_id = log.id

    return results


def build_record(log: LiftLog, evaluation: PREvaluation) -> PersonalRecord:
    """PersonalRecord row for a log that was evaluated as a PR."""
    return PersonalRecord(
        user_id=log.user_id,
        exercise_id=log.exercise_id,
        lift_log_id=log.id,
        value=evaluation.best_one_rep_max,
        previous_value=evaluation.previous_best,
        previous_lift_log_id=evaluation.previous_lift_log_id,
        achieved_at=log.logged_at,
    )


class PRDetectionService:
    """Evaluates a freshly created log against the user's history."""

    def __init__(self, db_path: Path | None = None, calculator: OneRepMaxCalculator | None = None):
        self.log_repo = LiftLogRepository(db_path)
        self.calculator = calculator or OneRepMaxCalculator()

    async def evaluate(
        self,
        log: LiftLog,
        exercise: Exercise,
        calculator: OneRepMaxCalculator | None = None,
    ) -> PREvaluation:
        """Evaluate a log against all earlier logs (no writes)."""
        calculator = calculator or self.calculator
        history = await self.log_repo.list_history(log.user_id, log.exercise_id)
        previous = [
            other for other in history
            if other.id != log.id and other.sort_key() < log.sort_key()
        ]
        # The record before this log is whatever the replay ends on
        best: float | None = None
        best_log_id: int | None = None
        for other, evaluation in replay_history(previous, exercise, calculator):
            if evaluation.is_pr:
                best = evaluation.best_one_rep_max
                best_log_id = other.id
        return evaluate_log(log, exercise, best, best_log_id, calculator)

    async def detect_and_store(
        self,
        log: LiftLog,
        exercise: Exercise,
        calculator: OneRepMaxCalculator | None = None,
    ) -> PREvaluation:
        """Evaluate a new log once and persist the outcome.

        Only logs in the unknown state are evaluated; an evaluated log is left
        untouched so normal edits never demote a PR. Pass a calculator
        carrying the user's bodyweight for bodyweight exercises.
        """
        if log.pr_status != PRStatus.UNKNOWN:
            logger.debug("Lift log %s already evaluated (%s)", log.id, log.pr_status.value)
            return PREvaluation(log.is_pr, log.pr_count, None)

        evaluation = await self.evaluate(log, exercise, calculator)
        log.is_pr = evaluation.is_pr
        log.pr_count = evaluation.pr_count
        log.pr_status = evaluation.status

        record = build_record(log, evaluation) if evaluation.is_pr else None
        await self.log_repo.record_pr_evaluation(log, record)

        if evaluation.is_pr:
            logger.info(
                "PR for user %s on exercise %s: %s",
                log.user_id, log.exercise_id, evaluation.reason(),
            )
        return evaluation


@dataclass
class RecalculationResult:
    """Summary of one (user, exercise) replay."""

    user_id: int
    exercise_id: int
    logs_processed: int = 0
    prs: int = 0
    changed: int = 0
    dry_run: bool = False


class PRRecalculationService:
    """Replays history to rebuild PR flags and the PR ledger."""

    def __init__(self, db_path: Path | None = None, calculator: OneRepMaxCalculator | None = None):
        self.exercise_repo = ExerciseRepository(db_path)
        self.log_repo = LiftLogRepository(db_path)
        self.record_repo = PersonalRecordRepository(db_path)
        self.user_repo = UserRepository(db_path)
        self.calculator = calculator

    async def recalculate(
        self, user_id: int, exercise_id: int, dry_run: bool = False
    ) -> RecalculationResult:
        """Recompute PR state for one user and exercise.

        Clears the pair's PersonalRecord rows and recreates them, rewriting
        `is_pr`/`pr_count` on every log. With `dry_run` nothing is written.
        Running it twice gives the same state as running it once.
        Bodyweight exercises use the user's stored bodyweight.
        """
        exercise = await self.exercise_repo.get(exercise_id, include_deleted=True)
        if exercise is None:
            raise NotFoundError(f"Exercise {exercise_id} not found")

        calculator = self.calculator
        if calculator is None:
            user = await self.user_repo.get(user_id)
            bodyweight = user.bodyweight if user and user.bodyweight else 0.0
            calculator = OneRepMaxCalculator(bodyweight=bodyweight)

        logs = await self.log_repo.list_history(user_id, exercise_id)
        result = RecalculationResult(user_id, exercise_id, len(logs), dry_run=dry_run)
        records: list[PersonalRecord] = []

        for log, evaluation in replay_history(logs, exercise, calculator):
            if (log.is_pr, log.pr_count) != (evaluation.is_pr, evaluation.pr_count):
                result.changed += 1
            log.is_pr = evaluation.is_pr
            log.pr_count = evaluation.pr_count
            log.pr_status = evaluation.status
            if evaluation.is_pr:
                result.prs += 1
                records.append(build_record(log, evaluation))

        if not dry_run:
            await self.record_repo.replace_for_exercise(user_id, exercise_id, logs, records)

        logger.info(
            "Recalculated PRs for user %s exercise %s: %d logs, %d PRs, %d changed%s",
            user_id, exercise_id, result.logs_processed, result.prs, result.changed,
            " (dry run)" if dry_run else "",
        )
        return result
