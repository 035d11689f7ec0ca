"""Tests for PR detection and historical recalculation."""

import asyncio
from datetime import datetime

import pytest

from lift_tracker.db import LiftLogRepository, PersonalRecordRepository, UserRepository
from lift_tracker.errors import NotFoundError
from lift_tracker.models.lift_log import LiftLog, LiftSet, PRStatus
from lift_tracker.models.user import RequestContext
from lift_tracker.services.lift_logging import LiftLogService
from lift_tracker.services.pr_detection import (
    PRRecalculationService,
    evaluate_log,
    replay_history,
)


class TestReplayHistory:
    """Tests for the in-memory PR rules."""

    def test_rising_then_falling_weights(self, squat, make_log):
        logs = [make_log(200, day=1, log_id=1), make_log(210, day=2, log_id=2),
                make_log(205, day=3, log_id=3)]

        results = replay_history(logs, squat)

        assert [evaluation.is_pr for _, evaluation in results] == [True, True, False]
        assert [evaluation.pr_count for _, evaluation in results] == [1, 1, 0]

    def test_previous_record_is_reported(self, squat, make_log):
        logs = [make_log(200, day=1, log_id=1), make_log(210, day=2, log_id=2)]

        _, second = replay_history(logs, squat)[1]

        assert second.previous_best == pytest.approx(200 * (1 + 5 / 30))
        assert second.previous_lift_log_id == 1
        assert "previous" in second.reason()

    def test_pr_count_counts_sets_over_previous_record(self, squat, make_log):
        first = make_log(200, day=1, log_id=1)
        second = make_log(210, day=2, log_id=2, sets=3)
        second.sets.append(LiftSet(weight=150, reps=5))

        _, evaluation = replay_history([first, second], squat)[1]

        assert evaluation.is_pr
        assert evaluation.pr_count == 3

    def test_input_order_does_not_matter(self, squat, make_log):
        logs = [make_log(205, day=3, log_id=3), make_log(200, day=1, log_id=1),
                make_log(210, day=2, log_id=2)]

        results = replay_history(logs, squat)

        assert [log.id for log, _ in results] == [1, 2, 3]
        assert [evaluation.is_pr for _, evaluation in results] == [True, True, False]

    def test_ties_on_logged_at_break_by_id(self, squat, make_log):
        logs = [make_log(200, day=1, log_id=2), make_log(200, day=1, log_id=1)]

        results = replay_history(logs, squat)

        assert [(log.id, evaluation.is_pr) for log, evaluation in results] == [
            (1, True),
            (2, False),
        ]

    def test_equal_weight_is_not_a_pr(self, squat, make_log):
        logs = [make_log(200, day=1, log_id=1), make_log(200, day=2, log_id=2)]

        assert [e.is_pr for _, e in replay_history(logs, squat)] == [True, False]

    def test_zero_weight_is_never_a_pr(self, squat, make_log):
        evaluation = evaluate_log(make_log(0), squat, previous_best=None)

        assert not evaluation.is_pr
        assert evaluation.pr_count == 0


class TestPRDetectionOnCreate:
    """PR evaluation when logs are created."""

    def _log(self, service, context, exercise_id, weight, day, reps=5):
        log, _ = asyncio.run(
            service.create(
                context,
                exercise_id,
                [LiftSet(weight=weight, reps=reps)],
                logged_at=datetime(2024, 3, day, 7, 30),
            )
        )
        return log

    def test_flags_are_stored(self, db_path, context, global_exercise):
        squat = global_exercise("Back Squat")
        service = LiftLogService(db_path)

        ids = [self._log(service, context, squat.id, w, d).id
               for w, d in ((200, 1), (210, 2), (205, 3))]

        repo = LiftLogRepository(db_path)
        stored = [asyncio.run(repo.get(log_id)) for log_id in ids]
        assert [log.is_pr for log in stored] == [True, True, False]
        assert [log.pr_status for log in stored] == [
            PRStatus.EVALUATED_PR,
            PRStatus.EVALUATED_PR,
            PRStatus.EVALUATED_NON_PR,
        ]

        records = asyncio.run(PersonalRecordRepository(db_path).list_for_user(context.user_id))
        assert sorted(r.lift_log_id for r in records) == ids[:2]
        assert {r.pr_type for r in records} == {"one_rm"}

    def test_banded_log_is_not_a_pr(self, db_path, context, global_exercise):
        banded = global_exercise("Banded Pull-Apart")
        service = LiftLogService(db_path)

        log, evaluation = asyncio.run(
            service.create(context, banded.id, [LiftSet(weight=50, reps=20, band_color="red")])
        )

        assert not evaluation.is_pr
        assert evaluation.reason() == "1RM not applicable"
        assert log.sets[0].weight == 0

    def test_bodyweight_exercise_uses_user_bodyweight(self, db_path, user, global_exercise):
        pull_ups = global_exercise("Pull-ups")
        context = RequestContext(user_id=user.id, bodyweight=180)
        service = LiftLogService(db_path)

        _, evaluation = asyncio.run(
            service.create(context, pull_ups.id, [LiftSet(weight=0, reps=5)])
        )

        assert evaluation.is_pr
        assert evaluation.best_one_rep_max == pytest.approx(180 * (1 + 5 / 30))

    def test_bodyweight_exercise_without_bodyweight(self, db_path, context, global_exercise):
        pull_ups = global_exercise("Pull-ups")

        _, evaluation = asyncio.run(
            LiftLogService(db_path).create(context, pull_ups.id, [LiftSet(weight=0, reps=5)])
        )

        assert not evaluation.is_pr


class TestPRRecalculation:
    """Tests for PRRecalculationService."""

    def _insert_raw(self, db_path, user_id, exercise_id, weights):
        """Insert logs without evaluating them, as an import from elsewhere would."""
        repo = LiftLogRepository(db_path)
        logs = []
        for day, weight in enumerate(weights, start=1):
            log = LiftLog(
                user_id=user_id,
                exercise_id=exercise_id,
                logged_at=datetime(2024, 2, day, 18, 0),
                sets=[LiftSet(weight=weight, reps=5)],
            )
            asyncio.run(repo.create(log))
            logs.append(log)
        return logs

    def _state(self, db_path, user_id, exercise_id):
        history = asyncio.run(LiftLogRepository(db_path).list_history(user_id, exercise_id))
        records = asyncio.run(
            PersonalRecordRepository(db_path).list_for_user(user_id, exercise_id)
        )
        return (
            [(log.id, log.is_pr, log.pr_count) for log in history],
            sorted((r.lift_log_id, round(r.value, 4), r.previous_lift_log_id) for r in records),
        )

    def test_recalculate_sets_flags_and_records(self, db_path, user, global_exercise):
        squat = global_exercise("Back Squat")
        logs = self._insert_raw(db_path, user.id, squat.id, [200, 210, 205])

        result = asyncio.run(PRRecalculationService(db_path).recalculate(user.id, squat.id))

        assert result.logs_processed == 3
        assert result.prs == 2
        flags, records = self._state(db_path, user.id, squat.id)
        assert [is_pr for _, is_pr, _ in flags] == [True, True, False]
        assert [log_id for log_id, _, _ in records] == [logs[0].id, logs[1].id]

    def test_recalculate_is_idempotent(self, db_path, user, global_exercise):
        squat = global_exercise("Back Squat")
        self._insert_raw(db_path, user.id, squat.id, [200, 210, 205, 215])
        service = PRRecalculationService(db_path)

        asyncio.run(service.recalculate(user.id, squat.id))
        once = self._state(db_path, user.id, squat.id)
        second = asyncio.run(service.recalculate(user.id, squat.id))
        twice = self._state(db_path, user.id, squat.id)

        assert once == twice
        assert second.changed == 0

    def test_dry_run_writes_nothing(self, db_path, user, global_exercise):
        squat = global_exercise("Back Squat")
        self._insert_raw(db_path, user.id, squat.id, [200, 210])

        result = asyncio.run(
            PRRecalculationService(db_path).recalculate(user.id, squat.id, dry_run=True)
        )

        assert result.dry_run
        assert result.prs == 2
        flags, records = self._state(db_path, user.id, squat.id)
        assert [is_pr for _, is_pr, _ in flags] == [False, False]
        assert records == []

    def test_backfilled_history_is_corrected(self, db_path, context, global_exercise):
        squat = global_exercise("Back Squat")
        service = LiftLogService(db_path)
        later, _ = asyncio.run(service.create(
            context, squat.id, [LiftSet(weight=205, reps=5)], logged_at=datetime(2024, 4, 3)
        ))
        asyncio.run(service.create(
            context, squat.id, [LiftSet(weight=210, reps=5)], logged_at=datetime(2024, 4, 1)
        ))

        # Evaluated once at creation, the later log still claims a PR
        assert asyncio.run(LiftLogRepository(db_path).get(later.id)).is_pr

        asyncio.run(PRRecalculationService(db_path).recalculate(context.user_id, squat.id))

        assert not asyncio.run(LiftLogRepository(db_path).get(later.id)).is_pr

    def test_deleted_logs_leave_history(self, db_path, context, global_exercise):
        squat = global_exercise("Back Squat")
        logs = self._insert_raw(db_path, context.user_id, squat.id, [200, 210, 205])
        asyncio.run(LiftLogService(db_path).delete(logs[1].id, context))

        asyncio.run(PRRecalculationService(db_path).recalculate(context.user_id, squat.id))

        flags, _ = self._state(db_path, context.user_id, squat.id)
        assert flags == [(logs[0].id, True, 1), (logs[2].id, True, 1)]

    def test_recalculate_uses_stored_bodyweight(self, db_path, user, global_exercise):
        pull_ups = global_exercise("Pull-ups")
        asyncio.run(UserRepository(db_path).set_bodyweight(user.id, 180))
        self._insert_raw(db_path, user.id, pull_ups.id, [0, 10])

        result = asyncio.run(PRRecalculationService(db_path).recalculate(user.id, pull_ups.id))

        assert result.prs == 2
        _, records = self._state(db_path, user.id, pull_ups.id)
        assert records[-1][1] == pytest.approx(round(190 * (1 + 5 / 30), 4))

    def test_unknown_exercise(self, db_path, user):
        with pytest.raises(NotFoundError):
            asyncio.run(PRRecalculationService(db_path).recalculate(user.id, 9999))
