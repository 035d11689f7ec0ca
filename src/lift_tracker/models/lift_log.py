"""Lift log, set and personal record models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


def to_naive_local(value: datetime) -> datetime:
    """Drop timezone info, converting aware values to local wall-clock time.

    Lift logs are stored as naive local timestamps so they stay comparable.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class PRStatus(str, Enum):
    """PR evaluation state of a lift log."""

    UNKNOWN = "unknown"
    EVALUATED_PR = "evaluated_pr"
    EVALUATED_NON_PR = "evaluated_non_pr"


@dataclass
class LiftSet:
    """A single set within a lift log."""

    weight: float = 0.0
    reps: int = 0
    band_color: str | None = None
    notes: str | None = None
    id: int | None = None
    lift_log_id: int | None = None

    @property
    def is_banded(self) -> bool:
        return bool(self.band_color)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "weight": self.weight,
            "reps": self.reps,
            "band_color": self.band_color,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LiftSet":
        """Create from dictionary."""
        return cls(
            weight=float(data.get("weight") or 0),
            reps=int(data.get("reps") or 0),
            band_color=data.get("band_color") or None,
            notes=data.get("notes") or None,
        )


@dataclass
class LiftLog:
    """A logged lift: one exercise performed at one time, with its sets."""

    user_id: int
    exercise_id: int
    logged_at: datetime
    sets: list[LiftSet] = field(default_factory=list)
    workout_id: int | None = None
    comments: str = ""
    is_pr: bool = False
    pr_count: int = 0
    pr_status: PRStatus = PRStatus.UNKNOWN
    deleted_at: datetime | None = None
    id: int | None = None

    def sort_key(self) -> tuple[datetime, int]:
        """Chronological ordering key: logged_at, then id."""
        return (self.logged_at, self.id or 0)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "exercise_id": self.exercise_id,
            "workout_id": self.workout_id,
            "logged_at": self.logged_at.isoformat(),
            "comments": self.comments,
            "is_pr": self.is_pr,
            "pr_count": self.pr_count,
            "pr_status": self.pr_status.value,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass
class PersonalRecord:
    """One detected PR event. Rows are never modified after creation."""

    user_id: int
    exercise_id: int
    lift_log_id: int
    value: float
    achieved_at: datetime
    pr_type: str = "one_rm"
    previous_value: float | None = None
    previous_lift_log_id: int | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "exercise_id": self.exercise_id,
            "lift_log_id": self.lift_log_id,
            "pr_type": self.pr_type,
            "value": round(self.value, 2),
            "previous_value": (
                round(self.previous_value, 2) if self.previous_value is not None else None
            ),
            "previous_lift_log_id": self.previous_lift_log_id,
            "achieved_at": self.achieved_at.isoformat(),
        }
