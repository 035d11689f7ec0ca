"""Exercise definitions and metadata."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ExerciseType(str, Enum):
    """How an exercise is loaded and measured."""

    REGULAR = "regular"
    BODYWEIGHT = "bodyweight"
    BANDED_RESISTANCE = "banded_resistance"
    BANDED_ASSISTANCE = "banded_assistance"
    CARDIO = "cardio"
    STATIC_HOLD = "static_hold"


class BandType(str, Enum):
    """Band usage for banded exercises."""

    RESISTANCE = "resistance"
    ASSISTANCE = "assistance"


# Exercise types that support weight/reps based one-rep-max estimation
ONE_REP_MAX_TYPES = frozenset({ExerciseType.REGULAR, ExerciseType.BODYWEIGHT})

BAND_COLORS = ["red", "blue", "green", "black", "purple"]


@dataclass
class Exercise:
    """An exercise, either global (user_id is None) or owned by a user."""

    title: str
    exercise_type: ExerciseType = ExerciseType.REGULAR
    user_id: int | None = None
    band_type: BandType | None = None
    is_bodyweight: bool = False
    description: str = ""
    deleted_at: datetime | None = None
    id: int | None = None

    def __post_init__(self):
        if isinstance(self.exercise_type, str):
            self.exercise_type = ExerciseType(self.exercise_type)
        if isinstance(self.band_type, str):
            self.band_type = BandType(self.band_type)
        if self.band_type is not None:
            # A banded exercise is never counted as bodyweight
            self.is_bodyweight = False
            if self.exercise_type not in (
                ExerciseType.BANDED_RESISTANCE,
                ExerciseType.BANDED_ASSISTANCE,
            ):
                self.exercise_type = (
                    ExerciseType.BANDED_RESISTANCE
                    if self.band_type == BandType.RESISTANCE
                    else ExerciseType.BANDED_ASSISTANCE
                )
        elif self.exercise_type == ExerciseType.BODYWEIGHT:
            self.is_bodyweight = True

    def set_band_type(self, band_type: BandType | str | None) -> None:
        """Change the band type, keeping the bodyweight flag consistent."""
        self.band_type = BandType(band_type) if band_type else None
        if self.band_type is None:
            if self.exercise_type in (
                ExerciseType.BANDED_RESISTANCE,
                ExerciseType.BANDED_ASSISTANCE,
            ):
                self.exercise_type = ExerciseType.REGULAR
            return
        self.__post_init__()

    @property
    def is_global(self) -> bool:
        return self.user_id is None

    @property
    def is_banded(self) -> bool:
        return self.band_type is not None or self.exercise_type in (
            ExerciseType.BANDED_RESISTANCE,
            ExerciseType.BANDED_ASSISTANCE,
        )

    @property
    def supports_one_rep_max(self) -> bool:
        """Whether weight/reps based 1RM values make sense for this exercise."""
        return not self.is_banded and self.exercise_type in ONE_REP_MAX_TYPES

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "title": self.title,
            "exercise_type": self.exercise_type.value,
            "user_id": self.user_id,
            "band_type": self.band_type.value if self.band_type else None,
            "is_bodyweight": self.is_bodyweight,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "Exercise":
        """Create from dictionary."""
        deleted_at = data.get("deleted_at")
        return cls(
            id=id,
            title=data["title"],
            exercise_type=ExerciseType(data.get("exercise_type", "regular")),
            user_id=data.get("user_id"),
            band_type=BandType(data["band_type"]) if data.get("band_type") else None,
            is_bodyweight=bool(data.get("is_bodyweight", False)),
            description=data.get("description") or "",
            deleted_at=datetime.fromisoformat(deleted_at) if deleted_at else None,
        )


@dataclass
class ExerciseAlias:
    """Per-user display name for an exercise."""

    user_id: int
    exercise_id: int
    alias_name: str
    id: int | None = None


# Global exercise library seeded by `lift-tracker init`
COMMON_EXERCISES: list[Exercise] = [
    Exercise(title="Back Squat"),
    Exercise(title="Front Squat"),
    Exercise(title="Deadlift"),
    Exercise(title="Romanian Deadlift"),
    Exercise(title="Bench Press"),
    Exercise(title="Incline Bench Press"),
    Exercise(title="Strict Press"),
    Exercise(title="Push Press"),
    Exercise(title="Barbell Row"),
    Exercise(title="Power Clean"),
    Exercise(title="Hang Power Clean"),
    Exercise(title="Snatch"),
    Exercise(title="Thruster"),
    Exercise(title="Kettlebell Swing"),
    Exercise(title="Wall Ball"),
    Exercise(title="Pull-ups", exercise_type=ExerciseType.BODYWEIGHT),
    Exercise(title="Chin-ups", exercise_type=ExerciseType.BODYWEIGHT),
    Exercise(title="Push-ups", exercise_type=ExerciseType.BODYWEIGHT),
    Exercise(title="Dips", exercise_type=ExerciseType.BODYWEIGHT),
    Exercise(title="Box Jumps", exercise_type=ExerciseType.BODYWEIGHT),
    Exercise(title="Burpees", exercise_type=ExerciseType.BODYWEIGHT),
    Exercise(title="Toes-to-Bar", exercise_type=ExerciseType.BODYWEIGHT),
    Exercise(title="Banded Pull-Apart", band_type=BandType.RESISTANCE),
    Exercise(title="Band-Assisted Pull-ups", band_type=BandType.ASSISTANCE),
    Exercise(title="Row", exercise_type=ExerciseType.CARDIO),
    Exercise(title="Run", exercise_type=ExerciseType.CARDIO),
    Exercise(title="Plank", exercise_type=ExerciseType.STATIC_HOLD),
]
