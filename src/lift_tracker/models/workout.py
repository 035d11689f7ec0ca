"""Workout and parsed WOD notation models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class SchemeType(str, Enum):
    """Kinds of set/rep notation."""

    SETS_X_REPS = "sets_x_reps"
    SETS_X_REP_RANGE = "sets_x_rep_range"
    REP_LADDER = "rep_ladder"
    REPS_ONLY = "reps_only"
    TIME_DISTANCE = "time_distance"
    TIME = "time"


@dataclass
class Scheme:
    """A structured set/rep scheme. `display` is the token exactly as written."""

    type: SchemeType
    display: str
    sets: int | None = None
    reps: int | list[int] | None = None
    reps_min: int | None = None
    reps_max: int | None = None
    value: int | None = None
    unit: str | None = None
    minutes: int | None = None
    seconds: int | None = None

    @property
    def total_reps(self) -> int | None:
        """Total prescribed reps, when the scheme is rep based."""
        if self.type == SchemeType.SETS_X_REPS:
            return self.sets * self.reps
        if self.type == SchemeType.REP_LADDER:
            return sum(self.reps)
        if self.type == SchemeType.REPS_ONLY:
            return self.reps
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary, leaving out fields the type does not use."""
        data = {"type": self.type.value, "display": self.display}
        for key in ("sets", "reps", "reps_min", "reps_max", "value", "unit", "minutes", "seconds"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Scheme":
        """Create from dictionary."""
        return cls(
            type=SchemeType(data["type"]),
            display=data["display"],
            sets=data.get("sets"),
            reps=data.get("reps"),
            reps_min=data.get("reps_min"),
            reps_max=data.get("reps_max"),
            value=data.get("value"),
            unit=data.get("unit"),
            minutes=data.get("minutes"),
            seconds=data.get("seconds"),
        )


@dataclass
class WodExercise:
    """An exercise line such as `[Back Squat]: 5x5` or `10 [Push-ups]`."""

    name: str
    line_number: int
    scheme: Scheme | None = None
    scheme_text: str | None = None  # raw token, kept when it failed to parse
    reps: int | None = None  # rep count inside a special format
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {"type": "exercise", "name": self.name, "line": self.line_number}
        if self.scheme is not None:
            data["scheme"] = self.scheme.to_dict()
        if self.scheme_text is not None:
            data["scheme_text"] = self.scheme_text
        if self.reps is not None:
            data["reps"] = self.reps
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WodExercise":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            line_number=data.get("line", 0),
            scheme=Scheme.from_dict(data["scheme"]) if data.get("scheme") else None,
            scheme_text=data.get("scheme_text"),
            reps=data.get("reps"),
            error=data.get("error"),
        )


@dataclass
class SpecialFormat:
    """An AMRAP / EMOM / For Time / Rounds group of exercises."""

    format: str
    line_number: int
    duration: int | None = None
    rounds: int | None = None
    rep_scheme: str | None = None
    description: str | None = None
    exercises: list[WodExercise] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {"type": "special_format", "format": self.format, "line": self.line_number}
        for key in ("duration", "rounds", "rep_scheme", "description"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data["exercises"] = [ex.to_dict() for ex in self.exercises]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SpecialFormat":
        """Create from dictionary."""
        return cls(
            format=data["format"],
            line_number=data.get("line", 0),
            duration=data.get("duration"),
            rounds=data.get("rounds"),
            rep_scheme=data.get("rep_scheme"),
            description=data.get("description"),
            exercises=[WodExercise.from_dict(ex) for ex in data.get("exercises", [])],
        )


@dataclass
class WodText:
    """A line that is neither a header nor an exercise, kept verbatim."""

    text: str
    line_number: int
    is_comment: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": "comment" if self.is_comment else "text",
            "text": self.text,
            "line": self.line_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WodText":
        """Create from dictionary."""
        return cls(
            text=data["text"],
            line_number=data.get("line", 0),
            is_comment=data.get("type") == "comment",
        )


WodEntry = WodExercise | SpecialFormat | WodText


def _entry_from_dict(data: dict) -> WodEntry:
    if data["type"] == "exercise":
        return WodExercise.from_dict(data)
    if data["type"] == "special_format":
        return SpecialFormat.from_dict(data)
    return WodText.from_dict(data)


@dataclass
class WodBlock:
    """A named block (`# Strength`) and its entries in order."""

    name: str
    entries: list[WodEntry] = field(default_factory=list)
    line_number: int | None = None

    @property
    def exercises(self) -> list[WodExercise]:
        """All exercise lines in the block, including those inside special formats."""
        result: list[WodExercise] = []
        for entry in self.entries:
            if isinstance(entry, WodExercise):
                result.append(entry)
            elif isinstance(entry, SpecialFormat):
                result.extend(entry.exercises)
        return result

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "line": self.line_number,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WodBlock":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            line_number=data.get("line"),
            entries=[_entry_from_dict(entry) for entry in data.get("entries", [])],
        )


@dataclass
class ParseIssue:
    """A scheme error attached to the line that caused it."""

    line_number: int
    line: str
    message: str

    def to_dict(self) -> dict:
        return {"line": self.line_number, "text": self.line, "message": self.message}


@dataclass
class ParsedWorkout:
    """Structured form of a WOD text."""

    blocks: list[WodBlock] = field(default_factory=list)
    errors: list[ParseIssue] = field(default_factory=list)
    parsed_at: datetime | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def exercises(self) -> list[WodExercise]:
        """All exercise lines in document order."""
        result: list[WodExercise] = []
        for block in self.blocks:
            result.extend(block.exercises)
        return result

    def exercise_names(self) -> list[str]:
        """Unique exercise names in order of first appearance."""
        seen: dict[str, None] = {}
        for exercise in self.exercises():
            seen.setdefault(exercise.name, None)
        return list(seen)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "blocks": [block.to_dict() for block in self.blocks],
            "errors": [issue.to_dict() for issue in self.errors],
            "parsed_at": self.parsed_at.isoformat() if self.parsed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedWorkout":
        """Create from dictionary."""
        parsed_at = data.get("parsed_at")
        return cls(
            blocks=[WodBlock.from_dict(block) for block in data.get("blocks", [])],
            errors=[
                ParseIssue(line_number=e["line"], line=e["text"], message=e["message"])
                for e in data.get("errors", [])
            ],
            parsed_at=datetime.fromisoformat(parsed_at) if parsed_at else None,
        )


@dataclass
class Workout:
    """A stored workout, optionally written in WOD notation."""

    user_id: int
    name: str
    wod_syntax: str | None = None
    wod_parsed: ParsedWorkout | None = None
    description: str = ""
    created_at: datetime | None = None
    deleted_at: datetime | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
            "wod_syntax": self.wod_syntax,
            "wod_parsed": self.wod_parsed.to_dict() if self.wod_parsed else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
