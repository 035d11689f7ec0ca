"""Line classification for WOD text."""

import re
from dataclasses import dataclass
from enum import Enum

from .schemes import looks_like_scheme


class LineKind(str, Enum):
    """What a single line of WOD text is."""

    BLANK = "blank"
    HEADER = "header"
    SPECIAL_FORMAT = "special_format"
    EXERCISE = "exercise"
    COMMENT = "comment"
    TEXT = "text"


HEADER = re.compile(r"^#{1,3}\s+(.*)$")
SPECIAL_FORMAT = re.compile(
    r"^(AMRAP|EMOM|For Time|\d+ Rounds?)[\s:]|^[0-9]+(?:-[0-9]+)+\s+(For Time|Rounds?)[\s:]",
    re.IGNORECASE,
)
REPS_EXERCISE = re.compile(r"^(\d+)\s+\[([^\]]+)\]$")
BARE_EXERCISE = re.compile(r"^\[([^\]]+)\]$")
COLON_EXERCISE = re.compile(r"^\[([^\]]+)\]:\s*(.*)$")
SPACED_EXERCISE = re.compile(r"^\[([^\]]+)\]\s+(.+)$")


@dataclass
class Line:
    """A classified line. `name`/`scheme_text`/`reps` are set for exercise lines."""

    number: int
    raw: str
    kind: LineKind
    name: str | None = None
    scheme_text: str | None = None
    reps: int | None = None
    header: str | None = None

    @property
    def text(self) -> str:
        return self.raw.strip()


def classify_line(raw: str, number: int) -> Line:
    """Classify one line of WOD text."""
    line = raw.rstrip()
    stripped = line.strip()

    if not stripped:
        return Line(number, raw, LineKind.BLANK)

    if stripped.startswith("//") or stripped.startswith("--"):
        return Line(number, raw, LineKind.COMMENT)

    match = HEADER.match(line)
    if match:
        return Line(number, raw, LineKind.HEADER, header=match.group(1).strip())

    # Needs a trailing separator, so pad with a space for "For Time" at end of line
    if SPECIAL_FORMAT.match(stripped + " "):
        return Line(number, raw, LineKind.SPECIAL_FORMAT)

    match = REPS_EXERCISE.match(stripped)
    if match:
        return Line(
            number, raw, LineKind.EXERCISE,
            name=match.group(2).strip(),
            reps=int(match.group(1)),
        )

    match = BARE_EXERCISE.match(stripped)
    if match and match.group(1).strip():
        return Line(number, raw, LineKind.EXERCISE, name=match.group(1).strip())

    match = COLON_EXERCISE.match(stripped)
    if match and match.group(1).strip():
        return Line(
            number, raw, LineKind.EXERCISE,
            name=match.group(1).strip(),
            scheme_text=match.group(2).strip() or None,
        )

    match = SPACED_EXERCISE.match(stripped)
    if match and match.group(1).strip() and looks_like_scheme(match.group(2)):
        return Line(
            number, raw, LineKind.EXERCISE,
            name=match.group(1).strip(),
            scheme_text=match.group(2).strip(),
        )

    return Line(number, raw, LineKind.TEXT)


def tokenize(text: str) -> list[Line]:
    """Split WOD text into classified lines, numbered from 1."""
    return [
        classify_line(raw, number)
        for number, raw in enumerate(text.splitlines(), start=1)
    ]
