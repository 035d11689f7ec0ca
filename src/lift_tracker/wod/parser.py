"""WOD (workout of the day) notation parser.

WOD text is a list of blocks. Each block starts with a markdown style
header and holds exercise lines, optionally grouped under a special format:

```
# Strength
[Back Squat]: 5x5
[Bench Press]: 3x8-12

# Conditioning
AMRAP 12min:
10 [Box Jumps]
15 [Push-ups]
```

Scheme errors never abort parsing. They are attached to the exercise line
and collected in `ParsedWorkout.errors`.
"""

import logging
import re
from datetime import datetime

from ..errors import SchemeParseError
from ..models.workout import (
    ParsedWorkout,
    ParseIssue,
    SpecialFormat,
    WodBlock,
    WodExercise,
    WodText,
)
from .schemes import parse_scheme
from .tokenizer import Line, LineKind, tokenize

logger = logging.getLogger(__name__)

AMRAP = re.compile(r"^AMRAP\s+(\d+)\s*min", re.IGNORECASE)
EMOM = re.compile(r"^EMOM\s+(\d+)\s*min", re.IGNORECASE)
FOR_TIME = re.compile(r"^For Time", re.IGNORECASE)
ROUNDS = re.compile(r"^(\d+)\s+Rounds?(?:[\s:]|$)", re.IGNORECASE)
REP_SCHEME_FORMAT = re.compile(r"^([0-9-]+)\s+(For Time|Rounds?)(?:[\s:]|$)", re.IGNORECASE)


class WodParser:
    """Parses WOD text into a ParsedWorkout and renders it back."""

    def parse(self, text: str) -> ParsedWorkout:
        """Parse WOD text.

        Args:
            text: Raw workout text

        Returns:
            ParsedWorkout with ordered blocks and any scheme errors
        """
        parsed = ParsedWorkout(parsed_at=datetime.now())
        block: WodBlock | None = None
        special: SpecialFormat | None = None

        for line in tokenize(text):
            if line.kind == LineKind.BLANK:
                continue

            if line.kind == LineKind.HEADER:
                block = WodBlock(name=line.header, line_number=line.number)
                parsed.blocks.append(block)
                special = None
                continue

            # Content before the first header goes into an unnamed block
            if block is None:
                block = WodBlock(name="")
                parsed.blocks.append(block)

            if line.kind == LineKind.SPECIAL_FORMAT:
                special = self._parse_special_format(line)
                block.entries.append(special)
                continue

            if line.kind == LineKind.EXERCISE:
                exercise = self._parse_exercise(line, parsed)
                if special is not None:
                    special.exercises.append(exercise)
                else:
                    block.entries.append(exercise)
                continue

            block.entries.append(
                WodText(
                    text=line.text,
                    line_number=line.number,
                    is_comment=line.kind == LineKind.COMMENT,
                )
            )

        logger.debug(
            "Parsed WOD: %d blocks, %d exercises, %d errors",
            len(parsed.blocks),
            len(parsed.exercises()),
            len(parsed.errors),
        )
        return parsed

    def _parse_exercise(self, line: Line, parsed: ParsedWorkout) -> WodExercise:
        exercise = WodExercise(name=line.name, line_number=line.number, reps=line.reps)
        if line.scheme_text is None:
            return exercise

        try:
            exercise.scheme = parse_scheme(line.scheme_text)
        except SchemeParseError as e:
            exercise.scheme_text = line.scheme_text
            exercise.error = str(e)
            parsed.errors.append(
                ParseIssue(line_number=line.number, line=line.text, message=str(e))
            )
        return exercise

    def _parse_special_format(self, line: Line) -> SpecialFormat:
        text = line.text

        match = AMRAP.match(text)
        if match:
            return SpecialFormat("AMRAP", line.number, duration=int(match.group(1)))

        match = EMOM.match(text)
        if match:
            return SpecialFormat("EMOM", line.number, duration=int(match.group(1)))

        if FOR_TIME.match(text):
            return SpecialFormat("For Time", line.number)

        match = ROUNDS.match(text)
        if match:
            return SpecialFormat("Rounds", line.number, rounds=int(match.group(1)))

        match = REP_SCHEME_FORMAT.match(text)
        if match:
            label = match.group(2)
            fmt = "For Time" if label.lower() == "for time" else "Rounds"
            return SpecialFormat(fmt, line.number, rep_scheme=match.group(1))

        return SpecialFormat("Custom", line.number, description=text.rstrip(":"))

    def unparse(self, parsed: ParsedWorkout) -> str:
        """Render a ParsedWorkout back to WOD text."""
        lines: list[str] = []

        for block in parsed.blocks:
            if block.name:
                lines.append(f"# {block.name}")

            for entry in block.entries:
                if isinstance(entry, SpecialFormat):
                    lines.append(self._unparse_special_format(entry))
                    lines.extend(self._unparse_exercise(ex) for ex in entry.exercises)
                elif isinstance(entry, WodExercise):
                    lines.append(self._unparse_exercise(entry))
                else:
                    lines.append(entry.text)

            lines.append("")  # Blank line between blocks

        return "\n".join(lines).strip()

    def _unparse_special_format(self, entry: SpecialFormat) -> str:
        if entry.format in ("AMRAP", "EMOM") and entry.duration is not None:
            return f"{entry.format} {entry.duration}min:"
        if entry.format == "Rounds" and entry.rounds is not None:
            return f"{entry.rounds} Rounds:"
        if entry.rep_scheme is not None:
            return f"{entry.rep_scheme} {entry.format}:"
        if entry.format == "For Time":
            return "For Time:"
        return f"{entry.description or 'Custom'}:"

    def _unparse_exercise(self, exercise: WodExercise) -> str:
        if exercise.reps is not None:
            return f"{exercise.reps} [{exercise.name}]"
        if exercise.scheme is not None:
            return f"[{exercise.name}]: {exercise.scheme.display}"
        if exercise.scheme_text is not None:
            return f"[{exercise.name}]: {exercise.scheme_text}"
        return f"[{exercise.name}]"


def parse_wod(text: str) -> ParsedWorkout:
    """Convenience function to parse WOD text."""
    return WodParser().parse(text)


def unparse_wod(parsed: ParsedWorkout) -> str:
    """Convenience function to render a ParsedWorkout as WOD text."""
    return WodParser().unparse(parsed)
