"""Set/rep scheme notation.

Accepted tokens:

    5x5, 3 x 8      sets x reps
    3x8-12          sets x rep range
    5-5-3-1         rep ladder
    5               reps only
    500m, 5min      time or distance
    2:00            time (minutes:seconds)

The parsed scheme keeps the token verbatim in `display`.
"""

import re

from ..errors import SchemeParseError
from ..models.workout import Scheme, SchemeType

SETS_X_REPS = re.compile(r"^(\d+)\s*x\s*(\d+)$", re.IGNORECASE)
SETS_X_REP_RANGE = re.compile(r"^(\d+)\s*x\s*(\d+)\s*-\s*(\d+)$", re.IGNORECASE)
REP_LADDER = re.compile(r"^\d+(?:-\d+)+$")
REPS_ONLY = re.compile(r"^\d+$")
TIME_DISTANCE = re.compile(r"^(\d+)\s*(m|min|km|cal|sec)$", re.IGNORECASE)
TIME = re.compile(r"^(\d+):([0-5]\d)$")

# Loose shape used to decide whether `[Name] token` carries a scheme
SCHEME_LIKE = re.compile(r"^[\dx:\- ]+[a-z]*$", re.IGNORECASE)


def parse_scheme(token: str) -> Scheme:
    """Parse a scheme token.

    Raises:
        SchemeParseError: if the token is not a recognised scheme
    """
    display = token.strip()
    if not display:
        raise SchemeParseError(token, "empty scheme")

    match = SETS_X_REPS.match(display)
    if match:
        sets, reps = int(match.group(1)), int(match.group(2))
        return Scheme(type=SchemeType.SETS_X_REPS, display=display, sets=sets, reps=reps)

    match = SETS_X_REP_RANGE.match(display)
    if match:
        sets, low, high = (int(g) for g in match.groups())
        if low > high:
            raise SchemeParseError(token, f"rep range {low}-{high} is reversed")
        return Scheme(
            type=SchemeType.SETS_X_REP_RANGE,
            display=display,
            sets=sets,
            reps_min=low,
            reps_max=high,
        )

    if REP_LADDER.match(display):
        reps = [int(part) for part in display.split("-")]
        return Scheme(type=SchemeType.REP_LADDER, display=display, reps=reps)

    if REPS_ONLY.match(display):
        return Scheme(type=SchemeType.REPS_ONLY, display=display, reps=int(display))

    match = TIME_DISTANCE.match(display)
    if match:
        return Scheme(
            type=SchemeType.TIME_DISTANCE,
            display=display,
            value=int(match.group(1)),
            unit=match.group(2).lower(),
        )

    match = TIME.match(display)
    if match:
        return Scheme(
            type=SchemeType.TIME,
            display=display,
            minutes=int(match.group(1)),
            seconds=int(match.group(2)),
        )

    raise SchemeParseError(token, _describe_problem(display))


def looks_like_scheme(token: str) -> bool:
    """Whether a trailing token should be treated as a scheme attempt."""
    return bool(SCHEME_LIKE.match(token.strip()))


def _describe_problem(token: str) -> str:
    if token.lower().count("x") > 1:
        return "more than one 'x' separator"
    if not any(ch.isdigit() for ch in token):
        return "expected a number"
    return "unrecognised format"
