"""WOD notation: scheme tokens, line classification and block parsing."""

from .parser import WodParser, parse_wod, unparse_wod
from .schemes import parse_scheme
from .tokenizer import Line, LineKind, tokenize

__all__ = [
    "Line",
    "LineKind",
    "parse_scheme",
    "parse_wod",
    "tokenize",
    "unparse_wod",
    "WodParser",
]
