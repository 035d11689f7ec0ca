"""CLI commands for lift-tracker."""

from .import_data import export_data, import_data
from .init import init
from .prs import prs
from .serve import serve
from .users import users
from .wod import wod

__all__ = [
    "export_data",
    "import_data",
    "init",
    "prs",
    "serve",
    "users",
    "wod",
]
