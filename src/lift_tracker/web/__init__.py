"""Web interface for lift-tracker."""

from .app import create_app

__all__ = ["create_app"]
