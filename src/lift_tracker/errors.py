"""Domain exceptions for lift-tracker."""


class LiftTrackerError(Exception):
    """Base class for errors a user can correct."""


class ValidationError(LiftTrackerError):
    """Missing or malformed input fields."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))


class NotFoundError(LiftTrackerError):
    """A referenced entity does not exist (or is not visible to the user)."""


class AuthorizationError(LiftTrackerError):
    """The acting user tried to touch another user's resource."""


class SchemeParseError(LiftTrackerError):
    """A set/rep scheme token could not be parsed."""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid scheme '{token}': {reason}")


class TsvImportError(LiftTrackerError):
    """TSV input that cannot be imported at all."""
