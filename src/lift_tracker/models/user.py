"""User and request context models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A tracked user."""

    name: str
    email: str | None = None
    show_global_exercises: bool = True
    bodyweight: float | None = None
    created_at: datetime | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "show_global_exercises": self.show_global_exercises,
            "bodyweight": self.bodyweight,
        }


@dataclass(frozen=True)
class RequestContext:
    """The acting user for one request or command invocation.

    Passed explicitly into every service and repository call that depends
    on who is asking.
    """

    user_id: int
    show_global_exercises: bool = True
    # Added to the load of bodyweight exercises when estimating a 1RM
    bodyweight: float = 0.0

    @classmethod
    def for_user(cls, user: User) -> "RequestContext":
        return cls(
            user_id=user.id,
            show_global_exercises=user.show_global_exercises,
            bodyweight=user.bodyweight or 0.0,
        )

    def owns(self, user_id: int | None) -> bool:
        """True when a resource with this owner belongs to the acting user."""
        return user_id is not None and user_id == self.user_id
