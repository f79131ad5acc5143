"""Caller identity.

A Session is built once by the outer layer (the CLI) and handed to whatever
needs an actor. The workflow never reads identity from ambient state.
"""

from __future__ import annotations

from dataclasses import dataclass

ROLE_USER = "user"
ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class Session:
    user_id: str
    user_name: str | None = None
    email: str | None = None
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def submitter_name(self) -> str:
        """Name stored as ``userName`` on a new complaint."""
        return self.user_name or "Unknown User"

    @property
    def actor_name(self) -> str:
        """Name recorded as ``updatedBy`` on status events."""
        return self.user_name or self.email or "Admin"
