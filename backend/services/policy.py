# backend/services/policy.py
"""Authorization rules for directory mutations.

Every check takes the actor as it was loaded for the current request, so a
role change is honoured on the very next call.
"""
from dataclasses import dataclass
from typing import Optional

from models.users import Role
from utils.errors import ForbiddenError, InvalidOperationError


@dataclass(frozen=True)
class Actor:
    id: str
    role: str

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=user.id, role=user.role)


def is_admin(actor: Actor) -> bool:
    return (actor.role or "").lower() == Role.ADMIN.value


def can_modify(actor: Actor, owner_user_id: Optional[str]) -> bool:
    """Admins may modify any resident, everyone else only their own."""
    return is_admin(actor) or (owner_user_id is not None and actor.id == owner_user_id)


def can_manage_users(actor: Actor) -> bool:
    return is_admin(actor)


def ensure_can_modify(actor: Actor, owner_user_id: Optional[str]) -> None:
    if not can_modify(actor, owner_user_id):
        raise ForbiddenError("Not authorized to modify this resident")


def ensure_can_manage_users(actor: Actor) -> None:
    if not can_manage_users(actor):
        raise ForbiddenError("Admin access required")


def ensure_not_self(actor_id: str, target_user_id: str) -> None:
    if actor_id == target_user_id:
        raise InvalidOperationError("You cannot delete your own account")
