# backend/services/directory.py
import logging
from datetime import date
from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from database import atomic
from models.resident import Resident
from models.users import User, Role
from schemas.resident import ResidentCreate, ResidentUpdate, ResidentCriteria
from schemas.user import UserUpsert
from services import analytics, policy
from services.policy import Actor
from services.resident_filter import filter_residents
from utils.errors import ValidationError, NotFoundError, InvalidOperationError

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Name", "Age", "Gender", "Phone", "House Number", "Current Location",
    "City", "Country", "Departure Date", "Expected Return", "Occupation", "Company",
]


def _validate(schema, data):
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e)


def _quoted(value) -> str:
    # Embedded quotes are written as-is
    return f'"{value or ""}"'


def _plain(value) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(getattr(value, "value", value))


class DirectoryService:
    """
    Single entry point for reading and changing the directory.

    Mutations on residents go through the authorization policy; account
    administration assumes the caller already checked for the admin role.
    """

    def __init__(self, db: Session):
        self.db = db

    # ======================================================
    # Residents
    # ======================================================

    def create_resident(self, user_id: str, data: Union[ResidentCreate, dict]) -> Resident:
        payload = _validate(ResidentCreate, data)
        resident = Resident(user_id=user_id, **payload.model_dump())
        self.db.add(resident)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # Only the one-profile-per-user rule is a domain error
            if self.get_resident_by_user(user_id) is not None:
                raise InvalidOperationError("A resident profile already exists for this user")
            raise
        self.db.refresh(resident)
        logger.info("Resident %s created for user %s", resident.id, user_id)
        return resident

    def get_resident(self, resident_id: int) -> Resident:
        resident = (
            self.db.query(Resident)
            .options(joinedload(Resident.user))
            .filter(Resident.id == resident_id)
            .first()
        )
        if resident is None:
            raise NotFoundError("Resident not found")
        return resident

    def get_resident_by_user(self, user_id: str) -> Optional[Resident]:
        return (
            self.db.query(Resident)
            .options(joinedload(Resident.user))
            .filter(Resident.user_id == user_id)
            .first()
        )

    def list_residents(self, criteria: Union[ResidentCriteria, dict, None] = None) -> List[Resident]:
        return filter_residents(self.db, criteria)

    def update_resident(self, resident_id: int, actor: Actor, patch: Union[ResidentUpdate, dict]) -> Resident:
        resident = self.get_resident(resident_id)
        policy.ensure_can_modify(actor, resident.user_id)

        changes = _validate(ResidentUpdate, patch).model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(resident, field, value)
        resident.updated_at = func.now()

        self.db.commit()
        self.db.refresh(resident)
        logger.info("Resident %s updated by %s (%s)", resident.id, actor.id, ", ".join(sorted(changes)))
        return resident

    def delete_resident(self, resident_id: int, actor: Actor) -> None:
        resident = self.get_resident(resident_id)
        policy.ensure_can_modify(actor, resident.user_id)

        self.db.delete(resident)
        self.db.commit()
        logger.info("Resident %s deleted by %s", resident_id, actor.id)

    # ======================================================
    # Analytics
    # ======================================================

    def location_stats(self):
        return analytics.location_stats(self.db)

    def occupation_stats(self):
        return analytics.occupation_stats(self.db)

    def total_stats(self):
        return analytics.total_stats(self.db)

    # ======================================================
    # Users
    # ======================================================

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def upsert_user(self, data: Union[UserUpsert, dict]) -> User:
        payload = _validate(UserUpsert, data)
        user = self.get_user(payload.id)
        if user is None:
            user = User(id=payload.id, role=Role.USER.value)
            self.db.add(user)

        # Role survives re-login unchanged
        user.email = payload.email
        user.first_name = payload.first_name
        user.last_name = payload.last_name
        user.profile_image_url = payload.profile_image_url
        user.updated_at = func.now()

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise InvalidOperationError("Email already registered")
        self.db.refresh(user)
        return user

    def list_all_users(self) -> List[User]:
        return (
            self.db.query(User)
            .options(joinedload(User.resident))
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    def update_user_role(self, target_user_id: str, new_role: str) -> User:
        try:
            role = Role(getattr(new_role, "value", new_role))
        except ValueError:
            raise ValidationError(
                "Invalid role",
                errors=[{"loc": ["role"], "msg": "role must be 'admin' or 'user'", "type": "enum"}],
            )

        user = self.get_user(target_user_id)
        if user is None:
            raise NotFoundError("User not found")

        user.role = role.value
        user.updated_at = func.now()
        self.db.commit()
        self.db.refresh(user)
        logger.info("User %s role set to %s", user.id, user.role)
        return user

    def delete_user(self, target_user_id: str, actor_id: str) -> None:
        policy.ensure_not_self(actor_id, target_user_id)

        if self.get_user(target_user_id) is None:
            raise NotFoundError("User not found")

        with atomic(self.db):
            # Profile goes first so the foreign key never dangles
            self.db.query(Resident).filter(Resident.user_id == target_user_id).delete(synchronize_session=False)
            self.db.query(User).filter(User.id == target_user_id).delete(synchronize_session=False)
        self.db.expire_all()
        logger.info("User %s deleted by %s", target_user_id, actor_id)

    # ======================================================
    # Export
    # ======================================================

    def export_residents_csv(self) -> str:
        residents = (
            self.db.query(Resident)
            .order_by(Resident.created_at.desc(), Resident.id.desc())
            .all()
        )
        lines = [",".join(CSV_HEADERS)]
        for r in residents:
            lines.append(",".join([
                _quoted(r.full_name),
                _plain(r.age),
                _plain(r.gender),
                _quoted(r.phone_number),
                _quoted(r.house_number),
                _plain(r.current_location),
                _quoted(r.current_city),
                _quoted(r.current_country),
                _plain(r.departure_date),
                _plain(r.expected_return_date),
                _plain(r.occupation),
                _quoted(r.company),
            ]))
        return "\n".join(lines)
