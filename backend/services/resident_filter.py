# backend/services/resident_filter.py
from datetime import date
from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from models.resident import Resident, Location
from schemas.resident import ResidentCriteria
from utils.errors import ValidationError


def month_bounds(today: date):
    """First day of today's month and first day of the following month."""
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def one_year_before(today: date) -> date:
    try:
        return today.replace(year=today.year - 1)
    except ValueError:
        # 29 February has no counterpart in the previous year
        return today.replace(year=today.year - 1, day=28)


def escape_like(term: str) -> str:
    """Make % and _ in user input match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def parse_criteria(criteria: Union[ResidentCriteria, dict, None]) -> ResidentCriteria:
    if criteria is None:
        return ResidentCriteria()
    if isinstance(criteria, ResidentCriteria):
        return criteria
    try:
        return ResidentCriteria.model_validate(criteria)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e)


def build_query(db: Session, criteria: ResidentCriteria, today: Optional[date] = None):
    today = today or date.today()

    # Hidden profiles never show up in the directory listing
    query = (
        db.query(Resident)
        .options(joinedload(Resident.user))
        .filter(Resident.is_visible.is_(True))
    )

    if criteria.location:
        query = query.filter(Resident.current_location == criteria.location)

    if criteria.search:
        like = f"%{escape_like(criteria.search)}%"
        query = query.filter(or_(
            Resident.full_name.ilike(like, escape="\\"),
            Resident.phone_number.ilike(like, escape="\\"),
            Resident.company.ilike(like, escape="\\"),
        ))

    if criteria.occupation:
        query = query.filter(Resident.occupation == criteria.occupation)

    if criteria.returning:
        start, end = month_bounds(today)
        query = query.filter(
            Resident.expected_return_date >= start,
            Resident.expected_return_date < end,
        )

    if criteria.away_long:
        query = query.filter(
            Resident.departure_date < one_year_before(today),
            Resident.current_location != Location.village,
        )

    return query.order_by(Resident.created_at.desc(), Resident.id.desc())


def filter_residents(
    db: Session,
    criteria: Union[ResidentCriteria, dict, None] = None,
    today: Optional[date] = None,
) -> List[Resident]:
    return build_query(db, parse_criteria(criteria), today=today).all()
