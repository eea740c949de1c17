# backend/services/analytics.py
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.resident import Resident, Location, Occupation
from schemas.resident import LocationCount, OccupationCount, TotalStats


def _visible_counts_by(db: Session, column):
    rows = (
        db.query(column, func.count(Resident.id))
        .filter(Resident.is_visible.is_(True))
        .group_by(column)
        .all()
    )
    return {key: int(n) for key, n in rows}


def location_stats(db: Session) -> List[LocationCount]:
    counts = _visible_counts_by(db, Resident.current_location)
    # Enum order keeps the output stable; absent locations are left out
    return [LocationCount(location=loc, count=counts[loc]) for loc in Location if loc in counts]


def occupation_stats(db: Session) -> List[OccupationCount]:
    counts = _visible_counts_by(db, Resident.occupation)
    return [OccupationCount(occupation=occ, count=counts[occ]) for occ in Occupation if occ in counts]


def total_stats(db: Session) -> TotalStats:
    # Buckets and total come from the same grouped read
    counts = _visible_counts_by(db, Resident.current_location)
    return TotalStats(
        total=sum(counts.values()),
        in_village=counts.get(Location.village, 0),
        in_city=counts.get(Location.city, 0),
        abroad=counts.get(Location.abroad, 0),
    )
