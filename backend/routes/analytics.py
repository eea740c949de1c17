# backend/routes/analytics.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.resident import LocationCount, OccupationCount, TotalStats
from services.directory import DirectoryService
from utils.tokenJWT import get_current_user

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"]
)


# === Dashboard totals ===

@router.get("/stats", response_model=TotalStats)
def get_total_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return DirectoryService(db).total_stats()


# === Chart data ===

@router.get("/location", response_model=List[LocationCount])
def get_location_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return DirectoryService(db).location_stats()


@router.get("/occupation", response_model=List[OccupationCount])
def get_occupation_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return DirectoryService(db).occupation_stats()
