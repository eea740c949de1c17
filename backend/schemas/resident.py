# backend/schemas/resident.py
from datetime import date, datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional

from models.resident import Gender, Location, Occupation
from schemas.user import ORMBase, UserResponse


# Columns that may be omitted from a patch but never set to null
REQUIRED_FIELDS = (
    "full_name", "age", "gender", "phone_number", "house_number",
    "current_location", "occupation",
    "is_visible", "show_phone", "show_location", "show_return_date",
)


# Shared attributes for resident profiles
class ResidentBase(BaseModel):
    full_name: str = Field(min_length=1)
    age: int = Field(gt=0)
    gender: Gender
    phone_number: str = Field(min_length=1)
    house_number: str = Field(min_length=1)
    current_location: Location
    current_city: Optional[str] = None
    current_country: Optional[str] = None
    departure_date: Optional[date] = None
    expected_return_date: Optional[date] = None
    occupation: Occupation
    company: Optional[str] = None
    work_sector: Optional[str] = None
    work_details: Optional[str] = None
    is_visible: bool = True
    show_phone: bool = False
    show_location: bool = True
    show_return_date: bool = True


# Schema for creating a resident; the owner comes from the authenticated user
class ResidentCreate(ResidentBase):
    model_config = ConfigDict(extra="ignore")


# Schema for partial resident updates - all fields optional
class ResidentUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    full_name: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, gt=0)
    gender: Optional[Gender] = None
    phone_number: Optional[str] = Field(None, min_length=1)
    house_number: Optional[str] = Field(None, min_length=1)
    current_location: Optional[Location] = None
    current_city: Optional[str] = None
    current_country: Optional[str] = None
    departure_date: Optional[date] = None
    expected_return_date: Optional[date] = None
    occupation: Optional[Occupation] = None
    company: Optional[str] = None
    work_sector: Optional[str] = None
    work_details: Optional[str] = None
    is_visible: Optional[bool] = None
    show_phone: Optional[bool] = None
    show_location: Optional[bool] = None
    show_return_date: Optional[bool] = None

    @field_validator(*REQUIRED_FIELDS, mode="before")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("field may be omitted but not null")
        return v


class ResidentOut(ORMBase, ResidentBase):
    id: int
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Resident together with the owning account
class ResidentWithUser(ResidentOut):
    user: Optional[UserResponse] = None


# Account together with its resident profile (admin listing)
class UserWithResident(UserResponse):
    resident: Optional[ResidentOut] = None


# Optional listing criteria; all given criteria are combined with AND
class ResidentCriteria(BaseModel):
    location: Optional[Location] = None
    search: Optional[str] = None
    occupation: Optional[Occupation] = None
    returning: bool = False
    away_long: bool = False

    @field_validator("location", "occupation", "search", mode="before")
    @classmethod
    def _blank_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class LocationCount(BaseModel):
    location: Location
    count: int


class OccupationCount(BaseModel):
    occupation: Occupation
    count: int


class TotalStats(BaseModel):
    total: int
    in_village: int
    in_city: int
    abroad: int
