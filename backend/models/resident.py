# backend/models/resident.py
import enum
from sqlalchemy import (
    Column, Integer, String, Text, Date, Boolean, DateTime, ForeignKey,
    CheckConstraint, Enum, func,
)
from sqlalchemy.orm import relationship
from database import Base


# Member names equal their values so plain strings bind against these columns
class Gender(str, enum.Enum):
    male = "male"
    female = "female"
    other = "other"


class Location(str, enum.Enum):
    village = "village"
    city = "city"
    abroad = "abroad"


class Occupation(str, enum.Enum):
    student = "student"
    job = "job"
    business = "business"
    farming = "farming"
    unemployed = "unemployed"


# Model Resident
# Profile of one person from the village: where they live now, what they do,
# and which parts of the profile other residents may see.
class Resident(Base):
    __tablename__ = "residents"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=True,
        index=True,
    )

    full_name = Column(String, nullable=False, index=True)
    age = Column(Integer, CheckConstraint("age > 0"), nullable=False)
    gender = Column(Enum(Gender), nullable=False)
    phone_number = Column(String, nullable=False)
    house_number = Column(String, nullable=False)  # House number / tola

    # Current whereabouts; city/country are only meaningful for the matching location
    current_location = Column(Enum(Location), nullable=False, index=True)
    current_city = Column(String, nullable=True)
    current_country = Column(String, nullable=True)
    departure_date = Column(Date, nullable=True)
    expected_return_date = Column(Date, nullable=True)

    # Work
    occupation = Column(Enum(Occupation), nullable=False, index=True)
    company = Column(String, nullable=True)
    work_sector = Column(String, nullable=True)
    work_details = Column(Text, nullable=True)

    # Privacy settings
    is_visible = Column(Boolean, nullable=False, default=True, index=True)
    show_phone = Column(Boolean, nullable=False, default=False)
    show_location = Column(Boolean, nullable=False, default=True)
    show_return_date = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="resident")
