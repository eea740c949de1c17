# backend/models/users.py
import enum
from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship
from database import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


# Represents an account known from the identity provider, with its system role
class User(Base):
    __tablename__ = "users"

    # Identifier supplied by the identity provider (the "sub" claim)
    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=True, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    role = Column(String, nullable=False, default=Role.USER.value, server_default=Role.USER.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    resident = relationship(
        "Resident",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
