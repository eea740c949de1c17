from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Identity fields the provider is allowed to refresh on every login
class UserUpsert(BaseModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


# Output schema for user profile details
class UserResponse(ORMBase):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Signed assertion handed to the client by the identity provider
class IdentityAssertion(BaseModel):
    id_token: str


# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


# Schema for administrative role updates
class RoleUpdate(BaseModel):
    role: str
