# livefeed/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for registration and login.
"""
from pydantic import BaseModel

class RegisterIn(BaseModel):
    """
    Request model for registration.
    Fields are optional at the schema level so that missing values turn into an
    ``invalid_input`` rejection instead of a framework validation error.
    """
    name: str | None = None
    email: str | None = None
    password: str | None = None

class LoginIn(BaseModel):
    """Request model for login."""
    email: str | None = None
    password: str | None = None

class IdentityOut(BaseModel):
    """
    Public projection of a user. Never contains the password hash.
    """
    id: str
    name: str
    email: str

    @classmethod
    def from_model(cls, user) -> "IdentityOut":
        return cls(id=str(user.id), name=user.name, email=user.email)

class LoginOut(BaseModel):
    """Successful login: bearer token plus the identity it was issued for."""
    token: str
    user: IdentityOut
