"""
Quai Antique API — User Schemas (read/write projections)
==========================================================

What:  The JSON shapes accepted from and returned to clients for accounts.

Projections:
    Write (input):   RegistrationRequest, LoginRequest, ProfileUpdateRequest
                     → never declare passwordHash, apiToken or roles, so those
                       keys are dropped if a client sends them
    Read (output):   UserRead → never includes passwordHash or apiToken
    Auth result:     AuthResponse → {user, apiToken, roles}

Emptiness rules (empty email, empty password) are business rules enforced by
AuthService, not here, so that each maps to its own error type.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.common import CamelModel

# Longest password the hasher accepts; longer ones are a malformed payload
MAX_PASSWORD_LENGTH = 4096


class RegistrationRequest(CamelModel):
    first_name: Optional[str] = Field(default=None, max_length=64, examples=["Jean"])
    last_name: Optional[str] = Field(default=None, max_length=64, examples=["Dupont"])
    email: Optional[str] = Field(default=None, max_length=180, examples=["adresse@email.com"])
    password: Optional[str] = Field(
        default=None, max_length=MAX_PASSWORD_LENGTH, examples=["mot de passe"]
    )


class LoginRequest(CamelModel):
    username: Optional[str] = Field(default=None, examples=["adresse@email.com"])
    password: Optional[str] = Field(default=None, examples=["mot de passe"])


class ProfileUpdateRequest(CamelModel):
    """Partial update: absent, null and empty fields leave the stored value unchanged."""
    email: Optional[str] = Field(default=None, max_length=180)
    password: Optional[str] = Field(default=None, max_length=MAX_PASSWORD_LENGTH)
    first_name: Optional[str] = Field(default=None, max_length=64)
    last_name: Optional[str] = Field(default=None, max_length=64)


class AuthResponse(CamelModel):
    user: str = Field(description="User identifier (email)")
    api_token: str = Field(description="Bearer token for subsequent requests")
    roles: List[str] = Field(description="Granted role tags, always including ROLE_USER")


class UserRead(CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    roles: List[str]
    created_at: datetime
    updated_at: Optional[datetime] = None
