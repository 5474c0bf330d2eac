"""
Pydantic models for user data.

Defines the payloads for logging in, registering, reading and updating
a profile, and for user tags.  Registration payloads are only checked
for types here; the format rules live in ``UserCreate.validate_fields``
and are enforced by the service so that every caller gets the same
``InvalidInputError``.
"""

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

USERNAME_RE = re.compile(r"[A-Za-z0-9_.\-]{3,32}")
EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
PHONE_RE = re.compile(r"\+?[0-9]{7,15}")
ALLOWED_SEXES = ("male", "female", "other")
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72


class LoginRequest(BaseModel):
    """Credentials for ``POST /users/login``.  ``login`` is the username."""

    login: str = Field(..., json_schema_extra={"example": "alice"})
    password: str = Field(..., json_schema_extra={"example": "correct horse"})


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserCreate(BaseModel):
    """Schema for registering a user.

    ``password`` is the plain text password; it is hashed before it
    reaches the store and never echoed back.
    """

    username: str = Field(..., json_schema_extra={"example": "alice"})
    password: str = Field(..., json_schema_extra={"example": "correct horse"})
    email: str = Field(..., json_schema_extra={"example": "alice@example.com"})
    phone_number: Optional[str] = Field(None, json_schema_extra={"example": "+48123456789"})
    age: Optional[int] = Field(None, json_schema_extra={"example": 30})
    sex: Optional[str] = Field(None, json_schema_extra={"example": "female"})

    def validate_fields(self) -> List[str]:
        """Return a list of problems; an empty list means the request is valid."""
        problems: List[str] = []
        if not USERNAME_RE.fullmatch(self.username):
            problems.append("username must be 3-32 characters of letters, digits, '_', '.' or '-'")
        if not PASSWORD_MIN_LENGTH <= len(self.password) <= PASSWORD_MAX_LENGTH:
            problems.append(
                f"password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters long"
            )
        if not EMAIL_RE.fullmatch(self.email):
            problems.append("email is not a valid address")
        if self.phone_number is not None and not PHONE_RE.fullmatch(self.phone_number):
            problems.append("phone_number must be 7-15 digits with an optional leading '+'")
        if self.age is not None and not 1 <= self.age <= 150:
            problems.append("age must be between 1 and 150")
        if self.sex is not None and self.sex not in ALLOWED_SEXES:
            problems.append(f"sex must be one of: {', '.join(ALLOWED_SEXES)}")
        return problems


class UserSettingsUpdate(BaseModel):
    """Schema for ``PUT /users/me/settings``.

    All profile fields are overwritten.  Omitted optional fields are
    stored as empty.  ``bmi`` is derived from ``weight`` (kg) and
    ``height`` (cm) when both are given and it is not supplied.
    """

    email: str = Field(..., json_schema_extra={"example": "alice@example.com"})
    name: Optional[str] = None
    surname: Optional[str] = None
    phone_number: Optional[str] = None
    age: Optional[int] = Field(None, ge=1, le=150)
    sex: Optional[Literal["male", "female", "other"]] = None
    weight: Optional[float] = Field(None, gt=0, json_schema_extra={"example": 62.5})
    height: Optional[float] = Field(None, gt=0, json_schema_extra={"example": 170})
    bmi: Optional[float] = Field(None, gt=0)

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        if not EMAIL_RE.fullmatch(value):
            raise ValueError("email is not a valid address")
        return value

    @field_validator("phone_number")
    @classmethod
    def phone_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not PHONE_RE.fullmatch(value):
            raise ValueError("phone_number must be 7-15 digits with an optional leading '+'")
        return value


class UserProfile(BaseModel):
    """Schema for reading a profile from the API."""

    username: str
    email: str
    name: Optional[str] = None
    surname: Optional[str] = None
    phone_number: Optional[str] = None
    age: Optional[int] = None
    sex: Optional[str] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    bmi: Optional[float] = None

    model_config = {
        "from_attributes": True,
    }


class UserTag(BaseModel):
    """A named, typed label attached to a user."""

    name: str = Field(..., min_length=1, max_length=64, json_schema_extra={"example": "vegan"})
    tag_type: str = Field(..., min_length=1, max_length=64, json_schema_extra={"example": "diet"})


class StatusResponse(BaseModel):
    status: str
