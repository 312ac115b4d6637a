"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Field names are snake_case in Python and camelCase on the wire
(``firstName``, ``expectedCTC``); the same camelCase keys are used in
the MongoDB user document.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Annotated, List, Optional
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from talent_portal.utils.sanitize import sanitize_payload


# ============================================================
# ENUMS
# ============================================================

class Designation(str, Enum):
    mr = "Mr"
    mrs = "Mrs"
    ms = "Ms"
    dr = "Dr"
    prof = "Prof"


class Gender(str, Enum):
    male = "Male"
    female = "Female"
    non_binary = "Non-binary"
    undisclosed = "Prefer not to say"
    other = "Other"


class NoticePeriod(str, Enum):
    yes = "Yes"
    no = "No"


# ============================================================
# FIELD RULES
# ============================================================

NAME_PATTERN = r"^[a-zA-Z\s'-]+$"
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-().]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]")
COMMON_PASSWORDS = frozenset(
    {"password", "password123", "123456", "qwerty", "abc123", "admin", "letmein"}
)
MAX_EMAIL_LENGTH = 254
# bcrypt ignores everything past 72 bytes of input
MAX_PASSWORD_BYTES = 72
MIN_AGE, MAX_AGE = 18, 100
MAX_CTC = 10_000_000

# Initials are accepted for first/last name; the display name needs two characters
PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50, pattern=NAME_PATTERN)]
CountryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
YearsOfExperience = Annotated[float, Field(ge=0, le=50)]
Compensation = Annotated[float, Field(ge=0, le=MAX_CTC)]
NoticeDays = Annotated[int, Field(ge=0, le=365)]
SkillName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]


def age_on(born: date, today: date) -> int:
    """Completed years between ``born`` and ``today``."""
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileFields(BaseModel):
    """
    Every mutable profile attribute with its per-field constraints.

    Cross-field rules (expected vs current CTC, notice period days) need the
    whole record and live in ``talent_portal.services.user_service``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = Field(None, min_length=2, max_length=50, pattern=NAME_PATTERN)
    designation: Optional[Designation] = None
    first_name: Optional[PersonName] = Field(None, alias="firstName")
    last_name: Optional[PersonName] = Field(None, alias="lastName")
    country: Optional[CountryName] = None
    phone: Optional[str] = None
    gender: Optional[Gender] = None
    dob: Optional[date] = None
    total_experience: Optional[YearsOfExperience] = Field(None, alias="totalExperience")
    current_ctc: Optional[Compensation] = Field(None, alias="currentCTC")
    expected_ctc: Optional[Compensation] = Field(None, alias="expectedCTC")
    notice_period: Optional[NoticePeriod] = Field(None, alias="noticePeriod")
    notice_period_days: Optional[NoticeDays] = Field(None, alias="noticePeriodDays")
    bio: Optional[str] = Field(None, max_length=500)
    skills: Optional[List[SkillName]] = None
    experience: Optional[str] = Field(None, max_length=1000)
    resume_url: Optional[str] = Field(None, alias="resumeUrl")
    avatar: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def sanitise_strings(cls, data):
        return sanitize_payload(data)

    @field_validator("name", mode="before")
    @classmethod
    def collapse_name_whitespace(cls, v):
        if isinstance(v, str):
            return re.sub(r"\s+", " ", v).strip()
        return v

    @field_validator("name")
    @classmethod
    def capitalise_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return re.sub(r"\b\w", lambda m: m.group().upper(), v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not PHONE_PATTERN.match(v):
            raise ValueError("Please provide a valid phone number")
        digits = re.sub(r"\D", "", v)
        if not 10 <= len(digits) <= 15:
            raise ValueError("Phone number must be between 10 and 15 digits")
        return v

    @field_validator("dob")
    @classmethod
    def validate_age(cls, v: Optional[date]) -> Optional[date]:
        if v is None:
            return v
        if not MIN_AGE <= age_on(v, date.today()) <= MAX_AGE:
            raise ValueError(f"Age must be between {MIN_AGE} and {MAX_AGE} years")
        return v

    @field_validator("total_experience")
    @classmethod
    def validate_experience_precision(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and round(v, 1) != v:
            raise ValueError("Experience must have at most 1 decimal place")
        return v

    @field_validator("resume_url", "avatar", mode="before")
    @classmethod
    def blank_url_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("resume_url", "avatar")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not is_http_url(v):
            raise ValueError("Please enter a valid URL (must start with http:// or https://)")
        return v

    def to_document(self) -> dict:
        """Only the fields the client actually sent, keyed as stored."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ProfileUpdate(ProfileFields):
    """PUT /profile body. Only provided fields are updated; unknown keys are dropped."""


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(ProfileFields):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    designation: Designation
    first_name: PersonName = Field(..., alias="firstName")
    last_name: PersonName = Field(..., alias="lastName")
    country: CountryName
    gender: Gender
    dob: date
    total_experience: YearsOfExperience = Field(..., alias="totalExperience")
    current_ctc: Compensation = Field(..., alias="currentCTC")
    expected_ctc: Compensation = Field(..., alias="expectedCTC")
    notice_period: NoticePeriod = Field(..., alias="noticePeriod")

    @field_validator("email", mode="before")
    @classmethod
    def check_email_length(cls, v):
        if isinstance(v, str) and len(v) > MAX_EMAIL_LENGTH:
            raise ValueError("Email address is too long")
        return v

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, "
                "one number, and one special character (@$!%*?&)"
            )
        if v.lower() in COMMON_PASSWORDS:
            raise ValueError("This password is too common. Please choose a more secure password")
        return v

    def to_document(self) -> dict:
        doc = super().to_document()
        doc.pop("password", None)
        if not doc.get("name"):
            doc["name"] = f"{self.first_name} {self.last_name}"
        return doc


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @model_validator(mode="before")
    @classmethod
    def sanitise_strings(cls, data):
        return sanitize_payload(data)

    @field_validator("email", mode="before")
    @classmethod
    def check_email_length(cls, v):
        if isinstance(v, str) and len(v) > MAX_EMAIL_LENGTH:
            raise ValueError("Email address is too long")
        return v

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


# ============================================================
# RESPONSE SCHEMAS
# ============================================================

class UserResponse(BaseModel):
    """A stored user minus the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: Optional[str] = None
    email: str
    designation: Optional[str] = None
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    country: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[date] = None
    total_experience: Optional[float] = Field(None, alias="totalExperience")
    current_ctc: Optional[float] = Field(None, alias="currentCTC")
    expected_ctc: Optional[float] = Field(None, alias="expectedCTC")
    notice_period: Optional[str] = Field(None, alias="noticePeriod")
    notice_period_days: Optional[int] = Field(None, alias="noticePeriodDays")
    bio: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    resume_url: Optional[str] = Field(None, alias="resumeUrl")
    avatar: Optional[str] = None
    is_email_verified: bool = Field(False, alias="isEmailVerified")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: Optional[UserResponse] = None
    token: Optional[str] = None


class SessionStatusResponse(BaseModel):
    success: bool = True
    message: str
    authenticated: bool
    user: Optional[UserResponse] = None


class ProfileResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[UserResponse] = None


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
