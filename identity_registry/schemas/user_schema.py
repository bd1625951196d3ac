from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import date, datetime, time, timezone
import re

MOBILE_PATTERN = re.compile(r"^[0-9]{10}$")
AADHAAR_PATTERN = re.compile(r"^[0-9]{12}$")
PAN_PATTERN = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]{1}$")


def _strip(v):
    return v.strip() if isinstance(v, str) else v


def _check_mobile(v: str, label: str) -> str:
    if not MOBILE_PATTERN.match(v):
        raise ValueError(f"{label} must be a 10-digit number")
    return v


def _check_past_date(v: date) -> date:
    if datetime.combine(v, time.min, tzinfo=timezone.utc) >= datetime.now(timezone.utc):
        raise ValueError("Date of birth must be a valid date in the past")
    return v


class UserCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    primary_mobile: str
    secondary_mobile: Optional[str] = None
    aadhaar_number: str
    pan_number: str
    date_of_birth: date
    place_of_birth: str = Field(..., min_length=1, max_length=255)
    current_address: str = Field(..., min_length=1, max_length=500)
    permanent_address: str = Field(..., min_length=1, max_length=500)
    created_by: Optional[str] = Field(None, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        v = _strip(v)
        return v.lower() if isinstance(v, str) else v

    @field_validator("pan_number", mode="before")
    @classmethod
    def normalize_pan(cls, v):
        v = _strip(v)
        return v.upper() if isinstance(v, str) else v

    @field_validator("primary_mobile")
    @classmethod
    def validate_primary_mobile(cls, v: str) -> str:
        return _check_mobile(v, "Primary mobile")

    @field_validator("secondary_mobile")
    @classmethod
    def validate_secondary_mobile(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_mobile(v, "Secondary mobile")

    @field_validator("aadhaar_number")
    @classmethod
    def validate_aadhaar(cls, v: str) -> str:
        if not AADHAAR_PATTERN.match(v):
            raise ValueError("Aadhaar must be a 12-digit number")
        return v

    @field_validator("pan_number")
    @classmethod
    def validate_pan(cls, v: str) -> str:
        if not PAN_PATTERN.match(v):
            raise ValueError("Invalid PAN format. Expected: ABCDE1234F")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: date) -> date:
        return _check_past_date(v)


class UserUpdateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    primary_mobile: Optional[str] = None
    secondary_mobile: Optional[str] = None
    date_of_birth: Optional[date] = None
    place_of_birth: Optional[str] = Field(None, min_length=1, max_length=255)
    current_address: Optional[str] = Field(None, min_length=1, max_length=500)
    permanent_address: Optional[str] = Field(None, min_length=1, max_length=500)
    updated_by: Optional[str] = Field(None, max_length=100)

    @field_validator(
        "name", "email", "primary_mobile", "date_of_birth",
        "place_of_birth", "current_address", "permanent_address",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        v = _strip(v)
        return v.lower() if isinstance(v, str) else v

    @field_validator("primary_mobile")
    @classmethod
    def validate_primary_mobile(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_mobile(v, "Primary mobile")

    @field_validator("secondary_mobile")
    @classmethod
    def validate_secondary_mobile(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_mobile(v, "Secondary mobile")

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: Optional[date]) -> Optional[date]:
        if v is None:
            return v
        return _check_past_date(v)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    primary_mobile: str
    secondary_mobile: Optional[str] = None
    aadhaar_number: str
    pan_number: str
    date_of_birth: date
    age: int
    place_of_birth: str
    current_address: str
    permanent_address: str
    is_deleted: bool
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    version: int
    created_at: datetime
    updated_at: datetime


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class UserListResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    data: List[UserResponse]
    meta: PaginationMeta
