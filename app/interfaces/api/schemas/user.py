"""Staff user schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.entities import Nationality, ResidenceStatus, UserRole


class StaffRead(BaseModel):
    id: int
    username: str
    full_name: str
    email: EmailStr
    role: UserRole
    is_active: bool
    nationality: Nationality
    residence_number: str | None
    residence_expiry_date: date | None
    residence_status: ResidenceStatus
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class StaffUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=120)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8)
    role: UserRole | None = None
    is_active: bool | None = None
    nationality: Nationality | None = None
    residence_number: str | None = Field(default=None, max_length=50)
    residence_expiry_date: date | None = None

    model_config = ConfigDict(extra="forbid")
