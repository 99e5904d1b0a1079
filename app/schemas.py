"""Request and response schemas for the HTTP layer."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from app.config import ADMIN_NOTE_MAX_LENGTH, CUSTOMER_NOTES_MAX_LENGTH, FUNCTION_TYPE_NAME_MAX_LENGTH
from app.models import BookingStatus

TIME_REGEX = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"
PHONE_REGEX = r"^[0-9+\s()-]+$"


# ----------------------------
# Bookings
# ----------------------------
class BookingCreate(BaseModel):
    customer_name: str = Field(min_length=2, max_length=100)
    customer_email: EmailStr
    customer_phone: str = Field(min_length=10, max_length=15, pattern=PHONE_REGEX)
    function_type_id: str | None = None
    function_type_custom: str | None = Field(default=None, max_length=100)
    event_date: date
    start_time: str = Field(pattern=TIME_REGEX)
    end_time: str = Field(pattern=TIME_REGEX)
    additional_notes: str | None = Field(default=None, max_length=CUSTOMER_NOTES_MAX_LENGTH)

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("customer_email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()

    @model_validator(mode="after")
    def one_function_type(self):
        if bool(self.function_type_id) == bool(self.function_type_custom):
            raise ValueError("Exactly one of function_type_id or function_type_custom must be provided")
        return self


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    admin_note: str | None = Field(default=None, max_length=ADMIN_NOTE_MAX_LENGTH)


class BookingReopen(BaseModel):
    admin_note: str | None = Field(default=None, max_length=ADMIN_NOTE_MAX_LENGTH)


class BookingFilters(BaseModel):
    status: BookingStatus | None = None
    event_date_gte: date | None = None
    event_date_lte: date | None = None
    customer_email: str | None = None
    function_type_id: str | None = None


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    function_type_id: str | None
    function_type_custom: str | None
    function_type_label: str | None
    event_date: date
    start_time: str
    end_time: str
    additional_notes: str | None
    admin_note: str | None
    status: BookingStatus
    created_at: datetime
    updated_at: datetime


class ConflictOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    start_time: str
    end_time: str


# ----------------------------
# Function types
# ----------------------------
class FunctionTypeCreate(BaseModel):
    name: str = Field(max_length=FUNCTION_TYPE_NAME_MAX_LENGTH)
    price: Decimal = Field(ge=0)
    slug: str | None = Field(default=None, max_length=120)
    description: str | None = None
    is_active: bool = True


class FunctionTypeUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=FUNCTION_TYPE_NAME_MAX_LENGTH)
    slug: str | None = Field(default=None, max_length=120)
    price: Decimal | None = Field(default=None, ge=0)
    description: str | None = None
    is_active: bool | None = None


class FunctionTypeStatus(BaseModel):
    is_active: bool


class FunctionTypeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    price: Decimal
    description: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
