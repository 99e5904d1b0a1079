import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.db import Base


def new_id() -> str:
    return str(uuid.uuid4())


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class FunctionType(Base):
    __tablename__ = "function_types"
    id = Column(String, primary_key=True, default=new_id)
    name = Column(String(100), nullable=False, unique=True)
    slug = Column(String(120), nullable=False, unique=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    description = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    bookings = relationship("Booking", back_populates="function_type")

    __table_args__ = (
        CheckConstraint("price >= 0", name="function_type_price_non_negative"),
    )


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(String, primary_key=True, default=new_id)
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String, nullable=False, index=True)
    customer_phone = Column(String(20), nullable=False)
    function_type_id = Column(String, ForeignKey("function_types.id"), nullable=True, index=True)
    function_type_custom = Column(String(100))
    function_type_label = Column(String(100))
    event_date = Column(Date, nullable=False)
    # zero-padded HH:MM, so string order is time order
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    additional_notes = Column(Text)
    admin_note = Column(Text)
    status = Column(String(10), nullable=False, default=BookingStatus.PENDING.value)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    function_type = relationship("FunctionType", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("status in ('PENDING','ACCEPTED','REJECTED')", name="booking_status_valid"),
        CheckConstraint("end_time > start_time", name="booking_time_valid"),
        Index("ix_bookings_event_date_status", "event_date", "status"),
    )
