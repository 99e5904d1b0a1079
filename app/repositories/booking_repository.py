"""Booking repository - Database operations for bookings"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, bindparam, func, text
from sqlalchemy.orm import Session

from ..models import Booking, BookingStatus

# Overlap of [start, end) windows; times are zero-padded HH:MM so string order is time order.
_INSERT_IF_FREE = text("""
    INSERT INTO bookings (
        id, customer_name, customer_email, customer_phone,
        function_type_id, function_type_custom, function_type_label,
        event_date, start_time, end_time, additional_notes,
        status, created_at, updated_at
    )
    SELECT
        :id, :customer_name, :customer_email, :customer_phone,
        :function_type_id, :function_type_custom, :function_type_label,
        :event_date, :start_time, :end_time, :additional_notes,
        'PENDING', :now, :now
    WHERE NOT EXISTS (
        SELECT 1 FROM bookings b
        WHERE b.event_date = :event_date
          AND b.status = 'ACCEPTED'
          AND b.start_time < :end_time
          AND :start_time < b.end_time
    )
""").bindparams(bindparam("event_date", type_=Date), bindparam("now", type_=DateTime))

_ACCEPT_IF_FREE = text("""
    UPDATE bookings
    SET status = 'ACCEPTED',
        admin_note = COALESCE(:admin_note, admin_note),
        updated_at = :now
    WHERE id = :booking_id
      AND NOT EXISTS (
        SELECT 1 FROM bookings b
        WHERE b.id != :booking_id
          AND b.event_date = bookings.event_date
          AND b.status = 'ACCEPTED'
          AND b.start_time < bookings.end_time
          AND bookings.start_time < b.end_time
      )
""").bindparams(bindparam("now", type_=DateTime))


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_by_id(db: Session, booking_id: str) -> Booking | None:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def find_on_date(
        db: Session,
        event_date: date,
        status: str | None = None,
        exclude_id: str | None = None,
    ) -> list[Booking]:
        """Get all bookings on a calendar date, optionally narrowed to one status"""
        query = db.query(Booking).filter(Booking.event_date == event_date)
        if status:
            query = query.filter(Booking.status == status)
        if exclude_id:
            query = query.filter(Booking.id != exclude_id)
        return query.order_by(Booking.start_time.asc()).all()

    @staticmethod
    def insert_pending_if_free(db: Session, values: dict, now: datetime) -> bool:
        """
        Insert a PENDING booking unless an ACCEPTED booking on the same date
        overlaps its window. Single statement, so the check and the write
        cannot interleave with another writer.
        Returns True if the row was inserted.
        """
        params = dict(values, now=now)
        params.setdefault("function_type_id", None)
        params.setdefault("function_type_custom", None)
        params.setdefault("function_type_label", None)
        params.setdefault("additional_notes", None)
        res = db.execute(_INSERT_IF_FREE, params)
        db.commit()
        return res.rowcount == 1

    @staticmethod
    def accept_if_free(db: Session, booking_id: str, admin_note: str | None, now: datetime) -> bool:
        """
        Mark a booking ACCEPTED unless another ACCEPTED booking on its date
        overlaps it. Returns True if the row was updated.
        """
        res = db.execute(_ACCEPT_IF_FREE, {"booking_id": booking_id, "admin_note": admin_note, "now": now})
        db.commit()
        return res.rowcount == 1

    @staticmethod
    def update(db: Session, booking: Booking, **updates) -> Booking:
        for key, value in updates.items():
            if value is not None and hasattr(booking, key):
                setattr(booking, key, value)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def _apply_filters(query, filters):
        if filters is None:
            return query
        if filters.status:
            query = query.filter(Booking.status == BookingStatus(filters.status).value)
        if filters.event_date_gte:
            query = query.filter(Booking.event_date >= filters.event_date_gte)
        if filters.event_date_lte:
            query = query.filter(Booking.event_date <= filters.event_date_lte)
        if filters.customer_email:
            query = query.filter(Booking.customer_email == filters.customer_email)
        if filters.function_type_id:
            query = query.filter(Booking.function_type_id == filters.function_type_id)
        return query

    @staticmethod
    def find(db: Session, filters, skip: int, take: int) -> list[Booking]:
        query = BookingRepository._apply_filters(db.query(Booking), filters)
        return (
            query.order_by(Booking.event_date.asc(), Booking.start_time.asc())
            .offset(skip)
            .limit(take)
            .all()
        )

    @staticmethod
    def count(db: Session, filters) -> int:
        return BookingRepository._apply_filters(db.query(func.count(Booking.id)), filters).scalar()

    @staticmethod
    def find_upcoming(db: Session, today: date, limit: int, statuses: list[str]) -> list[Booking]:
        return (
            db.query(Booking)
            .filter(Booking.event_date >= today, Booking.status.in_(statuses))
            .order_by(Booking.event_date.asc(), Booking.start_time.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_by_status(db: Session) -> dict:
        rows = db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
        counts = {status.value.lower(): 0 for status in BookingStatus}
        for status, count in rows:
            counts[status.lower()] = count
        counts["total"] = sum(counts.values())
        return counts

    @staticmethod
    def delete(db: Session, booking: Booking) -> None:
        db.delete(booking)
        db.commit()
