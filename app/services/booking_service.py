"""
Booking service - admission control and status changes for venue bookings.

The venue hosts at most one confirmed event per overlapping window. Only
ACCEPTED bookings reserve the calendar: PENDING requests never block a new
submission, but accepting one is re-checked against the confirmed schedule.

Admission is closed twice against check-then-act races: a striped per-date lock
serializes decisions inside this process, and the insert/accept statements
carry the overlap condition in SQL so another process cannot slip past it.
"""

import logging
import threading
from datetime import date, datetime
from typing import Callable

from sqlalchemy.orm import Session

from app import config
from app.business_rules import (
    find_conflicts,
    validate_event_date,
    validate_function_type_choice,
    validate_time_range,
    validate_working_hours,
)
from app.errors import ConflictError, NotFoundError, ValidationError
from app.models import Booking, BookingStatus, new_id
from app.repositories import BookingRepository, FunctionTypeRepository
from app.schemas import BookingCreate, BookingFilters
from app.services.notifications import Notification, NotificationKind, NullOutbox, booking_fields
from app.timeutils import format_time

logger = logging.getLogger(__name__)

# Fixed stripe of locks; dates sharing a stripe just serialize together.
DATE_LOCK_STRIPES = 64
_date_locks = [threading.Lock() for _ in range(DATE_LOCK_STRIPES)]


def _lock_for(event_date: date) -> threading.Lock:
    return _date_locks[event_date.toordinal() % DATE_LOCK_STRIPES]


def _conflict_error(conflicts: list[Booking]) -> ConflictError:
    return ConflictError(
        "The selected time slot conflicts with an existing booking",
        code="TIME_SLOT_CONFLICT",
        details={
            "conflicts": [
                {"id": b.id, "start_time": b.start_time, "end_time": b.end_time}
                for b in conflicts
            ]
        },
    )


class BookingService:
    """Service layer for booking admission and lifecycle"""

    def __init__(
        self,
        db: Session,
        repo: BookingRepository | None = None,
        function_types: FunctionTypeRepository | None = None,
        outbox=None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db = db
        self.repo = repo or BookingRepository()
        self.function_types = function_types or FunctionTypeRepository()
        self.outbox = outbox or NullOutbox()
        self.clock = clock or datetime.utcnow

    def _notify(self, kind: NotificationKind, recipient: str, booking: Booking) -> None:
        self.outbox.enqueue(Notification(recipient=recipient, kind=kind, booking=booking_fields(booking)))

    def get_conflicting_bookings(
        self,
        event_date: date,
        start_time: str,
        end_time: str,
        exclude_id: str | None = None,
    ) -> list[Booking]:
        """ACCEPTED bookings on ``event_date`` overlapping [start_time, end_time)."""
        accepted = self.repo.find_on_date(
            self.db, event_date, status=BookingStatus.ACCEPTED.value, exclude_id=exclude_id
        )
        return find_conflicts(start_time, end_time, accepted)

    def get_by_id(self, booking_id: str) -> Booking:
        booking = self.repo.get_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found", code="BOOKING_NOT_FOUND")
        return booking

    def create(self, data: BookingCreate) -> Booking:
        logger.info(f"Creating new booking for {data.customer_email}")

        validate_function_type_choice(data.function_type_id, data.function_type_custom)
        validate_event_date(data.event_date, self.clock())
        validate_time_range(data.start_time, data.end_time)
        validate_working_hours(data.start_time, data.end_time)
        start_time, end_time = format_time(data.start_time), format_time(data.end_time)

        if data.function_type_id:
            function_type = self.function_types.get_by_id(self.db, data.function_type_id)
            if not function_type or not function_type.is_active:
                raise ValidationError(
                    "Selected function type not found or inactive", code="FUNCTION_TYPE_NOT_FOUND"
                )
            label = function_type.name
            custom = None
        else:
            label = data.function_type_custom.strip()
            custom = label

        booking_id = new_id()
        values = {
            "id": booking_id,
            "customer_name": data.customer_name,
            "customer_email": data.customer_email,
            "customer_phone": data.customer_phone,
            "function_type_id": data.function_type_id or None,
            "function_type_custom": custom,
            "function_type_label": label,
            "event_date": data.event_date,
            "start_time": start_time,
            "end_time": end_time,
            "additional_notes": data.additional_notes,
        }

        with _lock_for(data.event_date):
            conflicts = self.get_conflicting_bookings(data.event_date, start_time, end_time)
            if not conflicts and not self.repo.insert_pending_if_free(self.db, values, self.clock()):
                # an acceptance landed between the read and the insert
                conflicts = self.get_conflicting_bookings(data.event_date, start_time, end_time)
            if conflicts:
                logger.warning(
                    f"Rejected booking on {data.event_date} {start_time}-{end_time}: "
                    f"conflicts with {[b.id for b in conflicts]}"
                )
                raise _conflict_error(conflicts)

        booking = self.get_by_id(booking_id)
        logger.info(f"Booking created successfully: {booking.id}")
        self._notify(NotificationKind.ADMIN_NEW_BOOKING, config.ADMIN_EMAIL, booking)
        return booking

    def check_availability(self, event_date: date, start_time: str, end_time: str) -> tuple[bool, list[Booking]]:
        validate_time_range(start_time, end_time)
        conflicts = self.get_conflicting_bookings(event_date, format_time(start_time), format_time(end_time))
        return not conflicts, conflicts

    def update_status(self, booking_id: str, status, admin_note: str | None = None) -> Booking:
        booking = self.get_by_id(booking_id)
        try:
            status = BookingStatus(status)
        except ValueError:
            raise ValidationError(
                f"Status must be one of {', '.join(s.value for s in BookingStatus)}", code="INVALID_STATUS"
            )

        if status == BookingStatus.PENDING:
            return self.reopen(booking_id, admin_note)

        previous = booking.status
        logger.info(f"Changing booking {booking_id} status {previous} -> {status.value}")

        if status == BookingStatus.ACCEPTED:
            booking = self._accept(booking, admin_note)
        else:
            booking = self.repo.update(
                self.db, booking, status=status.value, admin_note=admin_note, updated_at=self.clock()
            )

        if previous != booking.status:
            if booking.status == BookingStatus.ACCEPTED.value:
                self._notify(NotificationKind.CUSTOMER_ACCEPTED, booking.customer_email, booking)
            elif booking.status == BookingStatus.REJECTED.value:
                self._notify(NotificationKind.CUSTOMER_REJECTED, booking.customer_email, booking)
        return booking

    def _accept(self, booking: Booking, admin_note: str | None) -> Booking:
        with _lock_for(booking.event_date):
            accepted = self.repo.accept_if_free(self.db, booking.id, admin_note, self.clock())
            if not accepted:
                conflicts = self.get_conflicting_bookings(
                    booking.event_date, booking.start_time, booking.end_time, exclude_id=booking.id
                )
                logger.warning(f"Cannot accept booking {booking.id}: conflicts with {[b.id for b in conflicts]}")
                raise _conflict_error(conflicts)
        self.db.refresh(booking)
        return booking

    def reopen(self, booking_id: str, admin_note: str | None = None) -> Booking:
        """Move a booking back to PENDING. No notification is sent."""
        booking = self.get_by_id(booking_id)
        logger.info(f"Reopening booking {booking_id} (was {booking.status})")
        return self.repo.update(
            self.db,
            booking,
            status=BookingStatus.PENDING.value,
            admin_note=admin_note,
            updated_at=self.clock(),
        )

    def list_bookings(
        self, filters: BookingFilters | None = None, page: int = 1, limit: int | None = None
    ) -> tuple[list[Booking], int]:
        limit = limit or config.DEFAULT_PAGE_LIMIT
        if page < 1 or limit < 1 or limit > config.MAX_PAGE_LIMIT:
            raise ValidationError("Invalid pagination parameters")
        skip = (page - 1) * limit
        bookings = self.repo.find(self.db, filters, skip, limit)
        total = self.repo.count(self.db, filters)
        return bookings, total

    def upcoming(self, limit: int = 5) -> list[Booking]:
        statuses = [BookingStatus.PENDING.value, BookingStatus.ACCEPTED.value]
        return self.repo.find_upcoming(self.db, self.clock().date(), limit, statuses)

    def stats(self) -> dict:
        return self.repo.count_by_status(self.db)

    def delete(self, booking_id: str) -> None:
        booking = self.get_by_id(booking_id)
        # unconditional; the log line is the only trace of what was removed
        logger.info(
            f"Deleting booking {booking_id} ({booking.status}, {booking.event_date} "
            f"{booking.start_time}-{booking.end_time}, {booking.customer_email})"
        )
        self.repo.delete(self.db, booking)
