import math
from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from app.auth import require_admin
from app.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from app.db import get_db
from app.models import BookingStatus
from app.schemas import BookingFilters, BookingOut, BookingReopen, BookingStatusUpdate
from app.services.booking_service import BookingService
from app.services.notifications import BackgroundTaskOutbox, NotificationDispatcher, get_dispatcher

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("")
def list_bookings(
    status: BookingStatus | None = Query(default=None),
    event_date_gte: date | None = Query(default=None),
    event_date_lte: date | None = Query(default=None),
    customer_email: str | None = Query(default=None),
    function_type_id: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    db: Session = Depends(get_db),
):
    filters = BookingFilters(
        status=status,
        event_date_gte=event_date_gte,
        event_date_lte=event_date_lte,
        customer_email=customer_email,
        function_type_id=function_type_id,
    )
    bookings, total = BookingService(db).list_bookings(filters, page, limit)
    return {
        "bookings": [BookingOut.model_validate(b) for b in bookings],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit),
        },
    }


@router.get("/upcoming")
def upcoming_bookings(limit: int = Query(default=5, ge=1, le=MAX_PAGE_LIMIT), db: Session = Depends(get_db)):
    return {"bookings": [BookingOut.model_validate(b) for b in BookingService(db).upcoming(limit)]}


@router.get("/stats")
def booking_stats(db: Session = Depends(get_db)):
    return BookingService(db).stats()


@router.get("/{booking_id}")
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    return BookingOut.model_validate(BookingService(db).get_by_id(booking_id))


@router.patch("/{booking_id}")
def update_booking_status(
    booking_id: str,
    body: BookingStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """
    Set a booking's status. Accepting re-checks the confirmed schedule and
    returns 409 if another ACCEPTED booking overlaps. The customer is
    notified after the response on a move into ACCEPTED or REJECTED.
    """
    service = BookingService(db, outbox=BackgroundTaskOutbox(background_tasks, dispatcher))
    booking = service.update_status(booking_id, body.status, body.admin_note)
    return {"message": "Booking status updated successfully", "booking": BookingOut.model_validate(booking)}


@router.post("/{booking_id}/reopen")
def reopen_booking(booking_id: str, body: BookingReopen | None = None, db: Session = Depends(get_db)):
    admin_note = body.admin_note if body else None
    booking = BookingService(db).reopen(booking_id, admin_note)
    return {"message": "Booking reopened", "booking": BookingOut.model_validate(booking)}


@router.delete("/{booking_id}")
def delete_booking(booking_id: str, db: Session = Depends(get_db)):
    BookingService(db).delete(booking_id)
    return {"message": "Booking deleted successfully"}
