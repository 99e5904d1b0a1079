from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas import BookingCreate, BookingOut, ConflictOut
from app.services.booking_service import BookingService
from app.services.notifications import BackgroundTaskOutbox, NotificationDispatcher, get_dispatcher

router = APIRouter()


@router.post("", status_code=201)
def create_booking(
    body: BookingCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """
    Submit a booking request. It is stored as PENDING unless an ACCEPTED
    booking on the same date overlaps the requested window (409).
    """
    service = BookingService(db, outbox=BackgroundTaskOutbox(background_tasks, dispatcher))
    booking = service.create(body)
    return BookingOut.model_validate(booking)


@router.get("/availability")
def check_availability(
    event_date: date = Query(...),
    start_time: str = Query(...),
    end_time: str = Query(...),
    db: Session = Depends(get_db),
):
    available, conflicts = BookingService(db).check_availability(event_date, start_time, end_time)
    return {
        "event_date": event_date,
        "start_time": start_time,
        "end_time": end_time,
        "available": available,
        "conflicts": [ConflictOut.model_validate(b) for b in conflicts],
    }
