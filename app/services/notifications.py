"""
Booking notifications.

The booking engine only decides *when* a notification is due and hands a
``Notification`` to an outbox. Delivery happens later through
``NotificationDispatcher``, which retries with increasing delay and gives up
with a log line. Delivery errors never reach the caller of the engine.
"""

import enum
import logging
import time
from typing import Callable

from fastapi import BackgroundTasks
from pydantic import BaseModel

from app import config
from app.email_service import send_email
from app.email_templates import render

logger = logging.getLogger(__name__)


class NotificationKind(str, enum.Enum):
    ADMIN_NEW_BOOKING = "admin_new_booking"
    CUSTOMER_ACCEPTED = "customer_accepted"
    CUSTOMER_REJECTED = "customer_rejected"


class Notification(BaseModel):
    recipient: str
    kind: NotificationKind
    booking: dict


def booking_fields(booking) -> dict:
    return {
        "id": booking.id,
        "customer_name": booking.customer_name,
        "customer_email": booking.customer_email,
        "customer_phone": booking.customer_phone,
        "function_type_label": booking.function_type_label,
        "event_date": booking.event_date.isoformat(),
        "start_time": booking.start_time,
        "end_time": booking.end_time,
        "additional_notes": booking.additional_notes,
        "admin_note": booking.admin_note,
        "status": booking.status,
    }


class NotificationDispatcher:
    def __init__(
        self,
        sender: Callable[[str, str, str], bool] = send_email,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.sender = sender
        self.max_retries = max_retries if max_retries is not None else config.NOTIFICATION_MAX_RETRIES
        self.retry_delay = retry_delay if retry_delay is not None else config.NOTIFICATION_RETRY_DELAY_SECONDS
        self.sleep = sleep

    def deliver(self, notification: Notification) -> bool:
        """Send one notification. Returns True if it was delivered; never raises."""
        kind = NotificationKind(notification.kind).value
        booking_id = notification.booking.get("id")
        try:
            subject, body = render(kind, notification.booking)
        except Exception as e:
            logger.error(f"Failed to render {kind} notification for booking {booking_id}: {e}")
            return False

        for attempt in range(1, self.max_retries + 1):
            try:
                sent = self.sender(notification.recipient, subject, body)
                if sent:
                    logger.info(f"Sent {kind} notification for booking {booking_id} to {notification.recipient}")
                return bool(sent)
            except Exception as e:
                logger.warning(f"{kind} notification attempt {attempt} failed for booking {booking_id}: {e}")
                if attempt < self.max_retries:
                    self.sleep(self.retry_delay * attempt)

        logger.error(
            f"Giving up on {kind} notification for booking {booking_id} after {self.max_retries} attempts"
        )
        return False


class BackgroundTaskOutbox:
    """Defers delivery to FastAPI background tasks, run after the response is sent."""

    def __init__(self, background_tasks: BackgroundTasks, dispatcher: NotificationDispatcher):
        self.background_tasks = background_tasks
        self.dispatcher = dispatcher

    def enqueue(self, notification: Notification) -> None:
        self.background_tasks.add_task(self.dispatcher.deliver, notification)


class NullOutbox:
    def enqueue(self, notification: Notification) -> None:
        logger.debug(f"Dropping {notification.kind} notification (no outbox configured)")


_dispatcher = NotificationDispatcher()


def get_dispatcher() -> NotificationDispatcher:
    return _dispatcher
