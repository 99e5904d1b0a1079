"""Plain-text email templates keyed by notification kind."""

from app.config import VENUE_NAME


def _details(booking: dict) -> str:
    lines = [
        f"Booking reference: {booking.get('id')}",
        f"Function type: {booking.get('function_type_label') or 'N/A'}",
        f"Event date: {booking.get('event_date')}",
        f"Time: {booking.get('start_time')} - {booking.get('end_time')}",
    ]
    return "\n".join(lines)


def admin_new_booking(booking: dict) -> tuple[str, str]:
    subject = f"New Booking Request - {booking.get('customer_name')}"
    body = (
        "You have received a new booking request.\n\n"
        f"Customer: {booking.get('customer_name')}\n"
        f"Email: {booking.get('customer_email')}\n"
        f"Phone: {booking.get('customer_phone')}\n"
        f"{_details(booking)}\n"
    )
    if booking.get("additional_notes"):
        body += f"Notes: {booking['additional_notes']}\n"
    body += "\nPlease log in to the admin dashboard to accept or reject this booking."
    return subject, body


def customer_accepted(booking: dict) -> tuple[str, str]:
    subject = f"Booking Confirmed - {VENUE_NAME}"
    body = (
        f"Dear {booking.get('customer_name')},\n\n"
        f"We are pleased to confirm your booking at {VENUE_NAME}.\n\n"
        f"{_details(booking)}\n"
    )
    if booking.get("admin_note"):
        body += f"Note from us: {booking['admin_note']}\n"
    body += "\nWe look forward to hosting your event!"
    return subject, body


def customer_rejected(booking: dict) -> tuple[str, str]:
    subject = f"Booking Update - {VENUE_NAME}"
    body = (
        f"Dear {booking.get('customer_name')},\n\n"
        "Unfortunately we are unable to accommodate your booking request.\n\n"
        f"{_details(booking)}\n"
    )
    if booking.get("admin_note"):
        body += f"Reason: {booking['admin_note']}\n"
    body += "\nPlease feel free to choose another date or time."
    return subject, body


TEMPLATES = {
    "admin_new_booking": admin_new_booking,
    "customer_accepted": customer_accepted,
    "customer_rejected": customer_rejected,
}


def render(kind: str, booking: dict) -> tuple[str, str]:
    return TEMPLATES[kind](booking)
