import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./venue_booking.db")

# Booking rules
MIN_DURATION_HOURS = float(os.getenv("MIN_DURATION_HOURS", "2"))
MAX_DURATION_HOURS = float(os.getenv("MAX_DURATION_HOURS", "12"))
WORKING_HOURS_START = os.getenv("WORKING_HOURS_START", "08:00")
WORKING_HOURS_END = os.getenv("WORKING_HOURS_END", "22:00")
# Days between today and the earliest bookable date (1 = tomorrow)
ADVANCE_BOOKING_DAYS = int(os.getenv("ADVANCE_BOOKING_DAYS", "1"))

# Pagination
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))

# Field limits
FUNCTION_TYPE_NAME_MAX_LENGTH = 100
CUSTOMER_NOTES_MAX_LENGTH = 500
ADMIN_NOTE_MAX_LENGTH = 1000

# Admin access - privileged routes are closed when unset
ADMIN_API_TOKEN = os.getenv("ADMIN_API_TOKEN")

# Email (SMTP)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
VENUE_NAME = os.getenv("VENUE_NAME", "Venue Bookings")

# Notification retry policy
NOTIFICATION_MAX_RETRIES = int(os.getenv("NOTIFICATION_MAX_RETRIES", "3"))
NOTIFICATION_RETRY_DELAY_SECONDS = float(os.getenv("NOTIFICATION_RETRY_DELAY_SECONDS", "2.0"))
