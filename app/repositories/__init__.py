from .booking_repository import BookingRepository
from .function_type_repository import FunctionTypeRepository

__all__ = ["BookingRepository", "FunctionTypeRepository"]
