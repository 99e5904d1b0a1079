"""Function type repository - Database operations for the function type catalog"""

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import Booking, BookingStatus, FunctionType

ACTIVE_STATUSES = [BookingStatus.PENDING.value, BookingStatus.ACCEPTED.value]

class FunctionTypeRepository:
    """Repository for function type database operations"""

    @staticmethod
    def find_all(db: Session, include_inactive: bool = False) -> list[FunctionType]:
        query = db.query(FunctionType)
        if not include_inactive:
            query = query.filter(FunctionType.is_active.is_(True))
        return query.order_by(FunctionType.name.asc()).all()

    @staticmethod
    def get_by_id(db: Session, function_type_id: str) -> FunctionType | None:
        return db.query(FunctionType).filter(FunctionType.id == function_type_id).first()

    @staticmethod
    def get_by_name(db: Session, name: str) -> FunctionType | None:
        return db.query(FunctionType).filter(FunctionType.name == name).first()

    @staticmethod
    def get_by_slug(db: Session, slug: str) -> FunctionType | None:
        return db.query(FunctionType).filter(FunctionType.slug == slug).first()

    @staticmethod
    def create(db: Session, **data) -> FunctionType:
        function_type = FunctionType(**data)
        db.add(function_type)
        db.commit()
        db.refresh(function_type)
        return function_type

    @staticmethod
    def update(db: Session, function_type: FunctionType, **updates) -> FunctionType:
        for key, value in updates.items():
            if value is not None and hasattr(function_type, key):
                setattr(function_type, key, value)
        db.commit()
        db.refresh(function_type)
        return function_type

    @staticmethod
    def delete(db: Session, function_type: FunctionType) -> None:
        # Keep the denormalized label on bookings that outlive their function type
        db.query(Booking).filter(Booking.function_type_id == function_type.id).update(
            {Booking.function_type_id: None}, synchronize_session=False
        )
        db.delete(function_type)
        db.commit()

    @staticmethod
    def booking_counts(db: Session, function_type_id: str) -> dict:
        """Get booking counts for a function type grouped by status"""
        rows = (
            db.query(Booking.status, func.count(Booking.id))
            .filter(Booking.function_type_id == function_type_id)
            .group_by(Booking.status)
            .all()
        )
        counts = {status.value.lower(): 0 for status in BookingStatus}
        for status, count in rows:
            counts[status.lower()] = count
        counts["total"] = sum(counts.values())
        return counts

    @staticmethod
    def has_active_bookings(db: Session, function_type_id: str) -> bool:
        count = (
            db.query(func.count(Booking.id))
            .filter(Booking.function_type_id == function_type_id, Booking.status.in_(ACTIVE_STATUSES))
            .scalar()
        )
        return count > 0

    @staticmethod
    def delete_rejected_bookings(db: Session, function_type_id: str) -> int:
        """Delete all rejected bookings for a function type. Returns the number deleted."""
        deleted = (
            db.query(Booking)
            .filter(
                Booking.function_type_id == function_type_id,
                Booking.status == BookingStatus.REJECTED.value,
            )
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
