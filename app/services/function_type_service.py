"""Function type service - Business logic for the bookable function type catalog"""

import logging
import re

from sqlalchemy.orm import Session

from ..config import FUNCTION_TYPE_NAME_MAX_LENGTH
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import FunctionType
from ..repositories import FunctionTypeRepository
from ..schemas import FunctionTypeCreate, FunctionTypeUpdate

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.lower())


def _validate_name(name: str | None) -> None:
    if not name or not name.strip():
        raise ValidationError("Function type name is required")
    if len(name) > FUNCTION_TYPE_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Function type name must be at most {FUNCTION_TYPE_NAME_MAX_LENGTH} characters"
        )


def _deleted_warning(deleted_count: int) -> str | None:
    return f"{deleted_count} rejected booking(s) were deleted" if deleted_count > 0 else None


class FunctionTypeService:
    """Service layer for function type business logic"""

    def __init__(self, db: Session, repo: FunctionTypeRepository | None = None):
        self.db = db
        self.repo = repo or FunctionTypeRepository()

    def list_function_types(self, include_inactive: bool = False) -> list[FunctionType]:
        return self.repo.find_all(self.db, include_inactive)

    def get_by_id(self, function_type_id: str) -> FunctionType:
        function_type = self.repo.get_by_id(self.db, function_type_id)
        if not function_type:
            raise NotFoundError(f"Function type with ID {function_type_id} not found")
        return function_type

    def booking_counts(self, function_type_id: str) -> dict:
        self.get_by_id(function_type_id)
        return self.repo.booking_counts(self.db, function_type_id)

    def create(self, data: FunctionTypeCreate) -> FunctionType:
        logger.info(f"Creating function type '{data.name}'")
        _validate_name(data.name)
        if data.price < 0:
            raise ValidationError("Price must not be negative")

        if self.repo.get_by_name(self.db, data.name):
            raise ConflictError(f'Function type with name "{data.name}" already exists', code="DUPLICATE_NAME")

        slug = data.slug or slugify(data.name)
        if self.repo.get_by_slug(self.db, slug):
            raise ConflictError(f'Function type with slug "{slug}" already exists', code="DUPLICATE_SLUG")

        function_type = self.repo.create(
            self.db,
            name=data.name,
            slug=slug,
            price=data.price,
            description=data.description,
            is_active=data.is_active,
        )
        logger.info(f"Function type created: {function_type.id}")
        return function_type

    def _guard_active_bookings(self, function_type_id: str, action: str) -> None:
        """Block a mutation while the function type has PENDING or ACCEPTED bookings."""
        if not self.repo.has_active_bookings(self.db, function_type_id):
            return
        counts = self.repo.booking_counts(self.db, function_type_id)
        logger.warning(
            f"Refusing to {action} function type {function_type_id}: "
            f"{counts['pending']} pending, {counts['accepted']} accepted bookings"
        )
        raise ConflictError(
            f"Cannot {action} function type. It has {counts['pending']} pending and "
            f"{counts['accepted']} accepted bookings. Please handle these bookings first.",
            code="ACTIVE_BOOKINGS",
            details={"booking_counts": counts},
        )

    def _purge_rejected(self, function_type_id: str) -> int:
        deleted_count = self.repo.delete_rejected_bookings(self.db, function_type_id)
        if deleted_count > 0:
            logger.info(f"Deleted {deleted_count} rejected bookings for function type {function_type_id}")
        return deleted_count

    def update(self, function_type_id: str, data: FunctionTypeUpdate) -> tuple[FunctionType, str | None]:
        """Update a function type. Returns the updated entry and an optional warning."""
        function_type = self.get_by_id(function_type_id)
        updates = data.model_dump(exclude_unset=True)

        if "name" in updates:
            _validate_name(updates["name"])
            existing = self.repo.get_by_name(self.db, updates["name"])
            if existing and existing.id != function_type_id:
                raise ConflictError(
                    f'Function type with name "{updates["name"]}" already exists', code="DUPLICATE_NAME"
                )

        if updates.get("slug") is not None:
            existing = self.repo.get_by_slug(self.db, updates["slug"])
            if existing and existing.id != function_type_id:
                raise ConflictError(
                    f'Function type with slug "{updates["slug"]}" already exists', code="DUPLICATE_SLUG"
                )

        self._guard_active_bookings(function_type_id, "update")
        deleted_count = self._purge_rejected(function_type_id)

        function_type = self.repo.update(self.db, function_type, **updates)
        logger.info(f"Function type updated: {function_type_id}")
        return function_type, _deleted_warning(deleted_count)

    def change_status(self, function_type_id: str, is_active: bool) -> tuple[FunctionType, str | None]:
        function_type = self.get_by_id(function_type_id)

        deleted_count = 0
        if not is_active:
            self._guard_active_bookings(function_type_id, "deactivate")
            deleted_count = self._purge_rejected(function_type_id)

        function_type = self.repo.update(self.db, function_type, is_active=is_active)
        logger.info(f"Function type {function_type_id} is_active={is_active}")
        return function_type, _deleted_warning(deleted_count)

    def delete(self, function_type_id: str) -> None:
        function_type = self.get_by_id(function_type_id)

        counts = self.repo.booking_counts(self.db, function_type_id)
        active = counts["pending"] + counts["accepted"]
        if active > 0:
            logger.warning(f"Refusing to delete function type {function_type_id}: {active} active bookings")
            raise ConflictError(
                f"Cannot delete function type. It has {active} active booking(s) (pending or accepted).",
                code="ACTIVE_BOOKINGS",
                details={"pending": counts["pending"], "accepted": counts["accepted"]},
            )

        self.repo.delete(self.db, function_type)
        logger.info(f"Function type deleted: {function_type_id}")
