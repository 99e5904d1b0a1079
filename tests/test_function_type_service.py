from decimal import Decimal

import pytest

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models import Booking
from app.schemas import FunctionTypeCreate, FunctionTypeUpdate
from app.services.function_type_service import FunctionTypeService, slugify


@pytest.fixture
def service(test_db_session):
    return FunctionTypeService(test_db_session)


def test_slugify_collapses_whitespace():
    assert slugify("Family  Function\tDay") == "family-function-day"


def test_create_defaults(service):
    ft = service.create(FunctionTypeCreate(name="Birthday Party", price=Decimal("150.50")))
    assert ft.slug == "birthday-party"
    assert ft.is_active is True
    assert ft.price == Decimal("150.50")


def test_create_rejects_empty_name(service):
    with pytest.raises(ValidationError):
        service.create(FunctionTypeCreate(name="   ", price=0))


def test_create_rejects_duplicate_name_and_slug(service):
    service.create(FunctionTypeCreate(name="Wedding", price=0))
    with pytest.raises(ConflictError) as exc:
        service.create(FunctionTypeCreate(name="Wedding", price=10))
    assert exc.value.code == "DUPLICATE_NAME"
    with pytest.raises(ConflictError) as exc:
        service.create(FunctionTypeCreate(name="Wedding Day", slug="wedding", price=10))
    assert exc.value.code == "DUPLICATE_SLUG"


def test_list_orders_by_name_and_hides_inactive(service, make_function_type):
    make_function_type(name="Party")
    make_function_type(name="Conference", is_active=False)
    make_function_type(name="Anniversary")
    assert [ft.name for ft in service.list_function_types()] == ["Anniversary", "Party"]
    assert [ft.name for ft in service.list_function_types(include_inactive=True)] == [
        "Anniversary",
        "Conference",
        "Party",
    ]


def test_get_by_id_not_found(service):
    with pytest.raises(NotFoundError):
        service.get_by_id("missing")


def test_update_blocked_by_live_bookings(service, make_function_type, make_booking):
    ft = make_function_type(name="Party")
    make_booking(function_type=ft, status="PENDING")
    make_booking(function_type=ft, status="ACCEPTED", start_time="14:00", end_time="16:00")

    with pytest.raises(ConflictError) as exc:
        service.update(ft.id, FunctionTypeUpdate(name="Big Party"))
    assert exc.value.code == "ACTIVE_BOOKINGS"
    assert exc.value.details["booking_counts"]["pending"] == 1
    assert exc.value.details["booking_counts"]["accepted"] == 1
    assert service.get_by_id(ft.id).name == "Party"


def test_update_purges_rejected_bookings(service, make_function_type, make_booking, test_db_session):
    ft = make_function_type(name="Party")
    make_booking(function_type=ft, status="REJECTED")
    make_booking(function_type=ft, status="REJECTED")

    updated, warning = service.update(ft.id, FunctionTypeUpdate(name="Garden Party", price=Decimal("99")))
    assert updated.name == "Garden Party"
    assert updated.price == Decimal("99")
    assert warning == "2 rejected booking(s) were deleted"
    assert test_db_session.query(Booking).count() == 0


def test_update_name_collision_with_other_entry(service, make_function_type):
    make_function_type(name="Wedding")
    party = make_function_type(name="Party")
    with pytest.raises(ConflictError):
        service.update(party.id, FunctionTypeUpdate(name="Wedding"))
    # renaming to its own name is fine
    assert service.update(party.id, FunctionTypeUpdate(name="Party"))[1] is None


def test_update_rejects_empty_name(service, make_function_type):
    ft = make_function_type()
    with pytest.raises(ValidationError):
        service.update(ft.id, FunctionTypeUpdate(name=""))


def test_deactivate_applies_guard_and_cleanup(service, make_function_type, make_booking, test_db_session):
    ft = make_function_type()
    pending = make_booking(function_type=ft, status="PENDING")
    with pytest.raises(ConflictError):
        service.change_status(ft.id, False)

    pending.status = "REJECTED"
    test_db_session.commit()
    deactivated, warning = service.change_status(ft.id, False)
    assert deactivated.is_active is False
    assert warning == "1 rejected booking(s) were deleted"

    reactivated, warning = service.change_status(ft.id, True)
    assert reactivated.is_active is True
    assert warning is None


def test_activation_has_no_guard(service, make_function_type, make_booking):
    ft = make_function_type(is_active=False)
    make_booking(function_type=ft, status="PENDING")
    assert service.change_status(ft.id, True)[0].is_active is True


def test_delete_guard(service, make_function_type, make_booking, test_db_session):
    ft = make_function_type(name="Engagement")
    ft_id = ft.id
    pending = make_booking(function_type=ft, status="PENDING")
    rejected = make_booking(function_type=ft, status="REJECTED", start_time="14:00", end_time="16:00")

    with pytest.raises(ConflictError) as exc:
        service.delete(ft_id)
    assert exc.value.details == {"pending": 1, "accepted": 0}

    test_db_session.delete(pending)
    test_db_session.commit()
    service.delete(ft_id)

    with pytest.raises(NotFoundError):
        service.get_by_id(ft_id)
    test_db_session.refresh(rejected)
    assert rejected.function_type_id is None
    assert rejected.function_type_label == "Engagement"


def test_delete_missing(service):
    with pytest.raises(NotFoundError):
        service.delete("missing")
