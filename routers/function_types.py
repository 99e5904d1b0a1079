from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import require_admin
from app.db import get_db
from app.schemas import FunctionTypeCreate, FunctionTypeOut, FunctionTypeStatus, FunctionTypeUpdate
from app.services.function_type_service import FunctionTypeService

# Public catalog: active entries only
router = APIRouter()

admin_router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("")
def list_active_function_types(db: Session = Depends(get_db)):
    return [FunctionTypeOut.model_validate(ft) for ft in FunctionTypeService(db).list_function_types()]


@admin_router.get("")
def list_function_types(db: Session = Depends(get_db)):
    service = FunctionTypeService(db)
    return [FunctionTypeOut.model_validate(ft) for ft in service.list_function_types(include_inactive=True)]


@admin_router.post("", status_code=201)
def create_function_type(body: FunctionTypeCreate, db: Session = Depends(get_db)):
    return FunctionTypeOut.model_validate(FunctionTypeService(db).create(body))


@admin_router.get("/{function_type_id}")
def get_function_type(function_type_id: str, db: Session = Depends(get_db)):
    service = FunctionTypeService(db)
    function_type = service.get_by_id(function_type_id)
    return {
        "function_type": FunctionTypeOut.model_validate(function_type),
        "booking_counts": service.booking_counts(function_type_id),
    }


@admin_router.patch("/{function_type_id}")
def update_function_type(function_type_id: str, body: FunctionTypeUpdate, db: Session = Depends(get_db)):
    """
    Update a function type. Blocked (409) while it has PENDING or ACCEPTED
    bookings; its REJECTED bookings are removed and reported as a warning.
    """
    function_type, warning = FunctionTypeService(db).update(function_type_id, body)
    return {"function_type": FunctionTypeOut.model_validate(function_type), "warning": warning}


@admin_router.patch("/{function_type_id}/status")
def change_function_type_status(function_type_id: str, body: FunctionTypeStatus, db: Session = Depends(get_db)):
    function_type, warning = FunctionTypeService(db).change_status(function_type_id, body.is_active)
    return {"function_type": FunctionTypeOut.model_validate(function_type), "warning": warning}


@admin_router.delete("/{function_type_id}")
def delete_function_type(function_type_id: str, db: Session = Depends(get_db)):
    FunctionTypeService(db).delete(function_type_id)
    return {"message": "Function type deleted successfully"}
