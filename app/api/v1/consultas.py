from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_identity
from ...services.booking_service import AppointmentService
from ...schemas.booking import (
    AppointmentCreate, AppointmentDetail, AppointmentList,
    AppointmentMessage, AppointmentResponse, BookingUpdate
)

router = APIRouter(prefix="/consultas", tags=["Consultas"])

@router.post("", response_model=AppointmentMessage, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Book an appointment slot with a doctor."""
    appointment = AppointmentService(db).create(identity, data)
    return AppointmentMessage(
        message="Appointment scheduled successfully",
        appointment=AppointmentResponse.model_validate(appointment)
    )

@router.get("", response_model=AppointmentList)
def list_appointments(
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Appointments visible to the caller, earliest first."""
    appointments = AppointmentService(db).list_for(identity)
    return AppointmentList(
        appointments=[AppointmentResponse.model_validate(a) for a in appointments]
    )

@router.get("/{appointment_id}", response_model=AppointmentDetail)
def get_appointment(
    appointment_id: int,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).get(identity, appointment_id)
    return AppointmentDetail(appointment=AppointmentResponse.model_validate(appointment))

@router.put("/{appointment_id}", response_model=AppointmentMessage)
def update_appointment(
    appointment_id: int,
    data: BookingUpdate,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    appointment = AppointmentService(db).update(identity, appointment_id, data)
    return AppointmentMessage(
        message="Appointment updated successfully",
        appointment=AppointmentResponse.model_validate(appointment)
    )

@router.delete("/{appointment_id}", response_model=AppointmentMessage)
def cancel_appointment(
    appointment_id: int,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Cancel an appointment. The record is kept with status CANCELADA."""
    appointment = AppointmentService(db).cancel(identity, appointment_id)
    return AppointmentMessage(
        message="Appointment canceled successfully",
        appointment=AppointmentResponse.model_validate(appointment)
    )
