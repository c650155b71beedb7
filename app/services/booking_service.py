"""
Booking logic shared by appointments (consultas) and exams (exames).

A booking holds its slot through ``slot_at``, which is covered by a unique
constraint on ``(doctor_id, slot_at)``. Inserting the row is the availability
check: when the storage engine rejects the insert, the slot is taken.
"""
from datetime import date, datetime, time as dt_time
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..core.config import settings
from ..core.errors import NotFound, SlotUnavailable, ValidationFailed
from ..core.permissions import authorize, visibility_clauses
from ..core.security import UserRole
from ..models.appointment import Appointment, BookingStatus
from ..models.exam import Exam
from ..models.user import User
from ..schemas.booking import BookingCreate, BookingUpdate, parse_time_of_day

logger = logging.getLogger(__name__)

def combine_slot(day: date, time_of_day: str) -> datetime:
    """Merge a calendar day and an ``HH:MM`` string into one timestamp."""
    hour, minute = parse_time_of_day(time_of_day)
    return datetime.combine(day, dt_time(hour, minute, 0, 0))

class BookingService:
    model = None
    resource = None
    label = None

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(self.model).options(
            joinedload(self.model.patient),
            joinedload(self.model.doctor),
        )

    def _get_or_404(self, booking_id: int):
        booking = self._query().filter(self.model.id == booking_id).first()
        if not booking:
            raise NotFound(f"{self.label} not found")
        return booking

    def _sync_slot(self, booking) -> None:
        """Hold or release the slot according to status and the cancel policy."""
        released = (
            booking.status == BookingStatus.CANCELED
            and settings.TREAT_CANCELED_AS_AVAILABLE
        )
        booking.slot_at = None if released else booking.scheduled_at

    def _commit_slot(self, booking) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(
                f"{self.label} slot taken: doctor {booking.doctor_id} at {booking.scheduled_at}"
            )
            raise SlotUnavailable()

    def create(self, identity, data: BookingCreate):
        """Book a slot for a patient with a doctor."""
        authorize(identity, self.resource, "create", data)

        doctor = self.db.query(User).filter(User.id == data.doctor_id).first()
        if not doctor or doctor.role != UserRole.DOCTOR:
            raise ValidationFailed("Invalid doctor")

        patient = self.db.query(User).filter(User.id == data.patient_id).first()
        if not patient:
            raise ValidationFailed("Patient not found")

        scheduled_at = combine_slot(data.day, data.time)
        booking = self.model(
            **data.model_dump(),
            scheduled_at=scheduled_at,
            status=BookingStatus.SCHEDULED,
        )
        self._sync_slot(booking)

        self.db.add(booking)
        self._commit_slot(booking)
        self.db.refresh(booking)

        logger.info(
            f"{self.label} {booking.id} booked: doctor {booking.doctor_id}, "
            f"patient {booking.patient_id}, at {booking.scheduled_at}"
        )
        return booking

    def list_for(self, identity) -> List:
        return (
            self._query()
            .filter(*visibility_clauses(identity, self.model))
            .order_by(self.model.scheduled_at.asc(), self.model.id.asc())
            .all()
        )

    def get(self, identity, booking_id: int):
        booking = self._get_or_404(booking_id)
        authorize(identity, self.resource, "read", booking)
        return booking

    def update(self, identity, booking_id: int, data: BookingUpdate):
        """Change status and/or details; only supplied fields are written."""
        booking = self._get_or_404(booking_id)
        authorize(identity, self.resource, "update", booking)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("status") is not None:
            booking.status = changes["status"]
            self._sync_slot(booking)
        if "details" in changes:
            booking.details = changes["details"]

        self._commit_slot(booking)
        self.db.refresh(booking)
        return booking

    def cancel(self, identity, booking_id: int):
        """Mark as canceled; canceling an already canceled booking is a no-op."""
        booking = self._get_or_404(booking_id)
        authorize(identity, self.resource, "cancel", booking)

        if booking.status != BookingStatus.CANCELED:
            booking.status = BookingStatus.CANCELED
            self._sync_slot(booking)
            self._commit_slot(booking)
            self.db.refresh(booking)
            logger.info(f"{self.label} {booking.id} canceled by user {identity.user_id}")

        return booking

class AppointmentService(BookingService):
    model = Appointment
    resource = "consulta"
    label = "Appointment"

class ExamService(BookingService):
    model = Exam
    resource = "exame"
    label = "Exam"
