from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Text, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class BookingStatus(str, enum.Enum):
    SCHEDULED = "AGENDADA"
    COMPLETED = "REALIZADA"
    CANCELED = "CANCELADA"
    NO_SHOW = "NAO_COMPARECEU"

def booking_status_type(name: str) -> SQLEnum:
    return SQLEnum(
        BookingStatus,
        name=name,
        values_callable=lambda statuses: [s.value for s in statuses],
    )

class Appointment(Base):
    __tablename__ = "consultas"

    id = Column(Integer, primary_key=True, index=True)

    # Relationships
    patient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Appointment details
    day = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)
    scheduled_at = Column(DateTime, nullable=False, index=True)
    details = Column(Text, nullable=True)
    status = Column(booking_status_type("consulta_status"), nullable=False, default=BookingStatus.SCHEDULED)

    # Equals scheduled_at while the appointment holds its slot, NULL once released
    slot_at = Column(DateTime, nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])

    __table_args__ = (
        UniqueConstraint("doctor_id", "slot_at", name="uq_consultas_doctor_slot"),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, date='{self.scheduled_at}')>"
