from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base
from .appointment import BookingStatus, booking_status_type

class Exam(Base):
    __tablename__ = "exames"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)

    patient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    day = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)
    scheduled_at = Column(DateTime, nullable=False, index=True)
    details = Column(Text, nullable=True)
    status = Column(booking_status_type("exame_status"), nullable=False, default=BookingStatus.SCHEDULED)
    slot_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])
    results = relationship(
        "ExamResult",
        back_populates="exam",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("doctor_id", "slot_at", name="uq_exames_doctor_slot"),
    )

    def __repr__(self):
        return f"<Exam(id={self.id}, name='{self.name}', doctor_id={self.doctor_id}, date='{self.scheduled_at}')>"
