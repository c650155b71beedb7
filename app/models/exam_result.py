from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class ExamResult(Base):
    __tablename__ = "resultados_exames"

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exames.id", ondelete="CASCADE"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    details = Column(Text, nullable=True)
    file_url = Column(String(500), nullable=True)
    published_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)

    exam = relationship("Exam", back_populates="results")
    patient = relationship("User", foreign_keys=[patient_id])
    doctor = relationship("User", foreign_keys=[doctor_id])

    def __repr__(self):
        return f"<ExamResult(id={self.id}, exam_id={self.exam_id}, patient_id={self.patient_id})>"
