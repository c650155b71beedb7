from datetime import date, datetime
from typing import List, Optional
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.appointment import BookingStatus
from .user import UserSummary

TIME_OF_DAY = re.compile(r"^(\d{1,2}):(\d{2})$")

def parse_time_of_day(value: str) -> tuple:
    """Split an ``HH:MM`` string into ``(hour, minute)``; ValueError when malformed."""
    match = TIME_OF_DAY.match(value.strip())
    if not match:
        raise ValueError("time must use the HH:MM format")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError("time must be between 00:00 and 23:59")
    return hour, minute

class BookingCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    patient_id: int = Field(..., alias="pacienteId")
    doctor_id: int = Field(..., alias="medicoId")
    day: date = Field(..., alias="dia")
    time: str = Field(..., alias="hora")
    details: Optional[str] = Field(None, alias="detalhes")

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        hour, minute = parse_time_of_day(value)
        return f"{hour:02d}:{minute:02d}"

class AppointmentCreate(BookingCreate):
    pass

class ExamCreate(BookingCreate):
    name: str = Field(..., alias="nome", min_length=1, max_length=200)

class BookingUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[BookingStatus] = None
    details: Optional[str] = Field(None, alias="detalhes")

class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    patient_id: int = Field(..., alias="pacienteId")
    doctor_id: int = Field(..., alias="medicoId")
    day: date = Field(..., alias="dia")
    time: str = Field(..., alias="hora")
    scheduled_at: datetime = Field(..., alias="dataHora")
    details: Optional[str] = Field(None, alias="detalhes")
    status: BookingStatus
    created_at: Optional[datetime] = Field(None, alias="criadoEm")
    updated_at: Optional[datetime] = Field(None, alias="atualizadoEm")
    patient: UserSummary = Field(..., alias="paciente")
    doctor: UserSummary = Field(..., alias="medico")

class AppointmentResponse(BookingResponse):
    pass

class ExamResponse(BookingResponse):
    name: str = Field(..., alias="nome")

# Envelopes

class AppointmentDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    appointment: AppointmentResponse = Field(..., alias="consulta")

class AppointmentMessage(AppointmentDetail):
    message: str

class AppointmentList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    appointments: List[AppointmentResponse] = Field(..., alias="consultas")

class ExamDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exam: ExamResponse = Field(..., alias="exame")

class ExamMessage(ExamDetail):
    message: str

class ExamList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exams: List[ExamResponse] = Field(..., alias="exames")
