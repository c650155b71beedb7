from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary

class ResultCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exam_id: int = Field(..., alias="exameId")
    patient_id: int = Field(..., alias="pacienteId")
    doctor_id: int = Field(..., alias="medicoId")
    details: Optional[str] = Field(None, alias="detalhes")
    file_url: Optional[str] = Field(None, alias="arquivoUrl", max_length=500)

class ExamSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str = Field(..., alias="nome")
    day: date = Field(..., alias="dia")
    time: str = Field(..., alias="hora")

class ResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    exam_id: int = Field(..., alias="exameId")
    patient_id: int = Field(..., alias="pacienteId")
    doctor_id: int = Field(..., alias="medicoId")
    details: Optional[str] = Field(None, alias="detalhes")
    file_url: Optional[str] = Field(None, alias="arquivoUrl")
    published_at: datetime = Field(..., alias="publicadoEm")
    exam: ExamSummary = Field(..., alias="exame")
    patient: UserSummary = Field(..., alias="paciente")
    doctor: UserSummary = Field(..., alias="medico")

class ResultDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    result: ResultResponse = Field(..., alias="resultado")

class ResultMessage(ResultDetail):
    message: str

class ResultList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    results: List[ResultResponse] = Field(..., alias="resultados")
