from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_identity
from ...services.booking_service import ExamService
from ...schemas.booking import (
    BookingUpdate, ExamCreate, ExamDetail, ExamList, ExamMessage, ExamResponse
)

router = APIRouter(prefix="/exames", tags=["Exames"])

@router.post("", response_model=ExamMessage, status_code=status.HTTP_201_CREATED)
def create_exam(
    data: ExamCreate,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Book an exam slot with a doctor."""
    exam = ExamService(db).create(identity, data)
    return ExamMessage(message="Exam scheduled successfully", exam=ExamResponse.model_validate(exam))

@router.get("", response_model=ExamList)
def list_exams(
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    exams = ExamService(db).list_for(identity)
    return ExamList(exams=[ExamResponse.model_validate(e) for e in exams])

@router.get("/{exam_id}", response_model=ExamDetail)
def get_exam(
    exam_id: int,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    exam = ExamService(db).get(identity, exam_id)
    return ExamDetail(exam=ExamResponse.model_validate(exam))

@router.put("/{exam_id}", response_model=ExamMessage)
def update_exam(
    exam_id: int,
    data: BookingUpdate,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    exam = ExamService(db).update(identity, exam_id, data)
    return ExamMessage(message="Exam updated successfully", exam=ExamResponse.model_validate(exam))

@router.delete("/{exam_id}", response_model=ExamMessage)
def cancel_exam(
    exam_id: int,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    exam = ExamService(db).cancel(identity, exam_id)
    return ExamMessage(message="Exam canceled successfully", exam=ExamResponse.model_validate(exam))
