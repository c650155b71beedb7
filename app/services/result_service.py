import logging
from typing import List

from sqlalchemy.orm import Session, joinedload

from ..core.errors import NotFound, ValidationFailed
from ..core.permissions import authorize, visibility_clauses
from ..models.exam import Exam
from ..models.exam_result import ExamResult
from ..models.user import User
from ..schemas.result import ResultCreate

logger = logging.getLogger(__name__)

class ResultService:
    """Exam results: append-only, visible by the same rules as bookings."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(ExamResult).options(
            joinedload(ExamResult.exam),
            joinedload(ExamResult.patient),
            joinedload(ExamResult.doctor),
        )

    def create(self, identity, data: ResultCreate) -> ExamResult:
        authorize(identity, "resultado", "create")

        exam = self.db.query(Exam).filter(Exam.id == data.exam_id).first()
        if not exam:
            raise NotFound("Exam not found")

        for user_id, label in ((data.patient_id, "Patient"), (data.doctor_id, "Doctor")):
            if not self.db.query(User).filter(User.id == user_id).first():
                raise ValidationFailed(f"{label} not found")

        result = ExamResult(**data.model_dump())
        self.db.add(result)
        self.db.commit()
        self.db.refresh(result)

        logger.info(f"Result {result.id} published for exam {exam.id} by user {identity.user_id}")
        return result

    def list_for(self, identity) -> List[ExamResult]:
        return (
            self._query()
            .filter(*visibility_clauses(identity, ExamResult))
            .order_by(ExamResult.published_at.desc(), ExamResult.id.desc())
            .all()
        )

    def get(self, identity, result_id: int) -> ExamResult:
        result = self._query().filter(ExamResult.id == result_id).first()
        if not result:
            raise NotFound("Result not found")
        authorize(identity, "resultado", "read", result)
        return result
