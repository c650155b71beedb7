from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_identity
from ...services.result_service import ResultService
from ...schemas.result import (
    ResultCreate, ResultDetail, ResultList, ResultMessage, ResultResponse
)

router = APIRouter(prefix="/resultados", tags=["Resultados"])

@router.post("", response_model=ResultMessage, status_code=status.HTTP_201_CREATED)
def create_result(
    data: ResultCreate,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Publish an exam result (doctors and administrators)."""
    result = ResultService(db).create(identity, data)
    return ResultMessage(message="Result created successfully", result=ResultResponse.model_validate(result))

@router.get("", response_model=ResultList)
def list_results(
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Results visible to the caller, most recently published first."""
    results = ResultService(db).list_for(identity)
    return ResultList(results=[ResultResponse.model_validate(r) for r in results])

@router.get("/{result_id}", response_model=ResultDetail)
def get_result(
    result_id: int,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    result = ResultService(db).get(identity, result_id)
    return ResultDetail(result=ResultResponse.model_validate(result))
