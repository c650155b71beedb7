from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_identity
from ...services.push_token_service import PushTokenService
from ...schemas.push_token import PushTokenMessage, PushTokenRegister, PushTokenResponse
from ...schemas.user import MessageResponse

router = APIRouter(prefix="/push-tokens", tags=["Push Tokens"])

@router.post(
    "",
    response_model=PushTokenMessage,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"description": "Existing token reassigned to the caller"}},
)
def register_push_token(
    data: PushTokenRegister,
    response: Response,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Register a device token, or claim an existing one for the caller."""
    push_token, created = PushTokenService(db).register(identity, data)
    if not created:
        response.status_code = status.HTTP_200_OK

    return PushTokenMessage(
        message="Token registered successfully" if created else "Token updated successfully",
        push_token=PushTokenResponse.model_validate(push_token)
    )

@router.delete("/{token_id}", response_model=MessageResponse)
def delete_push_token(
    token_id: int,
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    PushTokenService(db).delete(identity, token_id)
    return {"message": "Token removed successfully"}
