import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import NotFound
from ..core.permissions import authorize
from ..models.push_token import PushToken
from ..schemas.push_token import PushTokenRegister

logger = logging.getLogger(__name__)

class PushTokenService:
    def __init__(self, db: Session):
        self.db = db

    def _find(self, token: str) -> Optional[PushToken]:
        return self.db.query(PushToken).filter(PushToken.token == token).first()

    def _claim(self, push_token: PushToken, identity, data: PushTokenRegister) -> None:
        # Most recent registrant owns the device token
        push_token.user_id = identity.user_id
        push_token.platform = data.platform
        push_token.is_active = True
        self.db.commit()

    def register(self, identity, data: PushTokenRegister) -> Tuple[PushToken, bool]:
        """Upsert by token value. Returns the token and whether it was created."""
        authorize(identity, "push_token", "register")

        push_token = self._find(data.token)
        created = push_token is None

        if created:
            push_token = PushToken(
                user_id=identity.user_id,
                token=data.token,
                platform=data.platform,
            )
            self.db.add(push_token)
            try:
                self.db.commit()
            except IntegrityError:
                # Inserted by a concurrent request; take it over instead
                self.db.rollback()
                push_token = self._find(data.token)
                if push_token is None:
                    raise
                created = False
                self._claim(push_token, identity, data)
        else:
            self._claim(push_token, identity, data)

        self.db.refresh(push_token)
        return push_token, created

    def delete(self, identity, token_id: int) -> None:
        push_token = self.db.query(PushToken).filter(PushToken.id == token_id).first()
        if not push_token:
            raise NotFound("Token not found")

        authorize(identity, "push_token", "delete", push_token)

        self.db.delete(push_token)
        self.db.commit()
        logger.info(f"Push token {token_id} removed by user {identity.user_id}")
