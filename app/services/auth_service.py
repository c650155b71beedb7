from sqlalchemy import or_
from sqlalchemy.orm import Session
from datetime import datetime, timedelta
import logging

from ..models.user import User, RefreshToken
from ..core.config import settings
from ..core.errors import Forbidden, InvalidCredentials, InvalidToken
from ..core.security import (
    verify_password, create_token_pair, verify_token, hash_token, UserRole
)
from ..schemas.auth import UserLogin, UserRegister, TokenResponse
from ..schemas.user import UserResponse
from .user_service import UserService

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> User:
        """Register a new patient account."""
        return UserService(self.db).create_user(
            name=user_data.name,
            email=user_data.email,
            password=user_data.password,
            role=UserRole.PATIENT,
        )

    def authenticate_user(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate user and return tokens."""
        user = self.db.query(User).filter(
            User.email == login_data.email
        ).first()

        if not user:
            logger.info(f"Failed login for unknown email {login_data.email}")
            raise InvalidCredentials()

        if not user.is_active:
            raise Forbidden("Inactive user", status_code=401)

        if not verify_password(login_data.password, user.password_hash):
            logger.info(f"Failed login for user {user.id}")
            raise InvalidCredentials()

        user.last_login = datetime.utcnow()
        response = self._issue_tokens(user, "Login successful")
        self.db.commit()
        return response

    def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """Rotate tokens: the presented refresh token is revoked and a new pair issued."""
        token_payload = verify_token(refresh_token, token_type="refresh")
        if not token_payload or token_payload.user_id is None:
            raise InvalidToken("Invalid or expired refresh token")

        # Check if refresh token exists in database
        stored_token = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token),
            RefreshToken.is_revoked == False,  # noqa: E712
            RefreshToken.expires_at > datetime.utcnow()
        ).first()

        if not stored_token:
            raise InvalidToken("Invalid or expired refresh token")

        user = self.db.query(User).filter(
            User.id == token_payload.user_id
        ).first()

        if not user or not user.is_active:
            raise Forbidden("User not found or inactive", status_code=401)

        response = self._issue_tokens(user, "Token refreshed successfully")
        self.db.commit()
        return response

    def logout_user(self, refresh_token: str) -> None:
        """Revoke a refresh token; unknown tokens are ignored."""
        stored_token = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token)
        ).first()

        if stored_token:
            stored_token.is_revoked = True
            self.db.commit()

    def _issue_tokens(self, user: User, message: str) -> TokenResponse:
        tokens = create_token_pair(user.id, user.role)
        self._store_refresh_token(user.id, tokens.refresh_token)

        return TokenResponse(
            message=message,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
            user=UserResponse.model_validate(user)
        )

    def _revoke_refresh_tokens(self, user_id: int):
        self.db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id
        ).update({"is_revoked": True})

    def cleanup_refresh_tokens(self, user_id: int):
        """Delete the user's revoked and expired refresh tokens."""
        self.db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id,
            or_(
                RefreshToken.is_revoked == True,  # noqa: E712
                RefreshToken.expires_at <= datetime.utcnow()
            )
        ).delete(synchronize_session=False)

    def _store_refresh_token(self, user_id: int, refresh_token: str):
        """Store refresh token in database, revoking the user's previous ones."""
        token_payload = verify_token(refresh_token, token_type="refresh")
        expires_at = (
            datetime.utcfromtimestamp(token_payload.exp)
            if token_payload and token_payload.exp
            else datetime.utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        )

        # At most the previous token survives, revoked, until the next rotation
        self.cleanup_refresh_tokens(user_id)
        self._revoke_refresh_tokens(user_id)

        self.db.add(RefreshToken(
            user_id=user_id,
            token_hash=hash_token(refresh_token),
            expires_at=expires_at
        ))
