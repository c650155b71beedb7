from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from typing import Iterable, Optional

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.errors import Forbidden, InvalidToken, MissingToken, RateLimited
from ..core.security import verify_token, UserRole, TokenPayload
from ..models.user import User

def extract_bearer_token(auth_header: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not auth_header:
        raise MissingToken()

    parts = auth_header.split(" ")
    if len(parts) != 2:
        raise InvalidToken("Invalid token format")

    scheme, token = parts
    if scheme.lower() != "bearer" or not token:
        raise InvalidToken("Malformed token")

    return token

async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> TokenPayload:
    """Verify the access token and attach the caller's identity to the request."""
    token = extract_bearer_token(authorization)

    token_payload = verify_token(token, token_type="access")
    if not token_payload or token_payload.user_id is None or token_payload.role is None:
        raise InvalidToken()

    request.state.user_id = token_payload.user_id
    request.state.user_role = token_payload.role
    return token_payload

def get_current_user(
    identity: TokenPayload = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from database."""
    user = db.query(User).filter(User.id == identity.user_id).first()
    if not user:
        raise InvalidToken("User not found")

    if not user.is_active:
        raise InvalidToken("User account is deactivated")

    return user

# Role-based access control dependencies
def require_role(allowed_roles: Iterable[UserRole]):
    """Create a dependency that requires specific user roles."""
    allowed = frozenset(allowed_roles)

    async def role_checker(
        identity: TokenPayload = Depends(get_current_identity)
    ) -> TokenPayload:
        if identity.role not in allowed:
            raise Forbidden()
        return identity

    return role_checker

# Rate limiting dependency
def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Fixed-window rate limit for public authentication endpoints."""
    if not settings.RATE_LIMIT_ENABLED:
        return

    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{request.url.path}:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.RATE_LIMIT_REQUESTS:
            raise RateLimited()
        redis_client.incr(key)
