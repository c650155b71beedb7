from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
import hashlib
import secrets
from enum import Enum

from .config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

class UserRole(str, Enum):
    ADMIN = "ADMIN"
    PATIENT = "PACIENTE"
    DOCTOR = "MEDICO"
    ATTENDANT = "ATENDENTE"

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int

class TokenPayload(BaseModel):
    sub: Optional[str] = None
    role: Optional[UserRole] = None
    exp: Optional[int] = None
    jti: Optional[str] = None
    token_type: Optional[str] = None  # "access" or "refresh"

    @property
    def user_id(self) -> Optional[int]:
        if self.sub is None or not self.sub.isdigit():
            return None
        return int(self.sub)

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

def hash_token(token: str) -> str:
    """Digest stored in place of a refresh token."""
    return hashlib.sha256(token.encode()).hexdigest()

def _secret_for(token_type: str) -> str:
    if token_type == "refresh":
        return settings.refresh_secret_key
    return settings.SECRET_KEY

# JWT utilities
def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "token_type": "access"
    })

    return jwt.encode(
        to_encode,
        _secret_for("access"),
        algorithm=settings.ALGORITHM
    )

def create_refresh_token(data: dict) -> str:
    """Create JWT refresh token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    # jti keeps tokens issued in the same second distinct
    to_encode.update({
        "exp": expire,
        "jti": secrets.token_hex(8),
        "token_type": "refresh"
    })

    return jwt.encode(
        to_encode,
        _secret_for("refresh"),
        algorithm=settings.ALGORITHM
    )

def verify_token(token: str, token_type: str = "access") -> Optional[TokenPayload]:
    """Verify and decode JWT token; None on any failure."""
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type),
            algorithms=[settings.ALGORITHM]
        )
        token_payload = TokenPayload(**payload)
    except (JWTError, ValueError):
        return None

    if token_payload.token_type != token_type:
        return None
    return token_payload

def create_token_pair(user_id: int, role: UserRole) -> Token:
    """Create both access and refresh tokens."""
    token_data = {
        "sub": str(user_id),
        "role": UserRole(role).value
    }

    access_token = create_access_token(token_data)
    refresh_token = create_refresh_token(token_data)

    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    )
