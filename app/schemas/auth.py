from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..core.config import settings
from .user import UserResponse

class UserRegister(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nome", min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., alias="senha", min_length=settings.PASSWORD_MIN_LENGTH)

class UserLogin(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(..., alias="senha", min_length=1)

class RefreshTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(..., alias="refreshToken", min_length=1)

class TokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")
    token_type: str = Field("bearer", alias="tokenType")
    expires_in: int = Field(..., alias="expiresIn")
    user: UserResponse = Field(..., alias="usuario")

