from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..core.config import settings
from ..core.security import UserRole

class UserSummary(BaseModel):
    """Identity summary embedded in bookings and results."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str = Field(..., alias="nome")
    email: str

class UserResponse(UserSummary):
    role: UserRole = Field(..., alias="perfil")
    is_active: bool = Field(..., alias="ativo")
    created_at: Optional[datetime] = Field(None, alias="criadoEm")
    updated_at: Optional[datetime] = Field(None, alias="atualizadoEm")

class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nome", min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., alias="senha", min_length=settings.PASSWORD_MIN_LENGTH)
    role: UserRole = Field(..., alias="perfil")

class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, alias="nome", min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, alias="senha", min_length=settings.PASSWORD_MIN_LENGTH)
    role: Optional[UserRole] = Field(None, alias="perfil")
    is_active: Optional[bool] = Field(None, alias="ativo")

class UserDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: UserResponse = Field(..., alias="usuario")

class UserMessage(UserDetail):
    message: str

class UserList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    users: List[UserResponse] = Field(..., alias="usuarios")

class MessageResponse(BaseModel):
    message: str
