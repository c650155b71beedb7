from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.push_token import Platform

class PushTokenRegister(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., min_length=1, max_length=512)
    platform: Platform = Field(..., alias="plataforma")

class PushTokenResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    user_id: int = Field(..., alias="usuarioId")
    token: str
    platform: Platform = Field(..., alias="plataforma")
    is_active: bool = Field(..., alias="ativo")
    created_at: Optional[datetime] = Field(None, alias="criadoEm")
    updated_at: Optional[datetime] = Field(None, alias="atualizadoEm")

class PushTokenMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    push_token: PushTokenResponse = Field(..., alias="pushToken")
