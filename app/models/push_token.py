from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from ..core.database import Base

class Platform(str, enum.Enum):
    IOS = "ios"
    ANDROID = "android"
    WEB = "web"

class PushToken(Base):
    __tablename__ = "push_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(512), unique=True, index=True, nullable=False)
    platform = Column(
        SQLEnum(Platform, name="push_platform", values_callable=lambda platforms: [p.value for p in platforms]),
        nullable=False,
    )
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<PushToken(id={self.id}, user_id={self.user_id}, platform='{self.platform}')>"
