# app/models/refresh_token.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from app.core.db import Base
from app.core.security import utcnow

class RefreshToken(Base):
    __tablename__ = "refresh_tokens"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    # 평문 토큰은 저장하지 않는다
    token_hash = Column(String(255), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
