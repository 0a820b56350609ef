"""
RefreshToken model: one row per issued refresh token so it can be rotated
and revoked by deleting the row.
Fields:
- token (unique) - the signed refresh token itself
- user_id (String(36)) - FK to users.id
- expires_at - authoritative expiry, checked on every refresh
"""
from datetime import datetime

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, as_aware, utcnow


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token = Column(Text, nullable=False, unique=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    def is_expired(self, now: datetime = None) -> bool:
        return as_aware(self.expires_at) < (now or utcnow())

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id}>"
