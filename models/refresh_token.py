"""
RefreshToken model: stores the SHA-256 digest of each opaque refresh token,
never the token itself. A record is single use: it is deleted on rotation,
on logout and once found expired.
Fields:
- id (autoincrement)
- user_id - FK to users.id, cascade delete
- token_hash (unique, 64 hex chars)
- expires_at, created_at
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)

    user = relationship("User", back_populates="refresh_tokens")

    # ids are never reused, even after rotation deletes the newest row
    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id}>"
