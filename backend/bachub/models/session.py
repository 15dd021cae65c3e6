from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from datetime import datetime

from bachub.core.database import Base


class UserSession(Base):
    """Server-side login session referenced by the session cookie"""
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(255), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    def is_expired(self) -> bool:
        """Check if session is expired"""
        return datetime.utcnow() > self.expires_at

    def __repr__(self):
        return f"<UserSession {self.id} user={self.user_id}>"
