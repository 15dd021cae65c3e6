from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Text, Boolean
from datetime import datetime

from bachub.core.database import Base


class Announcement(Base):
    """Site-wide banner message"""
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    active = Column(Boolean, default=True, nullable=False)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Announcement {self.title}>"
