from sqlalchemy import Column, DateTime, Integer, ForeignKey, UniqueConstraint
from datetime import datetime

from bachub.core.database import Base


class Favorite(Base):
    """Bookmark of a document by a user"""
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "document_id", name="uq_favorites_user_document"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Favorite doc={self.document_id} user={self.user_id}>"
