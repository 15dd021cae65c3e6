from sqlalchemy import Column, DateTime, Integer, ForeignKey, UniqueConstraint
from datetime import datetime

from bachub.core.database import Base


class Rating(Base):
    """A user's 1-5 star rating of a document, one per (user, document)"""
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "document_id", name="uq_ratings_user_document"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Rating {self.rating} doc={self.document_id} user={self.user_id}>"
