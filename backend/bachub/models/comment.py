from sqlalchemy import Column, DateTime, Integer, ForeignKey, Text, Boolean
from datetime import datetime

from bachub.core.database import Base


class Comment(Base):
    """Comment on a document"""
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_admin_response = Column(Boolean, default=False, nullable=False)
    # Threading is stored but no read path nests replies yet
    parent_id = Column(Integer, ForeignKey("comments.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Comment {self.id} doc={self.document_id}>"
