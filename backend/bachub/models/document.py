from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Text
from datetime import datetime

from bachub.core.database import Base


class Document(Base):
    """Past exam paper metadata. The file itself is not stored by the API."""
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    year = Column(Integer, nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)

    # File details
    file_name = Column(String(500), nullable=False)
    file_size = Column(Integer, nullable=False)  # in bytes

    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    downloads = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Document {self.title}>"
