from sqlalchemy import Column, String, DateTime, Integer, Text
from datetime import datetime

from bachub.core.database import Base


class Setting(Base):
    """Key-value site setting (footer, contact details, social links)"""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Setting key (unique identifier)
    key = Column(String(100), unique=True, nullable=False, index=True)

    # Plain string; structured values such as footer_quick_links are JSON-encoded
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Setting {self.key}>"
