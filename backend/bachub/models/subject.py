from sqlalchemy import Column, String, Integer

from bachub.core.database import Base


class Subject(Base):
    """Exam subject, e.g. Mathématiques. ``color`` is a UI tag such as "blue"."""
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    color = Column(String(30), nullable=False)

    def __repr__(self):
        return f"<Subject {self.name}>"
