
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from app.db.session import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(120))
    image = Column(String(500))
    created_at = Column(DateTime, server_default=func.now())

    content_groups = relationship(
        "ContentGroup",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
