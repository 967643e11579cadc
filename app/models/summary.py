from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.db.session import Base

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Summary(Base):
    __tablename__ = "summaries"
    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), unique=True, nullable=False)
    content = Column(Text, nullable=False)
    model = Column(String(100), nullable=False, default="deepseek-chat")
    # set when content is a local preview written after a provider failure
    stale = Column(Boolean, nullable=False, default=False)
    generated_at = Column(DateTime, default=utcnow, nullable=False)

    document = relationship("Document", back_populates="summary")
