
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from app.db.session import Base

class ContentGroup(Base):
    __tablename__ = "content_groups"
    __table_args__ = (
        CheckConstraint("length(trim(name)) > 0", name="ck_content_group_name_not_blank"),
    )
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    owner = relationship("User", back_populates="content_groups")
    documents = relationship(
        "Document",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
