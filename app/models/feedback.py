from sqlalchemy import Column, String, Text, Enum, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from app.models.base import BaseModel, utcnow
import enum

class FeedbackStatus(str, enum.Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESPONDED = "responded"

class Feedback(BaseModel):
    __tablename__ = "feedback"

    sender_email = Column(String(255), nullable=False, index=True)
    receiver_email = Column(String(255), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)

    status = Column(Enum(FeedbackStatus), nullable=False, default=FeedbackStatus.PENDING)
    response = Column(Text, nullable=False, default="")
    sent_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    company_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    company = relationship("Company")

    __table_args__ = (
        Index("ix_feedback_company_sent", "company_id", "sent_at"),
    )
