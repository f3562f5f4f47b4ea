from pydantic import EmailStr, Field
from typing import Optional
from uuid import UUID
from app.models.feedback import Feedback, FeedbackStatus
from app.schemas.property import CamelModel, UtcDateTime


class FeedbackCreate(CamelModel):
    sender_email: EmailStr
    receiver_email: EmailStr
    subject: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class FeedbackReply(CamelModel):
    response: str = Field(..., min_length=1)


class FeedbackResponse(CamelModel):
    id: UUID
    sender_email: str
    receiver_email: str
    subject: str
    description: str
    company_name: str
    status: FeedbackStatus
    response: str
    sent_at: UtcDateTime
    responded_at: Optional[UtcDateTime] = None

    @classmethod
    def from_record(cls, feedback: Feedback) -> "FeedbackResponse":
        return cls(
            id=feedback.id,
            sender_email=feedback.sender_email,
            receiver_email=feedback.receiver_email,
            subject=feedback.subject,
            description=feedback.description,
            company_name=feedback.company.name,
            status=feedback.status,
            response=feedback.response,
            sent_at=feedback.sent_at,
            responded_at=feedback.responded_at,
        )


class FeedbackActionResponse(CamelModel):
    message: str
    feedback: FeedbackResponse
