"""
Feedback threads between the company and its people.

Status only moves forward:

    pending ──review──▶ reviewed ──respond──▶ responded
       └──────────────respond──────────────────▲

Reviewing a reviewed item is a no-op. Anything that would move a responded
item, or reply to it a second time, is a ConflictError.
"""

from typing import Any, List

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, StorageError
from app.core.logging import get_logger
from app.models.base import utcnow
from app.models.feedback import Feedback, FeedbackStatus
from app.schemas.feedback import FeedbackCreate, FeedbackResponse
from app.services.company_store import require_company
from app.services.identifiers import normalize_email, parse_id

logger = get_logger(__name__)

# target status -> statuses it may be reached from
TRANSITIONS = {
    FeedbackStatus.REVIEWED: {FeedbackStatus.PENDING, FeedbackStatus.REVIEWED},
    FeedbackStatus.RESPONDED: {FeedbackStatus.PENDING, FeedbackStatus.REVIEWED},
}


def _check_transition(feedback: Feedback, target: FeedbackStatus) -> None:
    if feedback.status not in TRANSITIONS[target]:
        raise ConflictError(f"Feedback already {feedback.status.value}")


def _commit(db: Session, feedback: Feedback, action: str) -> None:
    try:
        db.commit()
        db.refresh(feedback)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to %s feedback %s: %s", action, feedback.id, e, exc_info=True)
        raise StorageError(f"Failed to {action} feedback") from e


def submit(db: Session, payload: FeedbackCreate) -> FeedbackResponse:
    company = require_company(db)
    feedback = Feedback(
        sender_email=normalize_email(payload.sender_email),
        receiver_email=normalize_email(payload.receiver_email),
        subject=payload.subject,
        description=payload.description,
        company_id=company.id,
    )

    try:
        db.add(feedback)
        db.commit()
        db.refresh(feedback)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to submit feedback %r: %s", payload.subject, e, exc_info=True)
        raise StorageError("Failed to submit feedback") from e

    logger.info("Feedback %s sent from %s to %s", feedback.id, feedback.sender_email, feedback.receiver_email)
    return FeedbackResponse.from_record(feedback)


def _inbox(db: Session, *criteria) -> List[FeedbackResponse]:
    company = require_company(db)
    stmt = (
        select(Feedback)
        .where(Feedback.company_id == company.id, *criteria)
        .order_by(Feedback.sent_at.desc(), Feedback.id.desc())
    )
    try:
        rows = db.scalars(stmt).all()
    except SQLAlchemyError as e:
        logger.error("Failed to list feedback: %s", e, exc_info=True)
        raise StorageError("Failed to list feedback") from e
    return [FeedbackResponse.from_record(feedback) for feedback in rows]


def admin_inbox(db: Session) -> List[FeedbackResponse]:
    """Every feedback item of the company, newest first."""
    return _inbox(db)


def employee_inbox(db: Session, email: Any) -> List[FeedbackResponse]:
    """Feedback a person sent or received, newest first."""
    email = normalize_email(email)
    return _inbox(db, or_(Feedback.sender_email == email, Feedback.receiver_email == email))


def find_feedback(db: Session, feedback_id: Any) -> Feedback:
    fid = parse_id(feedback_id, "feedback ID")
    try:
        feedback = db.get(Feedback, fid)
    except SQLAlchemyError as e:
        logger.error("Failed to load feedback %s: %s", fid, e, exc_info=True)
        raise StorageError("Failed to load feedback") from e

    if feedback is None:
        raise NotFoundError("Feedback not found")
    return feedback


def get_feedback(db: Session, feedback_id: Any) -> FeedbackResponse:
    return FeedbackResponse.from_record(find_feedback(db, feedback_id))


def mark_reviewed(db: Session, feedback_id: Any) -> FeedbackResponse:
    feedback = find_feedback(db, feedback_id)
    _check_transition(feedback, FeedbackStatus.REVIEWED)

    feedback.status = FeedbackStatus.REVIEWED
    _commit(db, feedback, "review")
    logger.info("Feedback %s reviewed", feedback.id)
    return FeedbackResponse.from_record(feedback)


def respond(db: Session, feedback_id: Any, response: str) -> FeedbackResponse:
    feedback = find_feedback(db, feedback_id)
    _check_transition(feedback, FeedbackStatus.RESPONDED)

    feedback.response = response
    feedback.status = FeedbackStatus.RESPONDED
    feedback.responded_at = utcnow()
    _commit(db, feedback, "respond to")
    logger.info("Feedback %s responded", feedback.id)
    return FeedbackResponse.from_record(feedback)
