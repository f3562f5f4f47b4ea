from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.api.deps import require_admin
from app.schemas.feedback import FeedbackActionResponse, FeedbackCreate, FeedbackReply, FeedbackResponse
from app.services import feedback_store
from typing import List, Optional

router = APIRouter(prefix="/feedback", tags=["Feedback"], dependencies=[Depends(require_admin)])


@router.post("", response_model=FeedbackActionResponse, status_code=status.HTTP_201_CREATED)
def submit_feedback(payload: FeedbackCreate, db: Session = Depends(get_db)):
    feedback = feedback_store.submit(db, payload)
    return FeedbackActionResponse(message="Feedback submitted successfully", feedback=feedback)


# ─── Inboxes (newest first) ───────────────────────────────────────────────────

@router.get("/admin", response_model=List[FeedbackResponse])
def admin_inbox(db: Session = Depends(get_db)):
    return feedback_store.admin_inbox(db)


@router.get("/employee", response_model=List[FeedbackResponse])
def employee_inbox(email: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """Feedback the given person sent or received."""
    return feedback_store.employee_inbox(db, email)


# ─── Status changes ──────────────────────────────────────────────────────────

@router.put("/respond/{feedback_id}", response_model=FeedbackActionResponse)
def respond_to_feedback(feedback_id: str, payload: FeedbackReply, db: Session = Depends(get_db)):
    feedback = feedback_store.respond(db, feedback_id, payload.response)
    return FeedbackActionResponse(message="Response sent successfully", feedback=feedback)


@router.put("/review/{feedback_id}", response_model=FeedbackActionResponse)
def review_feedback(feedback_id: str, db: Session = Depends(get_db)):
    feedback = feedback_store.mark_reviewed(db, feedback_id)
    return FeedbackActionResponse(message="Feedback marked as reviewed", feedback=feedback)


@router.get("/{feedback_id}", response_model=FeedbackResponse)
def get_feedback(feedback_id: str, db: Session = Depends(get_db)):
    return feedback_store.get_feedback(db, feedback_id)
