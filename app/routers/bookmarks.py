from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.schemas.bookmark import BookmarkCreate, BookmarkResponse, MessageResponse
from app.services import bookmark_guard
from typing import List, Optional

router = APIRouter(prefix="/bookmarks", tags=["Bookmarks"])


@router.get("", response_model=List[BookmarkResponse])
def list_bookmarks(
    email: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """A user's bookmarks, newest first, each with the current property data."""
    return bookmark_guard.list_for_user(db, email)


@router.post("", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
def add_bookmark(payload: BookmarkCreate, db: Session = Depends(get_db)):
    """
    Bookmark a property for a user.
    404 if the property does not exist, 400 if the user already bookmarked it.
    """
    return bookmark_guard.add(db, payload.user_email, payload.property_id)


@router.delete("/{bookmark_id}", response_model=MessageResponse)
def remove_bookmark(bookmark_id: str, db: Session = Depends(get_db)):
    bookmark_guard.remove(db, bookmark_id)
    return MessageResponse(message="Bookmark removed successfully")
