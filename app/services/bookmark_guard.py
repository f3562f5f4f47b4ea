"""
Bookmark writes and reads with the (user_email, property_id) uniqueness
guarantee.

`add` runs: property exists? → already bookmarked? → insert. The pre-check
gives a friendly error in the common case; the uq_bookmarks_user_property
constraint is what decides a race. Whichever insert commits second gets an
IntegrityError and is reported as a conflict, so two racing calls never
both succeed and a retried call never creates a duplicate.
"""

from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, StorageError
from app.core.logging import get_logger
from app.models.bookmark import Bookmark
from app.models.property import Property
from app.schemas.bookmark import BookmarkResponse
from app.schemas.property import PropertyResponse
from app.services.identifiers import normalize_email, parse_id
from app.services.property_store import find_property

logger = get_logger(__name__)


def _expand(bookmark: Bookmark, prop: Property) -> BookmarkResponse:
    return BookmarkResponse(
        id=bookmark.id,
        user_email=bookmark.user_email,
        property=PropertyResponse.from_record(prop),
        created_at=bookmark.created_at,
    )


def _find_existing(db: Session, user_email: str, property_id) -> Optional[Bookmark]:
    return db.scalar(
        select(Bookmark).where(
            Bookmark.user_email == user_email,
            Bookmark.property_id == property_id,
        )
    )


def add(db: Session, user_email: Any, property_id: Any) -> BookmarkResponse:
    email = normalize_email(user_email)
    prop = find_property(db, property_id)
    pid = prop.id

    try:
        if _find_existing(db, email, pid) is not None:
            raise ConflictError("Property already bookmarked")

        bookmark = Bookmark(user_email=email, property_id=pid)
        db.add(bookmark)
        db.commit()
    except IntegrityError:
        db.rollback()
        # Lost a race: either a twin insert committed first, or the property
        # was deleted between the existence check and the insert.
        if db.get(Property, pid, populate_existing=True) is None:
            raise NotFoundError("Property not found")
        logger.info("Concurrent duplicate bookmark rejected for %s / %s", email, pid)
        raise ConflictError("Property already bookmarked")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to add bookmark for %s / %s: %s", email, pid, e, exc_info=True)
        raise StorageError("Failed to add bookmark") from e

    logger.info("Bookmarked property %s for %s", pid, email)
    return _expand(bookmark, prop)


def remove(db: Session, bookmark_id: Any) -> None:
    bid = parse_id(bookmark_id, "bookmark ID")
    try:
        bookmark = db.get(Bookmark, bid)
        if bookmark is None:
            raise NotFoundError("Bookmark not found")
        db.delete(bookmark)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to remove bookmark %s: %s", bid, e, exc_info=True)
        raise StorageError("Failed to remove bookmark") from e

    logger.info("Removed bookmark %s", bid)


def list_for_user(db: Session, user_email: Any) -> List[BookmarkResponse]:
    """All of a user's bookmarks, newest first, each with its property."""
    email = normalize_email(user_email)
    # Inner join: a bookmark without its property is never returned
    stmt = (
        select(Bookmark, Property)
        .join(Property, Bookmark.property_id == Property.id)
        .where(Bookmark.user_email == email)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
    )
    try:
        rows = db.execute(stmt).all()
    except SQLAlchemyError as e:
        logger.error("Failed to list bookmarks for %s: %s", email, e, exc_info=True)
        raise StorageError("Failed to list bookmarks") from e

    return [_expand(bookmark, prop) for bookmark, prop in rows]
