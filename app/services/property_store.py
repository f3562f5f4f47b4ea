"""
Property lifecycle outside the query engine: creation (administration and
seeding), single fetch, full replacement, and deletion.

Deleting a property cascade-deletes its bookmarks in the same transaction,
so a listing never meets a bookmark whose property is gone. The
ON DELETE CASCADE foreign key on bookmarks.property_id covers any writer
that bypasses this module.
"""

from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, StorageError
from app.core.logging import get_logger
from app.models.bookmark import Bookmark
from app.models.property import Property
from app.schemas.property import PropertyCreate, PropertyResponse
from app.services.identifiers import parse_id

logger = get_logger(__name__)


def _apply(prop: Property, payload: PropertyCreate) -> Property:
    owner = payload.owner_details

    # ── Basic fields ──────────────────────────────────────────────────────────
    prop.name = payload.name
    prop.property_image = payload.property_image or None
    prop.street = payload.address.street
    prop.city = payload.address.city
    prop.state = payload.address.state
    prop.zip_code = payload.address.zip_code
    prop.longitude = payload.location.longitude
    prop.latitude = payload.location.latitude

    # ── Owner ─────────────────────────────────────────────────────────────────
    prop.owner_name = owner.owner_name
    prop.owner_age = owner.age
    prop.owner_sex = owner.sex
    prop.owner_email = str(owner.email)
    prop.owner_mobile_number = owner.mobile_number
    prop.owner_occupation = owner.occupation
    prop.monthly_income = owner.monthly_income
    prop.total_wealth = owner.total_wealth
    prop.owner_image = owner.owner_image or None
    return prop


def create_property(db: Session, payload: PropertyCreate) -> PropertyResponse:
    prop = _apply(Property(), payload)

    try:
        db.add(prop)
        db.commit()
        db.refresh(prop)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create property %r: %s", payload.name, e, exc_info=True)
        raise StorageError("Failed to create property") from e

    logger.info("Created property %s (%s)", prop.id, prop.name)
    return PropertyResponse.from_record(prop)


def find_property(db: Session, property_id: Any) -> Property:
    """Load a Property row or raise NotFoundError / InvalidIdentifierError."""
    pid = parse_id(property_id, "property ID")
    try:
        prop = db.get(Property, pid)
    except SQLAlchemyError as e:
        logger.error("Failed to load property %s: %s", pid, e, exc_info=True)
        raise StorageError("Failed to load property") from e

    if prop is None:
        raise NotFoundError("Property not found")
    return prop


def get_property(db: Session, property_id: Any) -> PropertyResponse:
    return PropertyResponse.from_record(find_property(db, property_id))


def update_property(db: Session, property_id: Any, payload: PropertyCreate) -> PropertyResponse:
    """Replace every stored field of a property; id and created_at are kept."""
    prop = _apply(find_property(db, property_id), payload)

    try:
        db.commit()
        db.refresh(prop)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to update property %s: %s", prop.id, e, exc_info=True)
        raise StorageError("Failed to update property") from e

    logger.info("Updated property %s", prop.id)
    return PropertyResponse.from_record(prop)


def delete_property(db: Session, property_id: Any) -> int:
    """Delete a property and its bookmarks atomically; returns bookmarks removed."""
    prop = find_property(db, property_id)

    try:
        result = db.execute(delete(Bookmark).where(Bookmark.property_id == prop.id))
        db.delete(prop)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to delete property %s: %s", prop.id, e, exc_info=True)
        raise StorageError("Failed to delete property") from e

    removed = result.rowcount or 0
    logger.info("Deleted property %s with %d bookmark(s)", prop.id, removed)
    return removed
