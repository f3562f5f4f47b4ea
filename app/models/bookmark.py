from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

class Bookmark(BaseModel):
    __tablename__ = "bookmarks"

    user_email = Column(String(255), nullable=False, index=True)
    property_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    property = relationship("Property")

    # At most one bookmark per (user, property); the guard relies on this
    # constraint, not on its own pre-check, to win races.
    __table_args__ = (
        UniqueConstraint("user_email", "property_id", name="uq_bookmarks_user_property"),
    )
