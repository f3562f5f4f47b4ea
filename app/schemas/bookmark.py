from pydantic import Field
from uuid import UUID
from app.schemas.property import CamelModel, PropertyResponse, UtcDateTime


class BookmarkCreate(CamelModel):
    property_id: str
    # Opaque user identity; trimmed and lower-cased by the guard
    user_email: str = Field(..., min_length=1)


class BookmarkResponse(CamelModel):
    id: UUID
    user_email: str
    property: PropertyResponse
    created_at: UtcDateTime


class MessageResponse(CamelModel):
    message: str
