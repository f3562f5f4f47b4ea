from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List
from uuid import UUID
from datetime import datetime, timezone
import enum
from app.models.property import (
    Property, OwnerSex, DEFAULT_PROPERTY_IMAGE, DEFAULT_OWNER_IMAGE
)


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


def ensure_utc(value: datetime) -> datetime:
    # SQLite hands back naive values; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


# ─── Derived fields ───────────────────────────────────────────────────────────
# Computed at serialization time only; never stored.

class IncomeTier(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "VeryHigh"


def income_tier(monthly_income: float) -> IncomeTier:
    if monthly_income < 5000:
        return IncomeTier.LOW
    if monthly_income < 10000:
        return IncomeTier.MEDIUM
    if monthly_income < 20000:
        return IncomeTier.HIGH
    return IncomeTier.VERY_HIGH


def format_address(street: str, city: str, state: str, zip_code: str) -> str:
    return f"{street}, {city}, {state} {zip_code}"


# ─── Nested parts ─────────────────────────────────────────────────────────────

class Address(CamelModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)


class GeoPoint(CamelModel):
    longitude: float = Field(..., ge=-180, le=180)
    latitude: float = Field(..., ge=-90, le=90)


class OwnerDetails(CamelModel):
    owner_name: str = Field(..., min_length=1)
    age: int = Field(..., gt=0)
    sex: OwnerSex
    email: EmailStr
    mobile_number: str = Field(..., min_length=1)
    occupation: str = Field(..., min_length=1)
    monthly_income: float = Field(..., ge=0)
    total_wealth: float = Field(..., ge=0)
    owner_image: Optional[str] = None


# ─── Create Schema (administration / seeding path) ────────────────────────────

class PropertyCreate(CamelModel):
    name: str = Field(..., min_length=1)
    address: Address
    location: GeoPoint
    property_image: Optional[str] = None
    owner_details: OwnerDetails


# ─── Response Schemas ─────────────────────────────────────────────────────────

class PropertyResponse(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    address: Address
    location: GeoPoint
    property_image: str
    owner_details: OwnerDetails
    formatted_address: str
    income_tier: IncomeTier
    distance_meters: Optional[float] = None
    created_at: UtcDateTime
    updated_at: Optional[UtcDateTime] = None

    @classmethod
    def from_record(cls, prop: Property, distance_meters: Optional[float] = None) -> "PropertyResponse":
        """Snapshot a stored Property, filling placeholders and derived fields."""
        return cls(
            id=prop.id,
            name=prop.name,
            address=Address(
                street=prop.street,
                city=prop.city,
                state=prop.state,
                zip_code=prop.zip_code,
            ),
            location=GeoPoint(longitude=prop.longitude, latitude=prop.latitude),
            property_image=prop.property_image or DEFAULT_PROPERTY_IMAGE,
            # Stored rows were validated on the way in; skip re-checking emails
            owner_details=OwnerDetails.model_construct(
                owner_name=prop.owner_name,
                age=prop.owner_age,
                sex=prop.owner_sex,
                email=prop.owner_email,
                mobile_number=prop.owner_mobile_number,
                occupation=prop.owner_occupation,
                monthly_income=prop.monthly_income,
                total_wealth=prop.total_wealth,
                owner_image=prop.owner_image or DEFAULT_OWNER_IMAGE,
            ),
            formatted_address=format_address(prop.street, prop.city, prop.state, prop.zip_code),
            income_tier=income_tier(prop.monthly_income),
            distance_meters=round(distance_meters, 2) if distance_meters is not None else None,
            created_at=prop.created_at,
            updated_at=prop.updated_at,
        )


class PropertyListResponse(CamelModel):
    properties: List[PropertyResponse]
    total_pages: int
    current_page: int
    total: int


class PropertyDeleteResponse(CamelModel):
    message: str
    bookmarks_removed: int
