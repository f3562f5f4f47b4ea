from sqlalchemy import Column, DDL, String, Integer, Float, Enum, Index, event
from sqlalchemy.orm import deferred
from app.core.geo import POINT, point_element
from app.models.base import BaseModel
import enum

DEFAULT_PROPERTY_IMAGE = "https://via.placeholder.com/300x200?text=No+Image"
DEFAULT_OWNER_IMAGE = "https://via.placeholder.com/150x150?text=No+Image"

class OwnerSex(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

class Property(BaseModel):
    __tablename__ = "properties"

    # Basic Info
    name = Column(String(200), nullable=False, index=True)
    property_image = Column(String(500), nullable=True, default=DEFAULT_PROPERTY_IMAGE)

    # Address
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=False, index=True)
    zip_code = Column(String(20), nullable=False)

    # Location (WGS84). The coordinates are what the API reads and writes;
    # `location` mirrors them as a spatial point for radius search.
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    location = deferred(Column(POINT, nullable=False))

    # Owner details
    owner_name = Column(String(200), nullable=False)
    owner_age = Column(Integer, nullable=False)
    owner_sex = Column(Enum(OwnerSex), nullable=False)
    owner_email = Column(String(255), nullable=False)
    owner_mobile_number = Column(String(50), nullable=False)
    owner_occupation = Column(String(200), nullable=False)
    monthly_income = Column(Float, nullable=False, index=True)
    total_wealth = Column(Float, nullable=False)
    owner_image = Column(String(500), nullable=True, default=DEFAULT_OWNER_IMAGE)

    __table_args__ = (
        Index("ix_properties_city_state", "city", "state"),
        Index("ix_properties_income_occupation", "monthly_income", "owner_occupation"),
    )


@event.listens_for(Property, "before_insert")
@event.listens_for(Property, "before_update")
def _sync_location(mapper, connection, target):
    target.location = point_element(target.longitude, target.latitude)


# Radius queries cast to geography for meters on the spheroid; this index
# matches that expression. SpatiaLite uses the R*Tree from spatial_index=True.
event.listen(
    Property.__table__,
    "after_create",
    DDL(
        "CREATE INDEX IF NOT EXISTS ix_properties_location_geography "
        "ON properties USING gist ((CAST(location AS geography(POINT,4326))))"
    ).execute_if(dialect="postgresql"),
)
