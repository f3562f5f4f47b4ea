"""
Spatial expressions for radius search over the properties.location column.

The column is a PostGIS / SpatiaLite POINT in WGS84 (SRID 4326). Distances
are meters on the WGS84 spheroid on both backends:

  - PostgreSQL: ST_DWithin / ST_Distance over the geography cast, which the
    GiST index on CAST(location AS geography) serves
  - SQLite:     SpatiaLite's PtDistWithin / ST_Distance with use_ellipsoid=1
"""

from geoalchemy2 import Geography, Geometry
from geoalchemy2.elements import WKTElement
from sqlalchemy import cast, func

SRID = 4326
POINT = Geometry(geometry_type="POINT", srid=SRID, spatial_index=True)
GEOGRAPHY_POINT = Geography(geometry_type="POINT", srid=SRID)


def point_wkt(longitude: float, latitude: float) -> str:
    return "POINT(%.9f %.9f)" % (longitude, latitude)


def point_element(longitude: float, latitude: float) -> WKTElement:
    """Bind value for a Geometry POINT column."""
    return WKTElement(point_wkt(longitude, latitude), srid=SRID)


def _center(longitude: float, latitude: float):
    return func.ST_GeomFromText(point_wkt(longitude, latitude), SRID, type_=POINT)


def distance_meters(column, longitude: float, latitude: float, dialect_name: str):
    """SQL expression: meters between `column` and the given point."""
    center = _center(longitude, latitude)
    if dialect_name == "sqlite":
        return func.ST_Distance(column, center, 1)
    return func.ST_Distance(cast(column, GEOGRAPHY_POINT), cast(center, GEOGRAPHY_POINT))


def within_meters(column, longitude: float, latitude: float, meters: float, dialect_name: str):
    """SQL predicate: `column` lies within `meters` of the given point."""
    center = _center(longitude, latitude)
    if dialect_name == "sqlite":
        return func.PtDistWithin(column, center, meters, 1) == 1
    return func.ST_DWithin(cast(column, GEOGRAPHY_POINT), cast(center, GEOGRAPHY_POINT), meters)
