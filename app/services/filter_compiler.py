"""
Turns the flat, loosely-typed query string of GET /properties into a
structured predicate plus a normalized page/sort spec.

Pure transformation: no I/O, no store access. The only failure is a
ValidationError for an unusable page or pageSize; every other malformed
input (bad income bound, half-numeric `near`, unknown sort field) is
dropped and the query runs as if it had not been supplied.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from app.core.exceptions import ValidationError

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = "createdAt"

# Public sort names → canonical field names understood by the executor
SORT_FIELDS = {
    "createdAt": "createdAt",
    "name": "name",
    "city": "city",
    "address.city": "city",
    "state": "state",
    "address.state": "state",
    "monthlyIncome": "monthlyIncome",
    "ownerDetails.monthlyIncome": "monthlyIncome",
    "totalWealth": "totalWealth",
    "ownerDetails.totalWealth": "totalWealth",
    "age": "age",
    "ownerDetails.age": "age",
}


@dataclass(frozen=True)
class GeoNear:
    longitude: float
    latitude: float
    max_distance_m: float


@dataclass(frozen=True)
class PropertyFilter:
    """Structured predicate over Property records. None means unconstrained."""

    name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    min_income: Optional[float] = None
    max_income: Optional[float] = None
    near: Optional[GeoNear] = None


@dataclass(frozen=True)
class SortSpec:
    field: str = DEFAULT_SORT_FIELD
    descending: bool = True
    # False when the default was used; lets distance ordering stand alone
    explicit: bool = False

    @property
    def direction(self) -> str:
        return "desc" if self.descending else "asc"


@dataclass(frozen=True)
class CompiledQuery:
    filters: PropertyFilter
    page: int
    page_size: int
    sort: SortSpec

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# ─── Parsing helpers ──────────────────────────────────────────────────────────

def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _finite_number(value: Any) -> Optional[float]:
    text = _text(value)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _positive_int(value: Any, name: str, default: int) -> int:
    text = _text(value)
    if text is None:
        return default
    try:
        number = int(text)
    except ValueError:
        raise ValidationError(f"{name} must be a positive integer")
    if number < 1:
        raise ValidationError(f"{name} must be a positive integer")
    return number


def parse_near(raw: Any) -> Optional[GeoNear]:
    """Parse 'lng,lat,maxDistanceMeters'; anything malformed yields None."""
    text = _text(raw)
    if text is None:
        return None

    parts = text.split(",")
    if len(parts) != 3:
        return None

    values = [_finite_number(p) for p in parts]
    if any(v is None for v in values):
        return None

    longitude, latitude, distance = values
    if not (-180 <= longitude <= 180 and -90 <= latitude <= 90) or distance < 0:
        return None
    return GeoNear(longitude=longitude, latitude=latitude, max_distance_m=distance)


def parse_sort(raw: Any) -> SortSpec:
    """Parse 'field_direction', e.g. 'createdAt_desc' or 'ownerDetails.monthlyIncome_asc'."""
    text = _text(raw)
    if text is None:
        return SortSpec()

    field, _, direction = text.rpartition("_")
    if not field:
        # No direction suffix: 'name' sorts ascending
        field, direction = direction, "asc"

    canonical = SORT_FIELDS.get(field)
    if canonical is None:
        return SortSpec()
    return SortSpec(field=canonical, descending=direction.lower() == "desc", explicit=True)


# ─── Entry point ──────────────────────────────────────────────────────────────

def compile_query(
    params: Mapping[str, Any],
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> CompiledQuery:
    page = _positive_int(params.get("page"), "page", DEFAULT_PAGE)

    raw_size = params.get("pageSize")
    if _text(raw_size) is None:
        raw_size = params.get("limit")
    page_size = _positive_int(raw_size, "pageSize", default_page_size)
    if page_size > max_page_size:
        raise ValidationError(f"pageSize must not exceed {max_page_size}")

    filters = PropertyFilter(
        name=_text(params.get("name")),
        city=_text(params.get("city")),
        state=_text(params.get("state")),
        min_income=_finite_number(params.get("minIncome")),
        max_income=_finite_number(params.get("maxIncome")),
        near=parse_near(params.get("near")),
    )

    return CompiledQuery(
        filters=filters,
        page=page,
        page_size=page_size,
        sort=parse_sort(params.get("sort")),
    )
