"""
Runs a CompiledQuery against the record store and returns one page.

Ordering contract:
  - without `near`: requested or default sort key, then created_at ASC,
                    then id ASC
  - with `near`:    distance ASC, then an explicitly requested sort key,
                    then created_at ASC, then id ASC
Distance ordering always wins when a radius filter is present; an explicit
sort only breaks distance ties, and the default sort is not applied at all.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StorageError
from app.core.geo import distance_meters, within_meters
from app.core.logging import get_logger
from app.models.property import Property
from app.schemas.property import PropertyResponse
from app.services.filter_compiler import CompiledQuery, PropertyFilter, SortSpec

logger = get_logger(__name__)

SORT_COLUMNS = {
    "createdAt": Property.created_at,
    "name": Property.name,
    "city": Property.city,
    "state": Property.state,
    "monthlyIncome": Property.monthly_income,
    "totalWealth": Property.total_wealth,
    "age": Property.owner_age,
}


@dataclass(frozen=True)
class QueryPage:
    items: List[PropertyResponse] = field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    current_page: int = 1
    page_size: int = 0


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _distance_expr(filters: PropertyFilter, dialect_name: str):
    near = filters.near
    return distance_meters(Property.location, near.longitude, near.latitude, dialect_name)


def build_conditions(filters: PropertyFilter, dialect_name: str = "postgresql") -> list:
    """Translate a PropertyFilter into SQLAlchemy WHERE clauses."""
    conditions = []

    if filters.name:
        conditions.append(Property.name.ilike(_like_pattern(filters.name), escape="\\"))
    if filters.city:
        conditions.append(Property.city.ilike(_like_pattern(filters.city), escape="\\"))
    if filters.state:
        conditions.append(Property.state.ilike(_like_pattern(filters.state), escape="\\"))

    if filters.min_income is not None:
        conditions.append(Property.monthly_income >= filters.min_income)
    if filters.max_income is not None:
        conditions.append(Property.monthly_income <= filters.max_income)

    if filters.near is not None:
        near = filters.near
        conditions.append(
            within_meters(Property.location, near.longitude, near.latitude, near.max_distance_m, dialect_name)
        )

    return conditions


def build_ordering(sort: SortSpec, distance=None) -> list:
    column = SORT_COLUMNS.get(sort.field, Property.created_at)
    ordering = []
    if distance is not None:
        ordering.append(distance.asc())
        if not sort.explicit:
            column = None
    if column is not None:
        ordering.append(column.desc() if sort.descending else column.asc())
    if column is not Property.created_at:
        ordering.append(Property.created_at.asc())
    ordering.append(Property.id.asc())
    return ordering


def total_pages_for(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if total_count else 0


def execute(db: Session, query: CompiledQuery) -> QueryPage:
    """Count all matches, then fetch the requested window as snapshots."""
    dialect_name = db.get_bind().dialect.name
    conditions = build_conditions(query.filters, dialect_name)
    distance = _distance_expr(query.filters, dialect_name) if query.filters.near is not None else None

    try:
        total_count = db.scalar(
            select(func.count()).select_from(Property).where(*conditions)
        ) or 0

        items: List[PropertyResponse] = []
        if total_count and query.offset < total_count:
            if distance is not None:
                stmt = select(Property, distance.label("distance"))
            else:
                stmt = select(Property)
            stmt = (
                stmt.where(*conditions)
                .order_by(*build_ordering(query.sort, distance))
                .offset(query.offset)
                .limit(query.page_size)
            )

            if distance is not None:
                items = [PropertyResponse.from_record(prop, dist) for prop, dist in db.execute(stmt).all()]
            else:
                items = [PropertyResponse.from_record(prop) for prop in db.scalars(stmt).all()]
    except SQLAlchemyError as e:
        logger.error("Property query failed: %s", e, exc_info=True)
        raise StorageError("Property query failed") from e

    logger.debug(
        "Property query matched %d (page %d, size %d, sort %s_%s)",
        total_count, query.page, query.page_size, query.sort.field, query.sort.direction,
    )

    return QueryPage(
        items=items,
        total_count=total_count,
        total_pages=total_pages_for(total_count, query.page_size),
        current_page=query.page,
        page_size=query.page_size,
    )
