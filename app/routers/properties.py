from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.api.deps import require_admin
from app.schemas.property import (
    PropertyCreate, PropertyResponse, PropertyListResponse, PropertyDeleteResponse
)
from app.schemas.bookmark import BookmarkCreate, BookmarkResponse, MessageResponse
from app.services import bookmark_guard, property_store, query_executor
from app.services.filter_compiler import compile_query
from typing import List, Optional

router = APIRouter(prefix="/properties", tags=["Properties"])


# ─── LIST (public) ────────────────────────────────────────────────────────────
# Every filter arrives as a raw string: malformed `near` / income bounds are
# dropped by the compiler instead of being rejected here.

@router.get("", response_model=PropertyListResponse)
def list_properties(
    request: Request,
    db: Session = Depends(get_db),
    page: Optional[str] = Query(None, description="1-based page number"),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    limit: Optional[str] = Query(None, description="Legacy name for pageSize"),
    name: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    min_income: Optional[str] = Query(None, alias="minIncome"),
    max_income: Optional[str] = Query(None, alias="maxIncome"),
    near: Optional[str] = Query(None, description="lng,lat,maxDistanceMeters"),
    sort: Optional[str] = Query(None, description="field_direction, e.g. createdAt_desc"),
):
    """List properties with filtering, radius search, sorting and pagination."""
    settings = request.app.state.settings
    compiled = compile_query(
        {
            "page": page,
            "pageSize": page_size,
            "limit": limit,
            "name": name,
            "city": city,
            "state": state,
            "minIncome": min_income,
            "maxIncome": max_income,
            "near": near,
            "sort": sort,
        },
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )

    result = query_executor.execute(db, compiled)
    return PropertyListResponse(
        properties=result.items,
        total_pages=result.total_pages,
        current_page=result.current_page,
        total=result.total_count,
    )


# ─── ADMIN: create / update / delete ─────────────────────────────────────────

@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_property(payload: PropertyCreate, db: Session = Depends(get_db)):
    return property_store.create_property(db, payload)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    dependencies=[Depends(require_admin)],
)
def update_property(property_id: str, payload: PropertyCreate, db: Session = Depends(get_db)):
    """Replace a property's data. Existing bookmarks keep pointing at it."""
    return property_store.update_property(db, property_id, payload)


@router.delete(
    "/{property_id}",
    response_model=PropertyDeleteResponse,
    dependencies=[Depends(require_admin)],
)
def delete_property(property_id: str, db: Session = Depends(get_db)):
    """Delete a property. Its bookmarks are removed in the same transaction."""
    removed = property_store.delete_property(db, property_id)
    return PropertyDeleteResponse(message="Property deleted successfully", bookmarks_removed=removed)


# ─── Legacy bookmark routes (kept for older clients) ──────────────────────────

@router.get("/bookmarks/{user_email}", response_model=List[BookmarkResponse])
def list_user_bookmarks(user_email: str, db: Session = Depends(get_db)):
    return bookmark_guard.list_for_user(db, user_email)


@router.post("/bookmarks", response_model=BookmarkResponse, status_code=status.HTTP_201_CREATED)
def add_user_bookmark(payload: BookmarkCreate, db: Session = Depends(get_db)):
    return bookmark_guard.add(db, payload.user_email, payload.property_id)


@router.delete("/bookmarks/{bookmark_id}", response_model=MessageResponse)
def remove_user_bookmark(bookmark_id: str, db: Session = Depends(get_db)):
    bookmark_guard.remove(db, bookmark_id)
    return MessageResponse(message="Bookmark removed successfully")


# ─── GET single property (public) ────────────────────────────────────────────

@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(property_id: str, db: Session = Depends(get_db)):
    return property_store.get_property(db, property_id)
