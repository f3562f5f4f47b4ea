from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.api.deps import require_admin
from app.schemas.company import CompanyProfile, CompanyResponse
from app.services import company_store

router = APIRouter(prefix="/company", tags=["Company"], dependencies=[Depends(require_admin)])


@router.get("", response_model=CompanyResponse)
def get_company(db: Session = Depends(get_db)):
    return company_store.get_company(db)


@router.post("", response_model=CompanyResponse)
def save_company(payload: CompanyProfile, db: Session = Depends(get_db)):
    """Create the company profile, or replace the existing one."""
    return company_store.save_company(db, payload)
