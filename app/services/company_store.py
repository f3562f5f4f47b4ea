"""
The company profile and its employee roster.

A deployment manages one company: the profile is created by the first save
and updated in place afterwards. Employees and feedback hang off it, so
adding either before the profile exists is a NotFoundError.
"""

from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, StorageError
from app.core.logging import get_logger
from app.models.company import Company, Employee
from app.schemas.company import CompanyProfile, CompanyResponse, EmployeeCreate, EmployeeResponse
from app.services.identifiers import normalize_email, parse_id

logger = get_logger(__name__)


def find_company(db: Session) -> Optional[Company]:
    try:
        return db.scalars(select(Company).order_by(Company.created_at, Company.id).limit(1)).first()
    except SQLAlchemyError as e:
        logger.error("Failed to load company: %s", e, exc_info=True)
        raise StorageError("Failed to load company") from e


def require_company(db: Session) -> Company:
    company = find_company(db)
    if company is None:
        raise NotFoundError("Company not found")
    return company


def get_company(db: Session) -> CompanyResponse:
    return CompanyResponse.from_record(require_company(db))


def _apply(company: Company, payload: CompanyProfile) -> Company:
    # ── Profile ───────────────────────────────────────────────────────────────
    company.name = payload.name
    company.logo = payload.logo
    company.description = payload.description
    company.industry = payload.industry
    company.website = payload.website
    company.founded_year = payload.founded_year
    company.employee_count = payload.employee_count

    # ── Contact ───────────────────────────────────────────────────────────────
    company.email = payload.email.lower()
    company.phone = payload.phone
    company.street = payload.address.street
    company.city = payload.address.city
    company.state = payload.address.state
    company.zip_code = payload.address.zip_code
    company.country = payload.address.country

    # ── Social media ──────────────────────────────────────────────────────────
    company.linkedin = payload.social_media.linkedin
    company.twitter = payload.social_media.twitter
    company.facebook = payload.social_media.facebook
    company.instagram = payload.social_media.instagram
    return company


def save_company(db: Session, payload: CompanyProfile) -> CompanyResponse:
    """Create the company profile, or replace it if it already exists."""
    company = find_company(db)
    created = company is None
    company = _apply(company or Company(), payload)

    try:
        db.add(company)
        db.commit()
        db.refresh(company)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to save company %r: %s", payload.name, e, exc_info=True)
        raise StorageError("Failed to save company") from e

    logger.info("%s company %s (%s)", "Created" if created else "Updated", company.id, company.name)
    return CompanyResponse.from_record(company)


# ─── Employees ────────────────────────────────────────────────────────────────

def _employee_exists(db: Session, email: str) -> bool:
    return db.scalar(select(Employee.id).where(Employee.email == email)) is not None


def add_employee(db: Session, payload: EmployeeCreate) -> EmployeeResponse:
    company = require_company(db)
    email = normalize_email(payload.email)

    try:
        if _employee_exists(db, email):
            raise ConflictError("Employee with this email already exists")

        employee = Employee(username=payload.username, email=email, role=payload.role, company_id=company.id)
        db.add(employee)
        db.commit()
        db.refresh(employee)
    except IntegrityError:
        db.rollback()
        raise ConflictError("Employee with this email already exists")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to add employee %s: %s", email, e, exc_info=True)
        raise StorageError("Failed to add employee") from e

    logger.info("Added employee %s (%s) to company %s", employee.id, email, company.id)
    return EmployeeResponse.from_record(employee)


def list_employees(db: Session) -> List[EmployeeResponse]:
    company = require_company(db)
    stmt = (
        select(Employee)
        .where(Employee.company_id == company.id)
        .order_by(Employee.created_at, Employee.id)
    )
    try:
        employees = db.scalars(stmt).all()
    except SQLAlchemyError as e:
        logger.error("Failed to list employees: %s", e, exc_info=True)
        raise StorageError("Failed to list employees") from e
    return [EmployeeResponse.from_record(employee) for employee in employees]


def find_employee(db: Session, employee_id: Any) -> Employee:
    eid = parse_id(employee_id, "employee ID")
    try:
        employee = db.get(Employee, eid)
    except SQLAlchemyError as e:
        logger.error("Failed to load employee %s: %s", eid, e, exc_info=True)
        raise StorageError("Failed to load employee") from e

    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def get_employee(db: Session, employee_id: Any) -> EmployeeResponse:
    return EmployeeResponse.from_record(find_employee(db, employee_id))


def remove_employee(db: Session, employee_id: Any) -> None:
    employee = find_employee(db, employee_id)
    try:
        db.delete(employee)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to remove employee %s: %s", employee.id, e, exc_info=True)
        raise StorageError("Failed to remove employee") from e

    logger.info("Removed employee %s", employee.id)
