from datetime import datetime, timezone
from pydantic import EmailStr, Field, field_validator
from typing import Optional
from uuid import UUID
from app.models.company import Company, Employee, EmployeeRole
from app.schemas.property import CamelModel, UtcDateTime


# ─── Company profile ──────────────────────────────────────────────────────────

class CompanyAddress(CamelModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


class SocialMedia(CamelModel):
    linkedin: str = ""
    twitter: str = ""
    facebook: str = ""
    instagram: str = ""


class CompanyProfile(CamelModel):
    name: str = Field(..., min_length=1)
    logo: str = ""
    description: str = ""
    industry: str = ""
    website: str = ""
    email: str = ""
    phone: str = ""
    address: CompanyAddress = Field(default_factory=CompanyAddress)
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    founded_year: Optional[int] = None
    employee_count: int = Field(1, ge=1)

    @field_validator("founded_year")
    @classmethod
    def founded_year_in_range(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 1800 <= v <= datetime.now(timezone.utc).year:
            raise ValueError("founded_year must be between 1800 and the current year")
        return v


class CompanyResponse(CompanyProfile):
    id: UUID
    created_at: UtcDateTime
    updated_at: Optional[UtcDateTime] = None

    @classmethod
    def from_record(cls, company: Company) -> "CompanyResponse":
        return cls(
            id=company.id,
            name=company.name,
            logo=company.logo,
            description=company.description,
            industry=company.industry,
            website=company.website,
            email=company.email,
            phone=company.phone,
            address=CompanyAddress(
                street=company.street,
                city=company.city,
                state=company.state,
                zip_code=company.zip_code,
                country=company.country,
            ),
            social_media=SocialMedia(
                linkedin=company.linkedin,
                twitter=company.twitter,
                facebook=company.facebook,
                instagram=company.instagram,
            ),
            founded_year=company.founded_year,
            employee_count=company.employee_count,
            created_at=company.created_at,
            updated_at=company.updated_at,
        )


# ─── Employees ────────────────────────────────────────────────────────────────

class EmployeeCreate(CamelModel):
    username: str = Field(..., min_length=1)
    email: EmailStr
    role: EmployeeRole = EmployeeRole.EMPLOYEE


class EmployeeResponse(CamelModel):
    id: UUID
    username: str
    email: str
    role: EmployeeRole
    company_name: str
    created_at: UtcDateTime

    @classmethod
    def from_record(cls, employee: Employee) -> "EmployeeResponse":
        return cls(
            id=employee.id,
            username=employee.username,
            email=employee.email,
            role=employee.role,
            company_name=employee.company.name,
            created_at=employee.created_at,
        )


class EmployeeAddedResponse(CamelModel):
    message: str
    employee: EmployeeResponse

