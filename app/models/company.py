from sqlalchemy import Column, String, Integer, Text, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
import enum

class EmployeeRole(str, enum.Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"
    SUPERVISOR = "supervisor"

class Company(BaseModel):
    __tablename__ = "companies"

    # Profile
    name = Column(String(200), nullable=False)
    logo = Column(String(500), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    industry = Column(String(100), nullable=False, default="")
    website = Column(String(255), nullable=False, default="")
    founded_year = Column(Integer, nullable=True)
    employee_count = Column(Integer, nullable=False, default=1)

    # Contact
    email = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")

    # Address
    street = Column(String(255), nullable=False, default="")
    city = Column(String(100), nullable=False, default="")
    state = Column(String(100), nullable=False, default="")
    zip_code = Column(String(20), nullable=False, default="")
    country = Column(String(100), nullable=False, default="")

    # Social media
    linkedin = Column(String(255), nullable=False, default="")
    twitter = Column(String(255), nullable=False, default="")
    facebook = Column(String(255), nullable=False, default="")
    instagram = Column(String(255), nullable=False, default="")

    employees = relationship("Employee", back_populates="company", cascade="all, delete-orphan")

class Employee(BaseModel):
    __tablename__ = "employees"

    username = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(Enum(EmployeeRole), nullable=False, default=EmployeeRole.EMPLOYEE)
    company_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    company = relationship("Company", back_populates="employees")
