from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.api.deps import require_admin
from app.schemas.bookmark import MessageResponse
from app.schemas.company import EmployeeAddedResponse, EmployeeCreate, EmployeeResponse
from app.services import company_store
from typing import List

router = APIRouter(prefix="/employees", tags=["Employees"], dependencies=[Depends(require_admin)])


@router.post("/add", response_model=EmployeeAddedResponse, status_code=status.HTTP_201_CREATED)
def add_employee(payload: EmployeeCreate, db: Session = Depends(get_db)):
    """
    Add an employee to the company.
    404 if no company profile exists yet, 400 if the email is already taken.
    """
    employee = company_store.add_employee(db, payload)
    return EmployeeAddedResponse(message="Employee added successfully", employee=employee)


@router.get("", response_model=List[EmployeeResponse])
def list_employees(db: Session = Depends(get_db)):
    return company_store.list_employees(db)


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(employee_id: str, db: Session = Depends(get_db)):
    return company_store.get_employee(db, employee_id)


@router.delete("/{employee_id}", response_model=MessageResponse)
def remove_employee(employee_id: str, db: Session = Depends(get_db)):
    company_store.remove_employee(db, employee_id)
    return MessageResponse(message="Employee removed successfully")
