from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ensure_admin
from app.crud import company as company_crud
from app.schemas.company import (
    CompanyCreateRequest,
    CompanyCreateResponse,
    CompanyDetailResponse,
    CompanyFilters,
    CompanyListResponse,
    CompanyUpdateRequest,
    CompanyUpdateResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", status_code=201, response_model=CompanyCreateResponse, dependencies=[Depends(ensure_admin)])
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new company.

    Admin only. Body: {handle, name, description, numEmployees, logoUrl}.
    Returns 400 if the handle is taken.
    """
    new_company = company_crud.create(db, request)
    return {"newCompany": new_company}


@router.get("", response_model=CompanyListResponse)
def list_companies(
    name: Optional[str] = None,
    min_employees: Optional[int] = Query(None, alias="minEmployees"),
    max_employees: Optional[int] = Query(None, alias="maxEmployees"),
    db: Session = Depends(get_db)
):
    """
    List all companies ordered by name.

    Query filters (all optional, unknown parameters are ignored):
        name: case-insensitive substring of the name
        minEmployees / maxEmployees: employee count bounds (min may not exceed max)
    """
    filters = CompanyFilters(name=name, min_employees=min_employees, max_employees=max_employees)
    return {"companies": company_crud.find_all(db, filters)}


@router.get("/{handle}", response_model=CompanyDetailResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Retrieve a company with a summary of its jobs.
    """
    return company_crud.get(db, handle)


@router.patch("/{handle}", response_model=CompanyUpdateResponse, dependencies=[Depends(ensure_admin)])
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a company.

    Admin only. Body may hold any of name, description, numEmployees,
    logoUrl; the handle cannot be changed.
    """
    company = company_crud.update(db, handle, request.model_dump(exclude_unset=True, by_alias=True))
    return {"company": company}


@router.delete("/{handle}", dependencies=[Depends(ensure_admin)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    """
    Delete a company and its jobs.
    """
    company_crud.remove(db, handle)
    return {"deleted": handle}
