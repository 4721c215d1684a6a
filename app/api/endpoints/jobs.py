from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ensure_admin
from app.crud import job as job_crud
from app.schemas.job import (
    JobCreateRequest,
    JobCreateResponse,
    JobFilters,
    JobListResponse,
    JobResponse,
    JobUpdateRequest,
    JobUpdateResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", status_code=201, response_model=JobCreateResponse, dependencies=[Depends(ensure_admin)])
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new job posting.

    Admin only. Body: {title, salary, equity, company_handle}.
    Returns 400 if the same posting already exists.
    """
    new_job = job_crud.create(db, request)
    return {"newJob": new_job}


@router.get("", response_model=JobListResponse)
def list_jobs(
    title: Optional[str] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary"),
    has_equity: Optional[str] = Query(None, alias="hasEquity"),
    company_handle: Optional[str] = None,
    min_employees: Optional[int] = Query(None, alias="minEmployees"),
    max_employees: Optional[int] = Query(None, alias="maxEmployees"),
    db: Session = Depends(get_db)
):
    """
    List all jobs ordered by title.

    Query filters (all optional, unknown parameters are ignored):
        title: case-insensitive substring of the title
        minSalary: lowest salary to include
        hasEquity: "true" to only list jobs offering equity
        company_handle: exact company handle
    """
    filters = JobFilters(
        title=title,
        min_salary=min_salary,
        has_equity=has_equity,
        company_handle=company_handle,
        min_employees=min_employees,
        max_employees=max_employees,
    )
    return {"jobs": job_crud.find_all(db, filters)}


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.
    """
    return job_crud.get(db, job_id)


@router.patch("/{job_id}", response_model=JobUpdateResponse, dependencies=[Depends(ensure_admin)])
def update_job(
    job_id: str,
    request: JobUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a job.

    Admin only. Body may hold any of title, salary, equity, company_handle;
    the id cannot be changed.
    """
    job = job_crud.update(db, job_id, request.model_dump(exclude_unset=True))
    return {"job": job}


@router.delete("/{job_id}", dependencies=[Depends(ensure_admin)])
def delete_job(job_id: str, db: Session = Depends(get_db)):
    """
    Delete a job by ID.
    """
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
