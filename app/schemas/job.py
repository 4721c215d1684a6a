from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator, model_validator
from typing import List, Optional


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    model_config = ConfigDict(extra="forbid")

    title: StrictStr = Field(..., min_length=1)
    salary: Optional[StrictInt] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1, description="Fraction of the company, 0 to 1")
    company_handle: StrictStr = Field(..., min_length=1, max_length=25)


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    Only the keys present in the request are written. The id is immutable;
    title and company_handle cannot be null.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[StrictStr] = Field(None, min_length=1)
    salary: Optional[StrictInt] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: Optional[StrictStr] = Field(None, min_length=1, max_length=25)

    @model_validator(mode="before")
    @classmethod
    def reject_id_change(cls, data):
        if isinstance(data, dict) and "id" in data:
            raise ValueError("id cannot be changed")
        return data

    @field_validator("title", "company_handle")
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class JobFilters(BaseModel):
    """
    Optional filters for listing jobs.

    has_equity only filters when it is the string "true". The employee
    bounds carry no job filter of their own but are range-checked like the
    company ones.
    """
    title: Optional[str] = None
    min_salary: Optional[int] = None
    has_equity: Optional[str] = None
    company_handle: Optional[str] = None
    min_employees: Optional[int] = None
    max_employees: Optional[int] = None


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None
    company_handle: str


class JobCreateResponse(BaseModel):
    new_job: JobResponse = Field(..., alias="newJob")


class JobListResponse(BaseModel):
    jobs: List[JobResponse]


class JobUpdateResponse(BaseModel):
    job: JobResponse
