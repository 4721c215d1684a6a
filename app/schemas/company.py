from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator, model_validator
from typing import List, Optional

from app.schemas.job import JobResponse


class CompanyCreateRequest(BaseModel):
    """Schema for creating a new company"""
    model_config = ConfigDict(extra="forbid")

    handle: StrictStr = Field(..., min_length=1, max_length=25)
    name: StrictStr = Field(..., min_length=1)
    description: StrictStr
    num_employees: Optional[StrictInt] = Field(None, alias="numEmployees", ge=0)
    logo_url: Optional[StrictStr] = Field(None, alias="logoUrl")


class CompanyUpdateRequest(BaseModel):
    """
    Schema for a partial company update.

    Only the keys present in the request are written; an explicit null
    clears numEmployees or logoUrl. name and description cannot be null,
    and the handle is immutable.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[StrictStr] = Field(None, min_length=1)
    description: Optional[StrictStr] = None
    num_employees: Optional[StrictInt] = Field(None, alias="numEmployees", ge=0)
    logo_url: Optional[StrictStr] = Field(None, alias="logoUrl")

    @model_validator(mode="before")
    @classmethod
    def reject_handle_change(cls, data):
        if isinstance(data, dict) and "handle" in data:
            raise ValueError("handle cannot be changed")
        return data

    @field_validator("name", "description")
    @classmethod
    def reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class CompanyFilters(BaseModel):
    """Optional filters for listing companies"""
    name: Optional[str] = None
    min_employees: Optional[int] = None
    max_employees: Optional[int] = None


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")


class CompanyDetailResponse(CompanyResponse):
    """Company with a summary of its jobs"""
    jobs: List[JobResponse] = []


class CompanyCreateResponse(BaseModel):
    new_company: CompanyResponse = Field(..., alias="newCompany")


class CompanyListResponse(BaseModel):
    companies: List[CompanyResponse]


class CompanyUpdateResponse(BaseModel):
    company: CompanyResponse
