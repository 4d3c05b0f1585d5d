from decimal import Decimal
from typing import ClassVar, FrozenSet, List, Optional

from pydantic import Field

from jobly.schemas.base import MAX_SQL_INT, CamelModel, PartialUpdate, RequestModel
from jobly.schemas.company import CompanyResponse


class JobNew(RequestModel):
    """Schema for creating a new job posting."""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0, le=MAX_SQL_INT)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)


class JobUpdate(PartialUpdate):
    """Schema for updating a job. Neither the id nor the company can change."""
    not_nullable: ClassVar[FrozenSet[str]] = frozenset({"title"})

    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0, le=MAX_SQL_INT)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)


class JobResponse(CamelModel):
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company_handle: str


class JobDetail(CamelModel):
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company: CompanyResponse


class JobEnvelope(CamelModel):
    job: JobResponse


class JobDetailEnvelope(CamelModel):
    job: JobDetail


class JobList(CamelModel):
    jobs: List[JobResponse]


class JobDeleted(CamelModel):
    deleted: int
