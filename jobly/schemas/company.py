from decimal import Decimal
from typing import ClassVar, FrozenSet, List, Optional

from pydantic import Field

from jobly.schemas.base import MAX_SQL_INT, CamelModel, PartialUpdate, RequestModel


class CompanyNew(RequestModel):
    """Schema for creating a new company."""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, le=MAX_SQL_INT)
    logo_url: Optional[str] = None


class CompanyUpdate(PartialUpdate):
    """Schema for updating a company. The handle is not updatable."""
    not_nullable: ClassVar[FrozenSet[str]] = frozenset({"name", "description"})

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, le=MAX_SQL_INT)
    logo_url: Optional[str] = None


class CompanyResponse(CamelModel):
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyJob(CamelModel):
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None


class CompanyDetail(CompanyResponse):
    jobs: List[CompanyJob] = []


class CompanyEnvelope(CamelModel):
    company: CompanyResponse


class CompanyDetailEnvelope(CamelModel):
    company: CompanyDetail


class CompanyList(CamelModel):
    companies: List[CompanyResponse]


class CompanyDeleted(CamelModel):
    deleted: str
