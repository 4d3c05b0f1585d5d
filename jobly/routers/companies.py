from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobly.database import get_db
from jobly.routers.auth_deps import require_admin
from jobly.schemas.base import MAX_SQL_INT
from jobly.schemas.company import (
    CompanyDeleted, CompanyDetailEnvelope, CompanyEnvelope, CompanyList,
    CompanyNew, CompanyUpdate,
)
from jobly.services.companies import CompanyService

router = APIRouter(
    prefix="/companies",
    tags=["Companies"],
)


@router.post(
    "",
    response_model=CompanyEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_company(company_in: CompanyNew, db: Session = Depends(get_db)):
    """
    Create a company. Returns { company: { handle, name, description, numEmployees, logoUrl } }

    Authorization required: admin
    """
    company = CompanyService(db).create(company_in.model_dump(by_alias=True))
    return {"company": company}


@router.get("", response_model=CompanyList)
def list_companies(
    name_like: Optional[str] = Query(None, alias="nameLike", min_length=1),
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0, le=MAX_SQL_INT),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0, le=MAX_SQL_INT),
    db: Session = Depends(get_db),
):
    """
    List companies, optionally filtered by nameLike, minEmployees, maxEmployees.

    Authorization required: none
    """
    filters = {
        "nameLike": name_like,
        "minEmployees": min_employees,
        "maxEmployees": max_employees,
    }
    companies = CompanyService(db).find_all(filters)
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Company details including its jobs.

    Authorization required: none
    """
    return {"company": CompanyService(db).get(handle)}


@router.patch("/{handle}", response_model=CompanyEnvelope, dependencies=[Depends(require_admin)])
def update_company(handle: str, company_in: CompanyUpdate, db: Session = Depends(get_db)):
    """
    Partial update: fields can be { name, description, numEmployees, logoUrl }

    Authorization required: admin
    """
    company = CompanyService(db).update(handle, company_in.changes())
    return {"company": company}


@router.delete("/{handle}", response_model=CompanyDeleted, dependencies=[Depends(require_admin)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    """Authorization required: admin"""
    CompanyService(db).remove(handle)
    return {"deleted": handle}
