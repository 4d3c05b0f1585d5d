from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from jobly.database import get_db
from jobly.routers.auth_deps import require_admin
from jobly.schemas.base import MAX_SQL_INT
from jobly.schemas.job import (
    JobDeleted, JobDetailEnvelope, JobEnvelope, JobList, JobNew, JobUpdate,
)
from jobly.services.jobs import JobService

JobId = Annotated[int, Path(ge=0, le=MAX_SQL_INT)]

router = APIRouter(
    prefix="/jobs",
    tags=["Jobs"],
)


@router.post(
    "",
    response_model=JobEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_job(job_in: JobNew, db: Session = Depends(get_db)):
    """
    Create a job posting for an existing company.
    Returns { job: { id, title, salary, equity, companyHandle } }

    Authorization required: admin
    """
    job = JobService(db).create(job_in.model_dump(by_alias=True))
    return {"job": job}


@router.get("", response_model=JobList)
def list_jobs(
    title: Optional[str] = Query(None, min_length=1),
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0, le=MAX_SQL_INT),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    db: Session = Depends(get_db),
):
    """
    List jobs, optionally filtered by title, minSalary and hasEquity.
    hasEquity=false does not filter anything out.

    Authorization required: none
    """
    filters = {
        "title": title,
        "minSalary": min_salary,
        "hasEquity": has_equity,
    }
    return {"jobs": JobService(db).find_all(filters)}


@router.get("/{job_id}", response_model=JobDetailEnvelope)
def get_job(job_id: JobId, db: Session = Depends(get_db)):
    """
    Job details with the owning company nested under `company`.

    Authorization required: none
    """
    return {"job": JobService(db).get(job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope, dependencies=[Depends(require_admin)])
def update_job(job_id: JobId, job_in: JobUpdate, db: Session = Depends(get_db)):
    """
    Partial update: fields can be { title, salary, equity }

    Authorization required: admin
    """
    job = JobService(db).update(job_id, job_in.changes())
    return {"job": job}


@router.delete("/{job_id}", response_model=JobDeleted, dependencies=[Depends(require_admin)])
def delete_job(job_id: JobId, db: Session = Depends(get_db)):
    """Authorization required: admin"""
    JobService(db).remove(job_id)
    return {"deleted": job_id}
