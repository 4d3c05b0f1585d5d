from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import bind_positional, sql_for_partial_update, where_placeholder
from jobly.services.base import BaseService

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'


def _equity_out(value: Any) -> Optional[Decimal]:
    # PostgreSQL hands back Decimal, SQLite a float; normalise to the shortest exact Decimal
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_storage(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Decimal is not a bindable type on every driver; equity travels as float."""
    return {
        key: float(value) if isinstance(value, Decimal) else value
        for key, value in data.items()
    }


def job_from_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    job = dict(row)
    if "equity" in job:
        job["equity"] = _equity_out(job["equity"])
    return job


class JobService(BaseService):
    """Related functions for jobs."""

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a job (from data), update db, return new job data.

        data should be { title, salary, equity, companyHandle }

        Returns { id, title, salary, equity, companyHandle }

        Throws NotFoundError if the company does not exist; nothing is inserted.
        """
        handle = data["companyHandle"]
        company = self._fetch_one(
            "SELECT handle FROM companies WHERE handle = :handle",
            {"handle": handle},
        )
        if not company:
            raise NotFoundError(f"No company: {handle}")

        params = _to_storage({
            "title": data["title"],
            "salary": data.get("salary"),
            "equity": data.get("equity"),
            "company_handle": handle,
        })
        try:
            row = self._write_one(
                f"""INSERT INTO jobs (title, salary, equity, company_handle)
                    VALUES (:title, :salary, :equity, :company_handle)
                    RETURNING {JOB_COLUMNS}""",
                params,
            )
        except IntegrityError:
            # The company was removed between the check and the insert
            self.log_warning(f"Job insert rejected by storage for company {handle}", handle=handle)
            raise NotFoundError(f"No company: {handle}")

        job = job_from_row(row)
        self.log_info(f"Created job {job['id']}", job_id=job["id"], handle=handle)
        return job

    def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find all jobs, optionally filtered (all filters are ANDed):

        - title: case-insensitive substring of the title
        - minSalary: salary >= minSalary
        - hasEquity: when true, only jobs with equity > 0.
          false or absent puts no constraint on equity at all.

        Returns [{ id, title, salary, equity, companyHandle }, ...] ordered by id.
        """
        filters = filters or {}
        title = filters.get("title")
        min_salary = filters.get("minSalary")
        has_equity = filters.get("hasEquity")

        where, params = [], {}
        if title:
            where.append("LOWER(title) LIKE :title")
            params["title"] = f"%{title.lower()}%"
        if min_salary is not None:
            where.append("salary >= :min_salary")
            params["min_salary"] = min_salary
        # Accepts a bool or the raw query-string form ("true"/"false")
        if str(has_equity).lower() == "true":
            where.append("equity > 0")

        sql = f"SELECT {JOB_COLUMNS} FROM jobs"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY id"

        return [job_from_row(row) for row in self._fetch_all(sql, params)]

    def get(self, job_id: int) -> Dict[str, Any]:
        """
        Given a job id, return data about job.

        Returns { id, title, salary, equity, company }
          where company is { handle, name, description, numEmployees, logoUrl }

        Throws NotFoundError if not found.
        """
        row = self._fetch_one(
            """SELECT j.id,
                      j.title,
                      j.salary,
                      j.equity,
                      c.handle,
                      c.name,
                      c.description,
                      c.num_employees AS "numEmployees",
                      c.logo_url AS "logoUrl"
               FROM jobs AS j
               JOIN companies AS c ON j.company_handle = c.handle
               WHERE j.id = :id""",
            {"id": job_id},
        )
        if not row:
            raise NotFoundError(f"No job: {job_id}")

        return {
            "id": row["id"],
            "title": row["title"],
            "salary": row["salary"],
            "equity": _equity_out(row["equity"]),
            "company": {
                "handle": row["handle"],
                "name": row["name"],
                "description": row["description"],
                "numEmployees": row["numEmployees"],
                "logoUrl": row["logoUrl"],
            },
        }

    def update(self, job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update job data with `data`.

        This is a "partial update": only the provided fields change.
        Data can include: { title, salary, equity }

        Returns { id, title, salary, equity, companyHandle }

        Throws NotFoundError if not found, BadRequestError if data is empty.
        """
        set_cols, values = sql_for_partial_update(_to_storage(data))
        id_var = where_placeholder(values)

        try:
            row = self._write_one(
                f"""UPDATE jobs
                    SET {set_cols}
                    WHERE id = {id_var}
                    RETURNING {JOB_COLUMNS}""",
                bind_positional(values, job_id),
            )
        except IntegrityError:
            self.log_warning(f"Job update rejected by storage: {job_id}", job_id=job_id)
            raise BadRequestError(f"Invalid update for job: {job_id}")
        if not row:
            raise NotFoundError(f"No job: {job_id}")

        self.log_info(f"Updated job {job_id}", job_id=job_id, fields=list(data))
        return job_from_row(row)

    def remove(self, job_id: int) -> None:
        """Delete given job from database. Throws NotFoundError if job not found."""
        row = self._write_one(
            "DELETE FROM jobs WHERE id = :id RETURNING id",
            {"id": job_id},
        )
        if not row:
            raise NotFoundError(f"No job: {job_id}")

        self.log_info(f"Removed job {job_id}", job_id=job_id)
