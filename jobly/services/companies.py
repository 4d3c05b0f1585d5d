from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import bind_positional, sql_for_partial_update, where_placeholder
from jobly.services.base import BaseService
from jobly.services.jobs import job_from_row

COMPANY_COLUMNS = (
    'handle, name, description, '
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


class CompanyService(BaseService):
    """Related functions for companies."""

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a company (from data), update db, return new company data.

        data should be { handle, name, description, numEmployees, logoUrl }

        Throws BadRequestError if company already in database.
        """
        handle = data["handle"]
        duplicate = self._fetch_one(
            "SELECT handle FROM companies WHERE handle = :handle",
            {"handle": handle},
        )
        if duplicate:
            raise BadRequestError(f"Duplicate company: {handle}")

        try:
            row = self._write_one(
                f"""INSERT INTO companies
                    (handle, name, description, num_employees, logo_url)
                    VALUES (:handle, :name, :description, :num_employees, :logo_url)
                    RETURNING {COMPANY_COLUMNS}""",
                {
                    "handle": handle,
                    "name": data["name"],
                    "description": data["description"],
                    "num_employees": data.get("numEmployees"),
                    "logo_url": data.get("logoUrl"),
                },
            )
        except IntegrityError:
            self.log_warning(f"Company insert rejected by storage: {handle}", handle=handle)
            if self._name_taken(handle, data["name"]):
                raise BadRequestError(f"Duplicate company name: {data['name']}")
            raise BadRequestError(f"Duplicate company: {handle}")

        self.log_info(f"Created company {handle}", handle=handle)
        return dict(row)

    def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Find all companies, optionally filtered (all filters are ANDed):

        - nameLike: case-insensitive substring of name
        - minEmployees / maxEmployees: inclusive bounds on numEmployees

        Throws BadRequestError if minEmployees > maxEmployees.
        """
        filters = filters or {}
        min_employees = filters.get("minEmployees")
        max_employees = filters.get("maxEmployees")
        name_like = filters.get("nameLike")

        if min_employees is not None and max_employees is not None and min_employees > max_employees:
            raise BadRequestError("Min employees cannot be greater than max")

        where, params = [], {}
        if min_employees is not None:
            where.append("num_employees >= :min_employees")
            params["min_employees"] = min_employees
        if max_employees is not None:
            where.append("num_employees <= :max_employees")
            params["max_employees"] = max_employees
        if name_like:
            where.append("LOWER(name) LIKE :name_like")
            params["name_like"] = f"%{name_like.lower()}%"

        sql = f"SELECT {COMPANY_COLUMNS} FROM companies"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY name"

        return [dict(row) for row in self._fetch_all(sql, params)]

    def get(self, handle: str) -> Dict[str, Any]:
        """
        Given a company handle, return data about company.

        Returns { handle, name, description, numEmployees, logoUrl, jobs }
          where jobs is [{ id, title, salary, equity }, ...]

        Throws NotFoundError if not found.
        """
        row = self._fetch_one(
            f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = :handle",
            {"handle": handle},
        )
        if not row:
            raise NotFoundError(f"No company: {handle}")

        company = dict(row)
        jobs = self._fetch_all(
            """SELECT id, title, salary, equity
               FROM jobs
               WHERE company_handle = :handle
               ORDER BY id""",
            {"handle": handle},
        )
        company["jobs"] = [job_from_row(job) for job in jobs]
        return company

    def update(self, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update company data with `data`.

        This is a "partial update": only the provided fields change.
        Data can include: { name, description, numEmployees, logoUrl }

        Throws NotFoundError if not found, BadRequestError if data is empty.
        """
        set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
        handle_var = where_placeholder(values)

        try:
            row = self._write_one(
                f"""UPDATE companies
                    SET {set_cols}
                    WHERE handle = {handle_var}
                    RETURNING {COMPANY_COLUMNS}""",
                bind_positional(values, handle),
            )
        except IntegrityError:
            self.log_warning(f"Company update rejected by storage: {handle}", handle=handle)
            if data.get("name") and self._name_taken(handle, data["name"]):
                raise BadRequestError(f"Duplicate company name: {data['name']}")
            raise BadRequestError(f"Invalid update for company: {handle}")

        if not row:
            raise NotFoundError(f"No company: {handle}")

        self.log_info(f"Updated company {handle}", handle=handle, fields=list(data))
        return dict(row)

    def remove(self, handle: str) -> None:
        """Delete given company from database. Throws NotFoundError if company not found."""
        row = self._write_one(
            "DELETE FROM companies WHERE handle = :handle RETURNING handle",
            {"handle": handle},
        )
        if not row:
            raise NotFoundError(f"No company: {handle}")

        self.log_info(f"Removed company {handle}", handle=handle)

    def _name_taken(self, handle: str, name: str) -> bool:
        """True when another company already uses `name`."""
        row = self._fetch_one(
            "SELECT handle FROM companies WHERE name = :name AND handle <> :handle",
            {"name": name, "handle": handle},
        )
        return row is not None
