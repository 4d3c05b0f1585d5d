from typing import Any, Dict, List, Mapping

from sqlalchemy.exc import IntegrityError

from jobly.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from jobly.core.security import get_password_hash, verify_password
from jobly.core.sql import bind_positional, sql_for_partial_update, where_placeholder
from jobly.services.base import BaseService

USER_COLUMNS = (
    'username, first_name AS "firstName", last_name AS "lastName", '
    'email, is_admin AS "isAdmin"'
)

JS_TO_SQL = {
    "firstName": "first_name",
    "lastName": "last_name",
}


def user_from_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    user = dict(row)
    user.pop("password", None)
    # SQLite stores booleans as 0/1
    user["isAdmin"] = bool(user["isAdmin"])
    return user


class UserService(BaseService):
    """Related functions for users."""

    def authenticate(self, username: str, password: str) -> Dict[str, Any]:
        """
        Authenticate user with username, password.

        Returns { username, firstName, lastName, email, isAdmin }

        Throws UnauthorizedError if user not found or wrong password.
        """
        row = self._fetch_one(
            f"SELECT {USER_COLUMNS}, password FROM users WHERE username = :username",
            {"username": username},
        )
        if row and verify_password(password, row["password"]):
            return user_from_row(row)

        self.log_info(f"Failed login for {username}", username=username)
        raise UnauthorizedError("Invalid username/password")

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Register user with data.

        Returns { username, firstName, lastName, email, isAdmin }

        Throws BadRequestError on duplicates.
        """
        username = data["username"]
        duplicate = self._fetch_one(
            "SELECT username FROM users WHERE username = :username",
            {"username": username},
        )
        if duplicate:
            raise BadRequestError(f"Duplicate username: {username}")

        try:
            row = self._write_one(
                f"""INSERT INTO users
                    (username, password, first_name, last_name, email, is_admin)
                    VALUES (:username, :password, :first_name, :last_name, :email, :is_admin)
                    RETURNING {USER_COLUMNS}""",
                {
                    "username": username,
                    "password": get_password_hash(data["password"]),
                    "first_name": data["firstName"],
                    "last_name": data["lastName"],
                    "email": data["email"],
                    "is_admin": bool(data.get("isAdmin", False)),
                },
            )
        except IntegrityError:
            self.log_warning(f"User insert rejected by storage: {username}", username=username)
            raise BadRequestError(f"Duplicate username: {username}")

        self.log_info(f"Registered user {username}", username=username)
        return user_from_row(row)

    def find_all(self) -> List[Dict[str, Any]]:
        """Find all users. Returns [{ username, firstName, lastName, email, isAdmin }, ...]"""
        rows = self._fetch_all(f"SELECT {USER_COLUMNS} FROM users ORDER BY username")
        return [user_from_row(row) for row in rows]

    def get(self, username: str) -> Dict[str, Any]:
        """
        Given a username, return data about user.

        Returns { username, firstName, lastName, email, isAdmin, jobs }
          where jobs is [jobId, ...]

        Throws NotFoundError if user not found.
        """
        row = self._fetch_one(
            f"SELECT {USER_COLUMNS} FROM users WHERE username = :username",
            {"username": username},
        )
        if not row:
            raise NotFoundError(f"No user: {username}")

        user = user_from_row(row)
        applications = self._fetch_all(
            "SELECT job_id FROM applications WHERE username = :username ORDER BY job_id",
            {"username": username},
        )
        user["jobs"] = [a["job_id"] for a in applications]
        return user

    def update(self, username: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update user data with `data`.

        This is a "partial update": only the provided fields change.
        Data can include: { firstName, lastName, password, email }

        Returns { username, firstName, lastName, email, isAdmin }

        Throws NotFoundError if not found, BadRequestError if data is empty.
        """
        data = dict(data)
        if data.get("password"):
            data["password"] = get_password_hash(data["password"])

        set_cols, values = sql_for_partial_update(data, JS_TO_SQL)
        username_var = where_placeholder(values)

        try:
            row = self._write_one(
                f"""UPDATE users
                    SET {set_cols}
                    WHERE username = {username_var}
                    RETURNING {USER_COLUMNS}""",
                bind_positional(values, username),
            )
        except IntegrityError:
            self.log_warning(f"User update rejected by storage: {username}", username=username)
            raise BadRequestError(f"Invalid update for user: {username}")

        if not row:
            raise NotFoundError(f"No user: {username}")

        # Never log the changed values, the password hash may be among them
        self.log_info(f"Updated user {username}", username=username, fields=sorted(data))
        return user_from_row(row)

    def remove(self, username: str) -> None:
        """Delete given user from database. Throws NotFoundError if user not found."""
        row = self._write_one(
            "DELETE FROM users WHERE username = :username RETURNING username",
            {"username": username},
        )
        if not row:
            raise NotFoundError(f"No user: {username}")

        self.log_info(f"Removed user {username}", username=username)

    def apply_for_job(self, username: str, job_id: int) -> Dict[str, Any]:
        """
        Apply for job: update db, returns { username, jobId }.

        Throws NotFoundError if the job or the user does not exist,
        BadRequestError if the user already applied to this job.
        """
        self._ensure_application_targets(username, job_id)

        already = self._fetch_one(
            "SELECT job_id FROM applications WHERE username = :username AND job_id = :job_id",
            {"username": username, "job_id": job_id},
        )
        if already:
            raise BadRequestError(f"Already applied: {username} to job {job_id}")

        try:
            row = self._write_one(
                """INSERT INTO applications (username, job_id)
                   VALUES (:username, :job_id)
                   RETURNING username, job_id AS "jobId"
                """,
                {"username": username, "job_id": job_id},
            )
        except IntegrityError:
            # Raced with a delete of the user/job, or with an identical application
            self.log_warning(
                f"Application insert rejected by storage: {username} -> {job_id}",
                username=username,
                job_id=job_id,
            )
            self._ensure_application_targets(username, job_id)
            raise BadRequestError(f"Already applied: {username} to job {job_id}")

        self.log_info(f"{username} applied to job {job_id}", username=username, job_id=job_id)
        return dict(row)

    def _ensure_application_targets(self, username: str, job_id: int) -> None:
        job = self._fetch_one("SELECT id FROM jobs WHERE id = :id", {"id": job_id})
        if not job:
            raise NotFoundError(f"No job: {job_id}")

        user = self._fetch_one(
            "SELECT username FROM users WHERE username = :username",
            {"username": username},
        )
        if not user:
            raise NotFoundError(f"No username: {username}")
