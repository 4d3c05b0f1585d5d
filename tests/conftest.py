import pytest
import os

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from jobly.core.security import create_token
from jobly.database import Database, get_db
from jobly.main import app
from jobly.services.base import BaseService
from jobly.services.companies import CompanyService
from jobly.services.jobs import JobService
from jobly.services.users import UserService
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def database():
    """A fresh in-memory schema for each test function."""
    db = Database(SQLALCHEMY_DATABASE_URL)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture(scope="function")
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture(scope="function")
def seeded(db_session):
    """
    Companies c1..c3, jobs t1..t3 (salary 5/10/15, equity 0.2/0.4/0.6),
    users u1, u2 and the admin u3; u1 has applied to jobs 1 and 2.
    Returns the ids of the three jobs in creation order.
    """
    companies = CompanyService(db_session)
    for n in (1, 2, 3):
        companies.create({
            "handle": f"c{n}",
            "name": f"C{n}",
            "numEmployees": n,
            "description": f"Desc{n}",
            "logoUrl": f"http://c{n}.img",
        })

    jobs = JobService(db_session)
    job_ids = [
        jobs.create({"title": title, "salary": salary, "equity": equity, "companyHandle": handle})["id"]
        for title, salary, equity, handle in (
            ("t1", 5, 0.2, "c1"),
            ("t2", 10, 0.4, "c2"),
            ("t3", 15, 0.6, "c3"),
        )
    ]

    users = UserService(db_session)
    for n, is_admin in ((1, False), (2, False), (3, True)):
        users.register({
            "username": f"u{n}",
            "firstName": f"U{n}F",
            "lastName": f"U{n}L",
            "email": f"user{n}@user.com",
            "password": f"password{n}",
            "isAdmin": is_admin,
        })
    users.apply_for_job("u1", job_ids[0])
    users.apply_for_job("u1", job_ids[1])

    return job_ids


@pytest.fixture(scope="function")
def u1_token():
    return create_token({"username": "u1", "isAdmin": False})


@pytest.fixture(scope="function")
def admin_token():
    return create_token({"username": "u3", "isAdmin": True})


@pytest.fixture(scope="function")
def auth_header():
    """Helper fixture to build a bearer Authorization header."""
    def _auth_header(token):
        return {"Authorization": f"Bearer {token}"}
    return _auth_header


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def stale_lookup(monkeypatch):
    """
    Make a service's existence check see a stale answer, as if another request
    changed the row between the check and the write.

    stale_lookup("FROM jobs WHERE id", {"id": 1}) answers the first matching
    lookup with the given row (or None); later lookups hit the database again.
    """
    real_fetch_one = BaseService._fetch_one

    def _stale_lookup(sql_fragment, result, times=1):
        remaining = {"count": times}

        def fetch_one(self, sql, params=None):
            if sql_fragment in sql and remaining["count"] > 0:
                remaining["count"] -= 1
                return result
            return real_fetch_one(self, sql, params)

        monkeypatch.setattr(BaseService, "_fetch_one", fetch_one)

    return _stale_lookup
