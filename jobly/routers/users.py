from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobly.core.security import create_token
from jobly.database import get_db
from jobly.routers.auth_deps import require_admin, require_admin_or_current_user
from jobly.routers.jobs import JobId
from jobly.schemas.user import (
    Applied, UserDeleted, UserDetailEnvelope, UserEnvelope, UserList,
    UserNew, UserUpdate, UserWithToken,
)
from jobly.services.users import UserService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@router.post(
    "",
    response_model=UserWithToken,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_user(user_in: UserNew, db: Session = Depends(get_db)):
    """
    Adds a new user. This is not the registration endpoint: it is only for
    admins adding users, and the new user may be an admin.

    Returns { user: { username, firstName, lastName, email, isAdmin }, token }

    Authorization required: admin
    """
    user = UserService(db).register(user_in.model_dump(by_alias=True))
    return {"user": user, "token": create_token(user)}


@router.get("", response_model=UserList, dependencies=[Depends(require_admin)])
def list_users(db: Session = Depends(get_db)):
    """Authorization required: admin"""
    return {"users": UserService(db).find_all()}


@router.get(
    "/{username}",
    response_model=UserDetailEnvelope,
    dependencies=[Depends(require_admin_or_current_user)],
)
def get_user(username: str, db: Session = Depends(get_db)):
    """
    Returns { user: { username, firstName, lastName, email, isAdmin, jobs } }

    Authorization required: admin or the same user
    """
    return {"user": UserService(db).get(username)}


@router.patch(
    "/{username}",
    response_model=UserEnvelope,
    dependencies=[Depends(require_admin_or_current_user)],
)
def update_user(username: str, user_in: UserUpdate, db: Session = Depends(get_db)):
    """
    Partial update: fields can be { firstName, lastName, password, email }

    Authorization required: admin or the same user
    """
    user = UserService(db).update(username, user_in.changes())
    return {"user": user}


@router.delete(
    "/{username}",
    response_model=UserDeleted,
    dependencies=[Depends(require_admin_or_current_user)],
)
def delete_user(username: str, db: Session = Depends(get_db)):
    """Authorization required: admin or the same user"""
    UserService(db).remove(username)
    return {"deleted": username}


@router.post(
    "/{username}/jobs/{job_id}",
    response_model=Applied,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_or_current_user)],
)
def apply_for_job(username: str, job_id: JobId, db: Session = Depends(get_db)):
    """
    Apply the user to a job (or an admin does it for them). Returns { applied: jobId }

    Authorization required: admin or the same user
    """
    application = UserService(db).apply_for_job(username, job_id)
    return {"applied": application["jobId"]}
