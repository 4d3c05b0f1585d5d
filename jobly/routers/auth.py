import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from jobly.core.limiter import AUTH_RATE_LIMIT, limiter
from jobly.core.security import create_token
from jobly.database import get_db
from jobly.schemas.user import Token, UserAuth, UserRegister
from jobly.services.users import UserService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.post("/token", response_model=Token)
@limiter.limit(AUTH_RATE_LIMIT)
def login(request: Request, credentials: UserAuth, db: Session = Depends(get_db)):
    """
    { username, password } => { token }

    Returns a signed token usable to authenticate further requests.
    Authorization required: none
    """
    user = UserService(db).authenticate(credentials.username, credentials.password)
    return {"token": create_token(user)}


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_RATE_LIMIT)
def register(request: Request, user_in: UserRegister, db: Session = Depends(get_db)):
    """
    { user } => { token }

    user must include { username, password, firstName, lastName, email }.
    Registered users are never admins.
    Authorization required: none
    """
    user = UserService(db).register({**user_in.model_dump(by_alias=True), "isAdmin": False})
    logger.info(f"New registration: {user['username']}")
    return {"token": create_token(user)}
