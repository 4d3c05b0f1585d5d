from typing import ClassVar, FrozenSet, List, Optional

from pydantic import EmailStr, Field

from jobly.schemas.base import CamelModel, PartialUpdate, RequestModel


class UserRegister(RequestModel):
    """Self-registration. Registered users are never admins."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=20)
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class UserNew(UserRegister):
    """Admin-only add; the new user may be an admin."""
    is_admin: bool = False


class UserUpdate(PartialUpdate):
    not_nullable: ClassVar[FrozenSet[str]] = frozenset({"password", "first_name", "last_name", "email"})

    password: Optional[str] = Field(None, min_length=5, max_length=20)
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[EmailStr] = None


class UserAuth(RequestModel):
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class UserDetail(UserResponse):
    jobs: List[int] = []


class UserEnvelope(CamelModel):
    user: UserResponse


class UserDetailEnvelope(CamelModel):
    user: UserDetail


class UserWithToken(CamelModel):
    user: UserResponse
    token: str


class UserList(CamelModel):
    users: List[UserResponse]


class UserDeleted(CamelModel):
    deleted: str


class Applied(CamelModel):
    applied: int


class Token(CamelModel):
    token: str
