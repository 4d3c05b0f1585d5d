"""
Authorization gate.

``get_current_identity`` verifies the bearer token (if any) and yields the
identity it carries, or None. It never rejects a request on its own.

The ``ensure_*`` predicates decide access from that identity alone and raise
UnauthorizedError on refusal. The ``require_*`` dependencies bind them to
routes; FastAPI resolves dependencies before the endpoint body runs, so a
refused request never reaches a service.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobly.core.exceptions import UnauthorizedError
from jobly.core.security import decode_token

logger = logging.getLogger(__name__)

# auto_error=False: anonymous requests continue and are judged by the gate
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    username: str
    is_admin: bool = False


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """Extracts the identity from a valid JWT; invalid or missing tokens yield None."""
    if credentials is None:
        return None

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("username"):
        return None

    return Identity(username=payload["username"], is_admin=bool(payload.get("isAdmin", False)))


def ensure_logged_in(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise UnauthorizedError()
    return identity


def ensure_is_admin(identity: Optional[Identity]) -> Identity:
    identity = ensure_logged_in(identity)
    if not identity.is_admin:
        logger.warning(f"Admin access refused for {identity.username}")
        raise UnauthorizedError()
    return identity


def ensure_admin_or_current_user(identity: Optional[Identity], username: str) -> Identity:
    identity = ensure_logged_in(identity)
    if not (identity.is_admin or identity.username == username):
        logger.warning(f"{identity.username} refused access to user {username}")
        raise UnauthorizedError()
    return identity


def require_logged_in(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    return ensure_logged_in(identity)


def require_admin(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    return ensure_is_admin(identity)


def require_admin_or_current_user(
    username: str,
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    """``username`` is the path parameter of the addressed user resource."""
    return ensure_admin_or_current_user(identity, username)
