from typing import Iterable, Optional

from typings.user import Role
from util.errors import AuthenticationError, AuthorizationError


def require_authenticated(user: Optional[dict]) -> dict:
    if user is None:
        raise AuthenticationError("You must be logged in")
    return user


def require_role(user: Optional[dict], allowed_roles: Optional[Iterable[str]]) -> Optional[dict]:
    """
    Allow user if its role is one of allowed_roles. No roles means no restriction.
    """
    allowed = list(allowed_roles or [])
    if not allowed:
        return user
    if user is None or user.get("role") not in allowed:
        raise AuthorizationError("You don't have permission to perform this action")
    return user


def require_admin(user: Optional[dict]) -> dict:
    require_authenticated(user)
    return require_role(user, [Role.admin])
