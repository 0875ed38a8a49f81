"""Authorization guard.

Ownership is a pure equality between the principal's user id and the owner
column of the target. There is no role hierarchy and no delegation.
"""

import logging

from backoffice.access.errors import UnauthenticatedError, UnauthorizedError
from backoffice.access.principal import Principal

logger = logging.getLogger(__name__)


def require_principal(principal: Principal | None) -> Principal:
    """Return the principal or fail before any storage access."""
    if principal is None:
        raise UnauthenticatedError()
    return principal


def owns(principal: Principal, owner_id: str | None) -> bool:
    return owner_id is not None and principal.user_id == owner_id


def assert_ownership(principal: Principal, owner_id: str | None) -> None:
    """Fail closed unless *principal* owns the row whose owner is *owner_id*."""
    if not owns(principal, owner_id):
        logger.warning("Ownership check failed for user %s", principal.user_id)
        raise UnauthorizedError("Not authorized to access this resource")


def assert_same_user(principal: Principal, user_id: str, action: str = "access") -> None:
    """Guard for whole-collection operations targeting *user_id*."""
    if principal.user_id != user_id:
        logger.warning(
            "User %s attempted to %s for user %s", principal.user_id, action, user_id
        )
        raise UnauthorizedError(f"Cannot {action} for another user")
