from backoffice.access.errors import (
    AccessError,
    ConflictError,
    NotFoundError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)
from backoffice.access.guard import assert_ownership, assert_same_user, require_principal
from backoffice.access.predicates import Eq, IsNull, NotNull, PredicateSet, Range
from backoffice.access.principal import Principal

__all__ = [
    "AccessError",
    "ConflictError",
    "Eq",
    "IsNull",
    "NotFoundError",
    "NotNull",
    "PredicateSet",
    "Principal",
    "Range",
    "UnauthenticatedError",
    "UnauthorizedError",
    "ValidationError",
    "assert_ownership",
    "assert_same_user",
    "require_principal",
]
