"""Error types raised by the data-access layer.

HTTP handlers translate these into transport responses (see ``backoffice.main``).
"""


class AccessError(Exception):
    """Base data-access error."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnauthenticatedError(AccessError):
    """No resolvable principal for the request."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class UnauthorizedError(AccessError):
    """Principal does not own the targeted collection."""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFoundError(AccessError):
    """No row matches both the identifier and the caller's ownership."""

    status_code = 404

    def __init__(self, resource: str, identifier: object):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class ConflictError(AccessError):
    """A uniqueness constraint rejected the write."""

    status_code = 409


class ValidationError(AccessError):
    """Malformed or missing input, rejected before any storage call."""

    status_code = 422

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)
