"""Domain errors raised by the barter services.

Each error carries a stable ``code`` and the HTTP status the API layer
renders it with, so callers can tell "not found" from "not allowed" from
"wrong state" without parsing messages.
"""


class BarterError(Exception):
    """Base class for expected barter domain failures."""

    code: str = "barter_error"
    status_code: int = 400

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class NotFoundError(BarterError):
    code = "not_found"
    status_code = 404

    def __init__(self, barter_id: int):
        self.barter_id = barter_id
        super().__init__(f"Barter {barter_id} not found")


class UnauthorizedError(BarterError):
    code = "unauthorized"
    status_code = 403


class InvalidStateError(BarterError):
    """Raised when an action is not allowed from the barter's current status."""

    code = "invalid_state"
    status_code = 409

    def __init__(self, current: str, action: str):
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} a barter in status {current}")


class BarterValidationError(BarterError):
    code = "validation_error"
    status_code = 422


class ConflictError(BarterError):
    """Raised when another writer updated the barter since it was read."""

    code = "conflict"
    status_code = 409

    def __init__(self, barter_id: int, expected_version: int):
        self.barter_id = barter_id
        self.expected_version = expected_version
        super().__init__(
            f"Barter {barter_id} was modified concurrently (expected version {expected_version})"
        )
