"""
Error taxonomy shared by every core service.

Services raise these; ``zawaj.main`` renders them as
``{"kind": ..., "detail": ...}`` with the status code carried by the class.
All of them are recoverable from the caller's point of view.
"""
from typing import Any, Dict, Optional


class ZawajError(Exception):
    kind = "error"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"kind": self.kind, "detail": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationFailed(ZawajError):
    kind = "validation"
    status_code = 400


class NotFound(ZawajError):
    kind = "not_found"
    status_code = 404


class Blocked(ZawajError):
    kind = "blocked"
    status_code = 403


class NotEligible(ZawajError):
    kind = "not_eligible"
    status_code = 422


class InvalidAccountState(ZawajError):
    kind = "invalid_account_state"
    status_code = 409


class Conflict(ZawajError):
    kind = "conflict"
    status_code = 409


class NothingToUndo(ZawajError):
    kind = "nothing_to_undo"
    status_code = 404


class Forbidden(ZawajError):
    kind = "forbidden"
    status_code = 403
