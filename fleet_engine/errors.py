"""
Error taxonomy raised by the engine.

Every engine operation either returns the authoritative post-mutation entity
or raises one of the errors below without having mutated anything. The HTTP
layer turns them into the response body produced by ``create_error_response``.
"""

from typing import Any, Dict, Optional


def create_error_response(
    message: str,
    details: Optional[str] = None,
    example: Optional[str] = None,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a detailed error response"""
    response = {
        "message": message,
        "details": details if details else message
    }
    if error:
        response["error"] = error
    if example:
        response["example"] = example
    return response


class FleetError(Exception):
    """Base class for all typed engine failures."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None, example: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.example = example

    @property
    def error(self) -> str:
        return type(self).__name__

    def to_response(self) -> Dict[str, Any]:
        return create_error_response(
            message=self.message,
            details=self.details,
            example=self.example,
            error=self.error,
        )


class ValidationError(FleetError):
    """Malformed or missing required fields, negative quantities or costs."""

    status_code = 400


class NotFound(FleetError):
    """Referenced job, assignment, part, mechanic, hub, driver or vehicle does not exist."""

    status_code = 404


class Conflict(FleetError):
    """Resource already exclusively held, or mechanic already assigned."""

    status_code = 409


class PreconditionFailed(FleetError):
    """State transition attempted without its required condition."""

    status_code = 412


class InvalidTransition(FleetError):
    """Transition not permitted from the job's current state."""

    status_code = 409
