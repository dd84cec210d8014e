# fleet_engine/services/__init__.py
from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fleet_engine.errors import InvalidTransition, ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_payload(schema: Type[SchemaT], payload: Any) -> SchemaT:
    """Validate engine input given either as a schema instance or a plain mapping."""
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            message=f"Invalid {schema.__name__} payload",
            details=format_validation_errors(exc.errors()),
        ) from exc


def format_validation_errors(errors) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def detached(entity):
    """Copy handed to callers so they never hold a reference into the store."""
    return entity.model_copy(deep=True)


def require_open(job, action: str) -> None:
    """Reject any mutation that arrives after the job reached a terminal state."""
    if job.is_terminal:
        raise InvalidTransition(
            message=f"Cannot {action} a {job.status.value.lower()} job",
            details=f"Service job {job.job_number} is {job.status.value} and accepts no further changes",
        )
