"""
Base schemas shared by request and response DTOs.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, ValidationError


class StandardizedModel(BaseModel):
    """Request base: accepts field names or aliases, ignores unknown keys."""

    model_config = ConfigDict(
        use_enum_values=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class StrictModel(BaseModel):
    """Strict base: forbid extras, validate defaults and assignments."""

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        validate_assignment=True,
    )


class SuccessEnvelope(BaseModel):
    """Common ``success`` flag carried by every JSON response body."""

    success: bool = True


def unwrap_body_envelope(data: Any) -> Any:
    """Accept ``{"body": {...}}`` as well as the bare object."""
    if isinstance(data, dict) and isinstance(data.get("body"), dict):
        return data["body"]
    return data


def validation_message(exc: ValidationError) -> str:
    """Human-readable message for the first validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first: Dict[str, Any] = dict(errors[0])
    ctx_error = (first.get("ctx") or {}).get("error")
    if first.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "__root__")
    return f"{loc}: {first['msg']}" if loc else str(first["msg"])
