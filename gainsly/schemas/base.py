"""
Gainsly API - Schema Base.

Request and response bodies use camelCase on the wire (``muscleGroup``,
``isTemplate``); snake_case is accepted on input too.
"""

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel
from typing import Annotated, Any, Dict, Sequence


# Trimmed, non-empty text such as names and muscle groups
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class APIModel(BaseModel):
    """Base model for every request/response schema."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def first_error_message(errors: Sequence[Dict[str, Any]]) -> str:
    """Turn the first pydantic error into a one-line message."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    if first.get("type") == "missing" and field:
        return f"{field} is required"
    if field:
        return f"{field}: {first.get('msg', 'invalid value')}"
    return first.get("msg", "Invalid request")
