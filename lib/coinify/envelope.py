"""Typed view of the Coinify response envelope.

Every Coinify response looks like one of:

    {"success": true, "data": {...}}
    {"success": false, "error": {"code": "...", "message": "...", "url": "..."}}

The client itself returns the decoded JSON untouched; these models are an
optional convenience. Unknown fields are kept so newer API responses still
round-trip.

API Reference: https://coinify.com/docs/api/#response-format
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError


class ApiError(BaseModel):
    """Error object of a failed API response."""

    model_config = ConfigDict(extra="allow")

    code: str
    message: str
    url: Optional[str] = None


class ResponseEnvelope(BaseModel):
    """Top level structure of every API response."""

    model_config = ConfigDict(extra="allow")

    success: bool
    data: Optional[Any] = None
    error: Optional[ApiError] = None


def parse_envelope(obj: Any) -> Optional[ResponseEnvelope]:
    """Validate a decoded response, returning None if it is not an envelope."""
    if not isinstance(obj, dict):
        return None
    try:
        return ResponseEnvelope.model_validate(obj)
    except ValidationError:
        return None
