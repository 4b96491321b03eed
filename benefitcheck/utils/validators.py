"""
Utility functions for request validation and value coercion
"""
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..models.common import ensure_utc


def validate_verification_request(request) -> List[str]:
    """
    Validate the fields every verification needs and return a list of errors

    Args:
        request: VerificationRequest to check

    Returns:
        List of field-level error messages (empty if valid)
    """
    errors = []

    required_fields = {
        "serviceType": request.service_type,
        "subjectId": request.subject_id,
        "verifierId": request.verifier_id,
    }
    for field, value in required_fields.items():
        if value is None or not str(value).strip():
            errors.append(f"Missing required field: {field}")

    if request.proof_token is not None and not request.proof_token.strip():
        errors.append("proofToken must not be blank when provided")

    if request.location is not None:
        lat, lng = request.location.lat, request.location.lng
        if lat is not None and not -90 <= lat <= 90:
            errors.append("location.lat must be between -90 and 90")
        if lng is not None and not -180 <= lng <= 180:
            errors.append("location.lng must be between -180 and 180")

    return errors


def coerce_datetime(value: Any) -> Optional[datetime]:
    """
    Interpret a stored value as an aware UTC datetime

    Accepts datetimes, ISO-8601 strings (a trailing 'Z' is allowed) and epoch
    milliseconds. Returns None when the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None
