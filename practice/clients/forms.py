import re
from typing import Any, Dict, Mapping, Tuple

PORTAL_KEYS = ["fbr", "secp", "psw", "pra", "ipo"]

_email_re = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# wire key -> attribute name
_TEXT_FIELDS = {
    "fullName": "full_name",
    "phone": "phone",
    "email": "email",
    "cnic": "cnic",
    "ntn": "ntn",
    "notes": "notes",
}
_REQUIRED = ("fullName", "phone")


def _clean(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return value


def _validate_credentials(raw: Any, errors: Dict[str, str]) -> Dict[str, Dict[str, str]]:
    if not isinstance(raw, Mapping):
        errors["portalCredentials"] = "portalCredentials must be an object"
        return {}

    cleaned: Dict[str, Dict[str, str]] = {}
    for portal, entry in raw.items():
        key = f"portalCredentials.{portal}"
        if portal not in PORTAL_KEYS:
            errors[key] = f"unknown portal (expected one of {', '.join(PORTAL_KEYS)})"
            continue
        if entry is None:
            continue
        if not isinstance(entry, Mapping):
            errors[key] = "credentials must be an object with username and password"
            continue
        username = entry.get("username")
        password = entry.get("password")
        if not isinstance(username, str) or not isinstance(password, str):
            errors[key] = "username and password must both be strings"
            continue
        cleaned[portal] = {"username": username.strip(), "password": password}
    return cleaned


def validate_client_payload(payload: Any, partial: bool = False) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Validates a client JSON payload.

    With ``partial=True`` only the keys present are validated and returned,
    which gives PUT its merge semantics. Returns (cleaned_data, errors).
    """
    if not isinstance(payload, Mapping):
        return {}, {"body": "JSON object expected"}

    data: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    for wire_key, attr in _TEXT_FIELDS.items():
        if wire_key not in payload:
            continue
        value = _clean(payload.get(wire_key))
        if not isinstance(value, str):
            errors[wire_key] = f"{wire_key} must be a string"
            continue
        # optional fields are stored as None rather than ""
        data[attr] = value if value or wire_key in _REQUIRED else None

    for wire_key in _REQUIRED:
        if wire_key in errors:
            continue
        if partial and wire_key not in payload:
            continue
        if not data.get(_TEXT_FIELDS[wire_key]):
            errors[wire_key] = f"{wire_key} is required"

    if data.get("email") and not _email_re.match(data["email"]):
        errors["email"] = "invalid email address"

    if payload.get("portalCredentials") is not None:
        data["portal_credentials"] = _validate_credentials(payload["portalCredentials"], errors)
    elif "portalCredentials" in payload:
        data["portal_credentials"] = None

    return data, errors
