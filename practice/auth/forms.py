from typing import Any, Dict, Mapping, Tuple

MIN_PASSWORD_LENGTH = 6


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_login_payload(payload: Any) -> Tuple[Dict[str, str], Dict[str, str]]:
    if not isinstance(payload, Mapping):
        return {}, {"body": "JSON object expected"}

    data = {
        "username": _clean(payload.get("username")),
        # passwords are compared verbatim
        "password": payload.get("password") if isinstance(payload.get("password"), str) else "",
    }
    errors: Dict[str, str] = {}
    if not data["username"]:
        errors["username"] = "username is required"
    if not data["password"]:
        errors["password"] = "password is required"
    return data, errors


def validate_register_payload(payload: Any) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Validates a registration payload.
    Returns (cleaned_data, errors)
    """
    data, errors = validate_login_payload(payload)
    if "body" in errors:
        return data, errors

    data["name"] = _clean(payload.get("name"))
    if not data["name"]:
        errors["name"] = "name is required"
    if data["password"] and len(data["password"]) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"password must be at least {MIN_PASSWORD_LENGTH} characters"
    return data, errors
