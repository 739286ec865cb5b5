from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

# ==================== Allowed values ====================

SERVICE_TYPES = ["FBR", "SECP", "PSW", "PRA", "IPO"]

TASK_STATUSES = [
    "pending",
    "in_progress",
    "completed",
]

_OPTIONAL_TEXT = {
    "description": "description",
    "notes": "notes",
}


def _normalize_str(value: Any) -> str:
    return (value or "").strip() if isinstance(value, str) else ""


def _parse_datetime(value: str | None) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _validate_file_urls(raw: Any, errors: Dict[str, str]) -> List[str]:
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        errors["fileUrls"] = "fileUrls must be a list of strings"
        return []
    return list(raw)


def validate_task_payload(payload: Any, partial: bool = False) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """Validate a task JSON payload.

    Returns (data, errors). ``data`` uses attribute names and, when
    ``partial`` is set, holds only the keys present in the payload.
    """
    if not isinstance(payload, Mapping):
        return {}, {"body": "JSON object expected"}

    data: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    if not partial or "clientId" in payload:
        client_id = _normalize_str(payload.get("clientId"))
        if not client_id:
            errors["clientId"] = "clientId is required"
        else:
            data["client_id"] = client_id

    if not partial or "title" in payload:
        title = _normalize_str(payload.get("title"))
        if not title:
            errors["title"] = "title is required"
        else:
            data["title"] = title

    if not partial or "serviceType" in payload:
        service_type = _normalize_str(payload.get("serviceType")).upper()
        if service_type not in SERVICE_TYPES:
            errors["serviceType"] = f"serviceType must be one of {', '.join(SERVICE_TYPES)}"
        else:
            data["service_type"] = service_type

    if "status" in payload:
        status = _normalize_str(payload.get("status"))
        if status not in TASK_STATUSES:
            errors["status"] = f"status must be one of {', '.join(TASK_STATUSES)}"
        else:
            data["status"] = status
    elif not partial:
        data["status"] = "pending"

    for wire_key, attr in _OPTIONAL_TEXT.items():
        if wire_key in payload:
            value = payload.get(wire_key)
            if value is not None and not isinstance(value, str):
                errors[wire_key] = f"{wire_key} must be a string"
                continue
            data[attr] = _normalize_str(value) or None

    if "deadline" in payload:
        raw_deadline = payload.get("deadline")
        if raw_deadline in (None, ""):
            data["deadline"] = None
        elif not isinstance(raw_deadline, str):
            errors["deadline"] = "deadline must be an ISO-8601 string"
        else:
            deadline = _parse_datetime(raw_deadline)
            if deadline is None:
                errors["deadline"] = "deadline must be an ISO-8601 date or datetime"
            else:
                data["deadline"] = deadline

    if "fileUrls" in payload and payload.get("fileUrls") is not None:
        data["file_urls"] = _validate_file_urls(payload["fileUrls"], errors)

    return data, errors
