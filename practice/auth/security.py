from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Dict, Optional

import jwt
from flask import current_app, g, jsonify, request
from werkzeug.security import check_password_hash, generate_password_hash

TOKEN_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(days=7)


def hash_password(password: str) -> str:
    """Hash a plaintext password with a random salt."""
    return generate_password_hash(password)


def check_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return check_password_hash(hashed, password)
    except ValueError:
        # unknown hash method stored for this user
        return False


def generate_token(user_id: str, secret: str, expires_in: timedelta = DEFAULT_TOKEN_TTL) -> str:
    now = datetime.now(timezone.utc)
    payload = {"userId": user_id, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def verify_token(token: str, secret: str) -> Optional[Dict[str, str]]:
    """Return ``{"userId": ...}`` for a valid token, ``None`` otherwise."""
    try:
        payload = jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM])
    except jwt.PyJWTError:
        return None
    user_id = payload.get("userId")
    if not isinstance(user_id, str) or not user_id:
        return None
    return {"userId": user_id}


def issue_token(user_id: str) -> str:
    ttl = timedelta(days=int(current_app.config.get("TOKEN_TTL_DAYS", 7)))
    return generate_token(user_id, current_app.config["SECRET_KEY"], ttl)


# ---------- Route guard ----------

def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return jsonify({"message": "Access token required"}), 401

        payload = verify_token(token, current_app.config["SECRET_KEY"])
        if payload is None:
            return jsonify({"message": "Invalid or expired token"}), 403

        g.user_id = payload["userId"]
        return view(*args, **kwargs)

    return wrapper
