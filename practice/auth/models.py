from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class User:
    id: str
    username: str
    password: str  # werkzeug hash, never plaintext
    name: str
    created_at: Optional[datetime] = None

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User {self.id} {self.username!r}>"

    def to_dict(self) -> Dict[str, Any]:
        # the password hash stays server side
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
        }
