from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class Client:
    id: str
    full_name: str
    phone: str
    email: Optional[str] = None
    cnic: Optional[str] = None  # national identity card number
    ntn: Optional[str] = None  # national tax number
    notes: Optional[str] = None
    portal_credentials: Optional[Dict[str, Dict[str, str]]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __repr__(self) -> str:  # pragma: no cover - debug friendly only
        # never echo credentials, even encrypted ones
        return f"<Client {self.id} {self.full_name!r}>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "phone": self.phone,
            "email": self.email,
            "cnic": self.cnic,
            "ntn": self.ntn,
            "notes": self.notes,
            "portalCredentials": self.portal_credentials,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
