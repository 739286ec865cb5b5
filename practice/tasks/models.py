from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Task:
    """A compliance task filed on one government portal for one client."""

    id: str
    client_id: str
    title: str
    service_type: str
    status: str = "pending"
    description: Optional[str] = None
    notes: Optional[str] = None
    deadline: Optional[datetime] = None
    file_urls: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Task {self.id} client={self.client_id} {self.service_type} status={self.status}>"

    def is_open(self) -> bool:
        return self.status != "completed"

    def is_overdue(self, now: datetime) -> bool:
        if not self.is_open() or self.deadline is None:
            return False
        return self.deadline < now

    def is_due_within(self, now: datetime, until: datetime) -> bool:
        if not self.is_open() or self.deadline is None:
            return False
        return now <= self.deadline <= until

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "clientId": self.client_id,
            "title": self.title,
            "description": self.description,
            "serviceType": self.service_type,
            "status": self.status,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "fileUrls": list(self.file_urls),
            "notes": self.notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
