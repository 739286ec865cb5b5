"""
In-memory practice store.

Owns every user, client and task for the lifetime of the process. Client
portal passwords are encrypted on the way in and decrypted on the way out, so
callers only ever see plaintext and the dicts below only ever hold ciphertext.
"""
from __future__ import annotations

import copy
import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from practice.auth.models import User
from practice.auth.security import hash_password
from practice.clients.models import Client
from practice.crypto import CredentialCipher
from practice.errors import (
    ClientNotFoundError,
    TaskNotFoundError,
    UnknownClientError,
    UserNotFoundError,
)
from practice.tasks.models import Task

logger = logging.getLogger(__name__)

DUE_SOON_WINDOW = timedelta(days=7)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class PracticeStore:
    """Repository for users, clients and tasks."""

    def __init__(self, cipher: CredentialCipher, clock: Callable[[], datetime] = utcnow):
        self.cipher = cipher
        self.clock = clock
        self._users: Dict[str, User] = {}
        self._clients: Dict[str, Client] = {}
        self._tasks: Dict[str, Task] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # ==================== Users ====================

    def create_user(self, data: Dict[str, Any]) -> User:
        """Insert a user. ``data["password"]`` must already be hashed."""
        with self._lock:
            user = User(
                id=self._new_id(),
                username=data["username"],
                password=data["password"],
                name=data["name"],
                created_at=self.clock(),
            )
            self._users[user.id] = user
            return replace(user)

    def get_user(self, user_id: str) -> User:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise UserNotFoundError()
            return replace(user)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return replace(user)
        return None

    def seed_admin(self, username: str, password: str, name: str) -> Optional[User]:
        """Create the default admin when the store has no users yet."""
        with self._lock:
            if self._users:
                return None
            user = self.create_user(
                {"username": username, "password": hash_password(password), "name": name}
            )
        logger.info("Default admin user %r created", username)
        return user

    # ==================== Clients ====================

    def _decrypted(self, client: Client) -> Client:
        return replace(
            client,
            portal_credentials=self.cipher.decrypt_credentials(copy.deepcopy(client.portal_credentials)),
        )

    def list_clients(self, q: Optional[str] = None) -> List[Client]:
        with self._lock:
            clients = list(self._clients.values())
        if q:
            needle = q.strip().lower()
            clients = [
                c for c in clients
                if any(
                    needle in (value or "").lower()
                    for value in (c.full_name, c.phone, c.email, c.cnic, c.ntn)
                )
            ]
        clients.sort(key=lambda c: c.created_at, reverse=True)
        return [self._decrypted(c) for c in clients]

    def get_client(self, client_id: str) -> Client:
        with self._lock:
            client = self._clients.get(client_id)
            if client is None:
                raise ClientNotFoundError()
            return self._decrypted(client)

    def get_stored_client(self, client_id: str) -> Client:
        """Return the client exactly as stored, credentials still encrypted."""
        with self._lock:
            client = self._clients.get(client_id)
            if client is None:
                raise ClientNotFoundError()
            return copy.deepcopy(client)

    def create_client(self, data: Dict[str, Any]) -> Client:
        now = self.clock()
        client = Client(
            id=self._new_id(),
            full_name=data["full_name"],
            phone=data["phone"],
            email=data.get("email"),
            cnic=data.get("cnic"),
            ntn=data.get("ntn"),
            notes=data.get("notes"),
            portal_credentials=self.cipher.encrypt_credentials(data.get("portal_credentials")),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._clients[client.id] = client
            return self._decrypted(client)

    def update_client(self, client_id: str, changes: Dict[str, Any]) -> Client:
        changes = dict(changes)
        replace_credentials = "portal_credentials" in changes
        credentials = changes.pop("portal_credentials", None)
        changes.pop("id", None)
        changes.pop("created_at", None)
        changes.pop("updated_at", None)
        with self._lock:
            existing = self._clients.get(client_id)
            if existing is None:
                raise ClientNotFoundError()
            updated = replace(existing, **changes, updated_at=self.clock())
            # credentials are replaced wholesale, never merged per portal
            if replace_credentials:
                updated.portal_credentials = self.cipher.encrypt_credentials(credentials)
            self._clients[client_id] = updated
            return self._decrypted(updated)

    def delete_client(self, client_id: str) -> int:
        """Delete a client and all of its tasks. Returns the number of tasks removed."""
        with self._lock:
            if self._clients.pop(client_id, None) is None:
                raise ClientNotFoundError()
            orphaned = [task_id for task_id, task in self._tasks.items() if task.client_id == client_id]
            for task_id in orphaned:
                del self._tasks[task_id]
        logger.info("Deleted client %s and %d task(s)", client_id, len(orphaned))
        return len(orphaned)

    # ==================== Tasks ====================

    def _require_client(self, client_id: str) -> None:
        if client_id not in self._clients:
            raise UnknownClientError(f"Unknown client: {client_id}")

    def list_tasks(self, status: Optional[str] = None, service_type: Optional[str] = None) -> List[Task]:
        with self._lock:
            tasks = [copy.deepcopy(t) for t in self._tasks.values()]
        if status:
            tasks = [t for t in tasks if t.status == status]
        if service_type:
            tasks = [t for t in tasks if t.service_type == service_type.upper()]
        return tasks

    def list_tasks_for_client(self, client_id: str) -> List[Task]:
        with self._lock:
            return [copy.deepcopy(t) for t in self._tasks.values() if t.client_id == client_id]

    def get_task(self, task_id: str) -> Task:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise TaskNotFoundError()
            return copy.deepcopy(task)

    def create_task(self, data: Dict[str, Any]) -> Task:
        now = self.clock()
        with self._lock:
            self._require_client(data["client_id"])
            task = Task(
                id=self._new_id(),
                client_id=data["client_id"],
                title=data["title"],
                service_type=data["service_type"],
                status=data.get("status") or "pending",
                description=data.get("description"),
                notes=data.get("notes"),
                deadline=data.get("deadline"),
                file_urls=list(data.get("file_urls") or []),
                created_at=now,
                updated_at=now,
            )
            self._tasks[task.id] = task
            return copy.deepcopy(task)

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Task:
        changes = dict(changes)
        changes.pop("id", None)
        changes.pop("created_at", None)
        changes.pop("updated_at", None)
        if "file_urls" in changes:
            changes["file_urls"] = list(changes["file_urls"] or [])
        with self._lock:
            existing = self._tasks.get(task_id)
            if existing is None:
                raise TaskNotFoundError()
            if "client_id" in changes and changes["client_id"] != existing.client_id:
                self._require_client(changes["client_id"])
            updated = replace(existing, **changes, updated_at=self.clock())
            self._tasks[task_id] = updated
            return copy.deepcopy(updated)

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise TaskNotFoundError()

    def attach_file(self, task_id: str, file_url: str) -> Task:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise TaskNotFoundError()
            return self.update_task(task_id, {"file_urls": task.file_urls + [file_url]})

    # ==================== Stats ====================

    def get_stats(self) -> Dict[str, int]:
        now = self.clock()
        week_from_now = now + DUE_SOON_WINDOW
        current_month = month_start(now)

        with self._lock:
            tasks = list(self._tasks.values())
            total_clients = len(self._clients)

        return {
            "totalClients": total_clients,
            "tasksDueThisWeek": sum(1 for t in tasks if t.is_due_within(now, week_from_now)),
            "overdueTasks": sum(1 for t in tasks if t.is_overdue(now)),
            "completedThisMonth": sum(
                1 for t in tasks
                if t.status == "completed" and t.updated_at is not None and t.updated_at >= current_month
            ),
        }
