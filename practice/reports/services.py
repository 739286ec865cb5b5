"""
Reporting services
Service distribution, monthly completions, client activity and the document index
"""
from datetime import datetime
from typing import Dict, List, Optional

from practice.clients.models import Client
from practice.store import month_start
from practice.tasks.forms import SERVICE_TYPES
from practice.tasks.models import Task


REPORT_MONTHS = 6


def _percent(part: int, whole: int) -> int:
    return round(part * 100 / whole) if whole else 0


def _shift_month(moment: datetime, months_back: int) -> datetime:
    """First instant of the month ``months_back`` months before ``moment``."""
    index = moment.year * 12 + (moment.month - 1) - months_back
    return month_start(moment).replace(year=index // 12, month=index % 12 + 1)


class ReportService:
    """Derived reports over the current clients and tasks"""

    @staticmethod
    def service_distribution(tasks: List[Task]) -> Dict[str, int]:
        counts = {service: 0 for service in SERVICE_TYPES}
        for task in tasks:
            counts[task.service_type] = counts.get(task.service_type, 0) + 1
        return counts

    @staticmethod
    def monthly_completions(tasks: List[Task], now: datetime, months: int = REPORT_MONTHS) -> List[Dict]:
        """
        Completed tasks per calendar month, oldest month first.

        A task counts in the month its ``updated_at`` falls in.
        """
        series = []
        for months_back in range(months - 1, -1, -1):
            start = _shift_month(now, months_back)
            end = _shift_month(now, months_back - 1)
            completed = sum(
                1 for t in tasks
                if t.status == "completed" and t.updated_at is not None and start <= t.updated_at < end
            )
            series.append({
                "month": start.strftime("%Y-%m"),
                "label": start.strftime("%b %Y"),
                "completed": completed,
            })
        return series

    @staticmethod
    def client_activity(clients: List[Client], tasks: List[Task], now: datetime) -> List[Dict]:
        by_client: Dict[str, List[Task]] = {}
        for task in tasks:
            by_client.setdefault(task.client_id, []).append(task)

        rows = []
        for client in clients:
            client_tasks = by_client.get(client.id, [])
            completed = sum(1 for t in client_tasks if t.status == "completed")
            rows.append({
                "clientId": client.id,
                "fullName": client.full_name,
                "totalTasks": len(client_tasks),
                "completedTasks": completed,
                "pendingTasks": sum(1 for t in client_tasks if t.status == "pending"),
                "overdueTasks": sum(1 for t in client_tasks if t.is_overdue(now)),
                "completionRate": _percent(completed, len(client_tasks)),
            })
        rows.sort(key=lambda row: row["totalTasks"], reverse=True)
        return rows

    @staticmethod
    def build(clients: List[Client], tasks: List[Task], now: datetime) -> Dict:
        completed = sum(1 for t in tasks if t.status == "completed")
        return {
            "totals": {
                "clients": len(clients),
                "tasks": len(tasks),
                "completed": completed,
                "completionRate": _percent(completed, len(tasks)),
            },
            "serviceDistribution": ReportService.service_distribution(tasks),
            "monthlyCompletions": ReportService.monthly_completions(tasks, now),
            "clientActivity": ReportService.client_activity(clients, tasks, now),
        }


class DocumentService:
    """Flattens task attachments into a searchable document list"""

    @staticmethod
    def list_documents(clients: List[Client], tasks: List[Task], q: Optional[str] = None) -> List[Dict]:
        names = {c.id: c.full_name for c in clients}
        documents = []
        for task in tasks:
            for index, url in enumerate(task.file_urls):
                documents.append({
                    "id": f"{task.id}-{index}",
                    "name": f"{task.title} - Document {index + 1}",
                    "url": url,
                    "taskId": task.id,
                    "taskTitle": task.title,
                    "clientId": task.client_id,
                    "clientName": names.get(task.client_id, "Unknown Client"),
                    "serviceType": task.service_type,
                    "uploadedAt": task.created_at.isoformat() if task.created_at else None,
                })

        if q:
            needle = q.strip().lower()
            documents = [
                d for d in documents
                if needle in d["name"].lower()
                or needle in d["clientName"].lower()
                or needle in d["taskTitle"].lower()
            ]
        return documents
