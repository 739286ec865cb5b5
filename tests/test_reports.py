from datetime import datetime, timedelta, timezone

from practice.clients.models import Client
from practice.reports.services import DocumentService, ReportService
from practice.tasks.models import Task

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def _task(task_id, client_id, service_type="FBR", status="pending", **extra):
    return Task(
        id=task_id,
        client_id=client_id,
        title=f"Task {task_id}",
        service_type=service_type,
        status=status,
        created_at=extra.pop("created_at", NOW),
        updated_at=extra.pop("updated_at", NOW),
        **extra,
    )


CLIENTS = [
    Client(id="c1", full_name="Ali Khan", phone="1", created_at=NOW, updated_at=NOW),
    Client(id="c2", full_name="Sara Ahmed", phone="2", created_at=NOW, updated_at=NOW),
]


class TestReportService:

    def test_service_distribution_includes_all_services(self):
        tasks = [_task("t1", "c1"), _task("t2", "c1"), _task("t3", "c2", service_type="IPO")]

        assert ReportService.service_distribution(tasks) == {
            "FBR": 2, "SECP": 0, "PSW": 0, "PRA": 0, "IPO": 1,
        }

    def test_monthly_completions(self):
        tasks = [
            _task("t1", "c1", status="completed", updated_at=datetime(2024, 5, 2, tzinfo=timezone.utc)),
            _task("t2", "c1", status="completed", updated_at=datetime(2024, 3, 31, 23, 59, tzinfo=timezone.utc)),
            _task("t3", "c1", status="completed", updated_at=datetime(2023, 11, 30, tzinfo=timezone.utc)),
            _task("t4", "c1", status="pending", updated_at=datetime(2024, 5, 3, tzinfo=timezone.utc)),
        ]

        series = ReportService.monthly_completions(tasks, NOW)

        assert [m["month"] for m in series] == ["2023-12", "2024-01", "2024-02", "2024-03", "2024-04", "2024-05"]
        assert [m["completed"] for m in series] == [0, 0, 0, 1, 0, 1]
        assert series[-1]["label"] == "May 2024"

    def test_monthly_completions_across_year_boundary(self):
        january = datetime(2024, 1, 10, tzinfo=timezone.utc)

        series = ReportService.monthly_completions([], january)

        assert series[0]["month"] == "2023-08"
        assert series[-1]["month"] == "2024-01"

    def test_client_activity(self):
        tasks = [
            _task("t1", "c2", status="completed"),
            _task("t2", "c2", deadline=NOW - timedelta(days=1)),
            _task("t3", "c2", status="in_progress"),
        ]

        rows = ReportService.client_activity(CLIENTS, tasks, NOW)

        assert [r["clientId"] for r in rows] == ["c2", "c1"]
        assert rows[0] == {
            "clientId": "c2",
            "fullName": "Sara Ahmed",
            "totalTasks": 3,
            "completedTasks": 1,
            "pendingTasks": 1,
            "overdueTasks": 1,
            "completionRate": 33,
        }
        assert rows[1]["completionRate"] == 0

    def test_build_totals(self):
        tasks = [_task("t1", "c1", status="completed"), _task("t2", "c1")]

        report = ReportService.build(CLIENTS, tasks, NOW)

        assert report["totals"] == {"clients": 2, "tasks": 2, "completed": 1, "completionRate": 50}


class TestDocumentService:

    def test_unknown_client_name(self):
        tasks = [_task("t1", "gone", file_urls=["/uploads/a.pdf"])]

        documents = DocumentService.list_documents(CLIENTS, tasks)

        assert documents[0]["clientName"] == "Unknown Client"

    def test_tasks_without_files_are_skipped(self):
        assert DocumentService.list_documents(CLIENTS, [_task("t1", "c1")]) == []


class TestReportsApi:

    def test_reports_endpoint(self, client, auth_headers, sample_client):
        client.post(
            "/api/tasks",
            json={"clientId": sample_client["id"], "title": "PRA filing", "serviceType": "PRA", "status": "completed"},
            headers=auth_headers,
        )

        report = client.get("/api/reports", headers=auth_headers).get_json()

        assert report["serviceDistribution"]["PRA"] == 1
        assert report["monthlyCompletions"][-1] == {"month": "2024-05", "label": "May 2024", "completed": 1}
        assert report["clientActivity"][0]["fullName"] == "Ali Khan"
        assert report["totals"]["completionRate"] == 100
