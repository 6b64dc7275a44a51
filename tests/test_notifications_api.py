from datetime import datetime, timedelta, timezone

from sqlalchemy import select, text

from app.core.config import settings
from app.models.notification import Notification, NotificationType
from app.models.report_schedule import ReportSchedule, ScheduleType
from app.services.email_service import EmailService

from .conftest import create_class

CRON = {"Authorization": "Bearer test-cron-secret"}


def test_class_events_reach_the_feed(client, admin_headers):
    class_obj = create_class(client, admin_headers, name="Physics")

    feed = client.get("/api/notifications", headers=admin_headers).json()

    added = next(n for n in feed if n["title"] == "Class Added")
    assert added["message"] == '**Admin** created the class "Physics".'
    assert added["type"] == "success"
    assert added["entity_type"] == "class"
    assert added["entity_id"] == class_obj["id"]
    assert added["action"] == "created"
    assert added["is_read"] is False


def test_read_flags_and_delete(client, admin_headers):
    create_class(client, admin_headers, name="A")
    create_class(client, admin_headers, name="B")
    feed = client.get("/api/notifications", headers=admin_headers).json()

    assert client.get("/api/notifications/unread", headers=admin_headers).json() == {"count": 2}

    marked = client.patch(f"/api/notifications/{feed[0]['id']}", json={"is_read": True}, headers=admin_headers)
    assert marked.json()["is_read"] is True
    assert client.get("/api/notifications/unread", headers=admin_headers).json() == {"count": 1}

    client.post("/api/notifications/mark-all-read", headers=admin_headers)
    assert client.get("/api/notifications/unread", headers=admin_headers).json() == {"count": 0}

    assert client.delete(f"/api/notifications/{feed[1]['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/notifications/{feed[1]['id']}", headers=admin_headers).status_code == 404


def test_manual_notification(client, admin_headers):
    response = client.post(
        "/api/notifications",
        json={"title": "Holiday", "message": "School closed on Friday.", "type": "info"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["entity_type"] is None


def test_cleanup_removes_only_old_notifications(client, admin_headers, run_db):
    create_class(client, admin_headers)

    async def _add_old(session):
        session.add(Notification(
            title="Old",
            message="From last month",
            type=NotificationType.INFO,
            created_at=datetime.now(timezone.utc) - timedelta(days=8),
        ))
        await session.commit()

    run_db(_add_old)
    response = client.get("/api/cron/cleanup", headers=CRON)

    assert response.json()["success"] is True

    async def _titles(session):
        result = await session.execute(select(Notification.title))
        return [row[0] for row in result.all()]

    assert run_db(_titles) == ["Class Added"]


def test_report_schedule_validation_and_listing(client, admin_headers):
    missing = client.post("/api/reports/schedule", json={"type": "weekly"}, headers=admin_headers)
    bad_type = client.post(
        "/api/reports/schedule", json={"type": "daily", "email": "head@school.com"}, headers=admin_headers
    )
    created = client.post(
        "/api/reports/schedule", json={"type": "weekly", "email": "head@school.com"}, headers=admin_headers
    )

    assert missing.json()["detail"] == "Type and email are required"
    assert bad_type.json()["detail"] == "Type must be 'weekly' or 'monthly'"
    assert created.status_code == 200
    schedule = created.json()["scheduled_report"]
    next_run = datetime.fromisoformat(schedule["next_run"])
    assert next_run.weekday() == 6
    assert (next_run.hour, next_run.minute) == (9, 0)

    listed = client.get("/api/reports/schedule", headers=admin_headers).json()["scheduled_reports"]
    assert [s["id"] for s in listed] == [schedule["id"]]


def test_report_dispatch_with_nothing_due(client):
    response = client.get("/api/cron/reports", headers=CRON)
    assert response.json() == {"success": True, "message": "Sent 0 of 0 due report(s)"}


def test_health_and_root(client):
    assert client.get("/health/").json()["status"] == "healthy"
    assert client.get("/health/db-health").json()["status"] == "healthy"
    root = client.get("/")
    assert root.status_code == 200
    assert "X-Process-Time" in root.headers


def _add_due_schedule(run_db, next_run):
    async def _add(session):
        schedule = ReportSchedule(type=ScheduleType.WEEKLY, email="head@school.com", next_run=next_run)
        session.add(schedule)
        await session.commit()
        return schedule.id
    return run_db(_add)


def _next_run_of(run_db, schedule_id):
    async def _get(session):
        return (await session.get(ReportSchedule, schedule_id)).next_run
    return run_db(_get)


def test_failed_report_delivery_stays_due(client, run_db):
    due_at = datetime(2026, 1, 4, 9, 0, tzinfo=timezone.utc)
    schedule_id = _add_due_schedule(run_db, due_at)

    response = client.get("/api/cron/reports", headers=CRON)

    assert response.json() == {"success": False, "message": "Sent 0 of 1 due report(s)"}
    assert _next_run_of(run_db, schedule_id).replace(tzinfo=None) == due_at.replace(tzinfo=None)


def test_sent_report_moves_to_next_week(client, run_db, monkeypatch):
    sent = []

    async def _fake_send(self, to, subject, html_body):
        sent.append((to, subject))
        return "msg_1"

    monkeypatch.setattr(settings, "resend_api_key", "re_test")
    monkeypatch.setattr(EmailService, "send", _fake_send)
    due_at = datetime(2026, 1, 4, 9, 0, tzinfo=timezone.utc)
    schedule_id = _add_due_schedule(run_db, due_at)

    response = client.get("/api/cron/reports", headers=CRON)

    assert response.json() == {"success": True, "message": "Sent 1 of 1 due report(s)"}
    assert sent == [("head@school.com", "Your weekly attendance report")]
    assert _next_run_of(run_db, schedule_id).replace(tzinfo=None) == datetime(2026, 1, 11, 9, 0)


def test_feed_failure_does_not_undo_the_write(client, admin_headers, run_db):
    async def _drop_feed(session):
        await session.execute(text("DROP TABLE notifications"))
        await session.commit()

    run_db(_drop_feed)
    response = client.post(
        "/api/classes",
        json={"name": "Chemistry", "teacher": "Dr. Rahimi", "time": "09:00", "start_date": "2026-01-10"},
        headers=admin_headers,
    )

    assert response.status_code == 201, response.text
    names = [c["name"] for c in client.get("/api/classes", headers=admin_headers).json()]
    assert names == ["Chemistry"]
