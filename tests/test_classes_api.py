from datetime import date, timedelta

from .conftest import create_class, create_student

CRON = {"Authorization": "Bearer test-cron-secret"}


def _complete(client, headers, class_id):
    response = client.patch(f"/api/classes/{class_id}", json={"status": "completed"}, headers=headers)
    assert response.status_code == 200, response.text


def test_only_admins_manage_classes(client, teacher_headers, admin_headers):
    payload = {"name": "Art", "teacher": "Ms. Noor", "time": "10:00", "start_date": "2026-01-10"}

    assert client.post("/api/classes", json=payload, headers=teacher_headers).status_code == 403
    created = create_class(client, admin_headers, name="Art")
    assert created["status"] == "active"
    assert created["fee"] in ("0", "0.00")
    assert client.get("/api/classes", headers=teacher_headers).status_code == 200


def test_class_end_date_cannot_precede_start(client, admin_headers):
    response = client.post(
        "/api/classes",
        json={"name": "Art", "teacher": "Noor", "time": "10:00", "start_date": "2026-02-01", "end_date": "2026-01-01"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_upgrade_requires_completed_class(client, admin_headers):
    source = create_class(client, admin_headers)

    response = client.post(
        f"/api/classes/{source['id']}/upgrade",
        json={"new_class_data": {"name": "Math 102", "teacher": "Mr. Karimi", "time": "08:00", "start_date": "2026-06-01"}},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Class must be completed to upgrade"


def test_upgrade_of_missing_class_is_not_found(client, admin_headers):
    response = client.post(
        "/api/classes/00000000-0000-0000-0000-000000000000/upgrade",
        json={"promote_to_class_id": "00000000-0000-0000-0000-000000000001"},
        headers=admin_headers,
    )
    assert response.status_code == 404


def test_upgrade_creates_active_class_and_moves_students(client, admin_headers):
    source = create_class(client, admin_headers)
    for name in ("Ali", "Sara", "Omid"):
        create_student(client, admin_headers, source["id"], name=name)
    _complete(client, admin_headers, source["id"])

    response = client.post(
        f"/api/classes/{source['id']}/upgrade",
        json={"new_class_data": {
            "name": "Math 102", "teacher": "Mr. Karimi", "time": "08:00",
            "start_date": "2026-06-01", "status": "completed",
        }},
        headers=admin_headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["message"] == "Created Math 102 and moved students from Math 101"
    assert body["moved_students"] == 3
    assert body["new_class"]["status"] == "active"

    moved = client.get("/api/students", params={"class_id": body["new_class"]["id"]}, headers=admin_headers).json()
    left = client.get("/api/students", params={"class_id": source["id"]}, headers=admin_headers).json()
    assert len(moved) == 3 and left == []
    assert {s["class_name"] for s in moved} == {"Math 102"}

    # the source class itself is left untouched
    assert client.get(f"/api/classes/{source['id']}", headers=admin_headers).json()["status"] == "completed"
    titles = [n["title"] for n in client.get("/api/notifications", headers=admin_headers).json()]
    assert titles.count("Class Upgraded") == 1


def test_upgrade_can_promote_into_existing_class(client, admin_headers):
    source = create_class(client, admin_headers)
    target = create_class(client, admin_headers, name="Math 201")
    create_student(client, admin_headers, source["id"])
    _complete(client, admin_headers, source["id"])

    missing = client.post(
        f"/api/classes/{source['id']}/upgrade",
        json={"promote_to_class_id": "00000000-0000-0000-0000-000000000000"},
        headers=admin_headers,
    )
    neither = client.post(f"/api/classes/{source['id']}/upgrade", json={}, headers=admin_headers)
    promoted = client.post(
        f"/api/classes/{source['id']}/upgrade",
        json={"promote_to_class_id": target["id"]},
        headers=admin_headers,
    )

    assert missing.status_code == 404
    assert missing.json()["detail"] == "Target class not found"
    assert neither.status_code == 400
    assert neither.json()["detail"] == "Either newClassData or promoteToClassId is required"
    assert promoted.json()["message"] == "Students promoted to Math 201"
    assert promoted.json()["moved_students"] == 1


def test_bulk_delete(client, admin_headers):
    first = create_class(client, admin_headers, name="A")
    second = create_class(client, admin_headers, name="B")

    empty = client.post("/api/classes/bulk-delete", json={"ids": []}, headers=admin_headers)
    none_found = client.post(
        "/api/classes/bulk-delete", json={"ids": ["00000000-0000-0000-0000-000000000000"]}, headers=admin_headers
    )
    deleted = client.post("/api/classes/bulk-delete", json={"ids": [first["id"], second["id"]]}, headers=admin_headers)

    assert empty.status_code == 400
    assert empty.json()["detail"] == "No class IDs provided for deletion"
    assert none_found.status_code == 404
    assert deleted.json()["message"] == "Successfully deleted 2 class(es)"
    assert client.get("/api/classes", headers=admin_headers).json() == []
    titles = [n["title"] for n in client.get("/api/notifications", headers=admin_headers).json()]
    assert titles.count("Class Deleted") == 2


def test_deleting_class_keeps_its_students(client, admin_headers):
    class_obj = create_class(client, admin_headers)
    create_student(client, admin_headers, class_obj["id"])

    assert client.delete(f"/api/classes/{class_obj['id']}", headers=admin_headers).status_code == 200

    students = client.get("/api/students", headers=admin_headers).json()
    assert len(students) == 1
    assert students[0]["class_name"] == "Unknown"


def test_student_needs_existing_class(client, admin_headers):
    response = client.post(
        "/api/students",
        json={"name": "Ali", "father_name": "Reza", "gender": "male", "class_id": "00000000-0000-0000-0000-000000000000"},
        headers=admin_headers,
    )
    assert response.status_code == 404


def test_cron_endpoints_require_secret(client):
    assert client.get("/api/cron/classes").status_code == 401
    assert client.get("/api/cron/classes", headers={"Authorization": "Bearer wrong"}).status_code == 401


def test_class_completion_sweep(client, admin_headers):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    expired = create_class(client, admin_headers, name="Old", start_date="2025-01-01", end_date=yesterday)
    running = create_class(client, admin_headers, name="Running", start_date="2025-01-01", end_date=tomorrow)
    open_ended = create_class(client, admin_headers, name="Open")

    response = client.get("/api/cron/classes", headers=CRON)

    assert response.json() == {"success": True, "message": "Marked 1 class(es) as completed"}
    statuses = {
        c["id"]: c["status"] for c in client.get("/api/classes", headers=admin_headers).json()
    }
    assert statuses[expired["id"]] == "completed"
    assert statuses[running["id"]] == "active"
    assert statuses[open_ended["id"]] == "active"


def test_completed_class_cannot_be_reopened(client, admin_headers):
    class_obj = create_class(client, admin_headers)
    _complete(client, admin_headers, class_obj["id"])

    response = client.patch(f"/api/classes/{class_obj['id']}", json={"status": "active"}, headers=admin_headers)

    assert response.status_code == 400
    assert client.get(f"/api/classes/{class_obj['id']}", headers=admin_headers).json()["status"] == "completed"
