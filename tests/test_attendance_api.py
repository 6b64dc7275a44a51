from datetime import date

from .conftest import create_class, create_student


def _titles(client, headers):
    return [n["title"] for n in client.get("/api/notifications", headers=headers).json()]


def _setup(client, admin_headers, headers, names=("Ali", "Sara", "Omid")):
    class_obj = create_class(client, admin_headers)
    students = [create_student(client, headers, class_obj["id"], name=name) for name in names]
    return class_obj, students


def test_bulk_upsert_keeps_one_row_per_student_and_day(client, admin_headers, teacher_headers):
    class_obj, (ali, sara, _) = _setup(client, admin_headers, teacher_headers)
    day = "2026-03-02"
    batch = [
        {"student_id": ali["id"], "class_id": class_obj["id"], "date": day, "status": "absent"},
        {"student_id": sara["id"], "class_id": class_obj["id"], "date": day, "status": "present"},
        {"student_id": ali["id"], "class_id": class_obj["id"], "date": day, "status": "late"},
    ]

    first = client.put("/api/attendance", json=batch, headers=teacher_headers)
    second = client.put("/api/attendance", json=batch[:1], headers=teacher_headers)

    assert first.status_code == 200, first.text
    assert len(first.json()) == 2
    rows = client.get(
        "/api/attendance", params={"class_id": class_obj["id"], "date": day}, headers=teacher_headers
    ).json()
    assert len(rows) == 2
    assert {r["student_id"]: r["status"] for r in rows}[ali["id"]] == "absent"
    assert second.status_code == 200

    titles = _titles(client, teacher_headers)
    assert titles.count("Attendance Taken") == 1
    assert titles.count("Attendance Updated") == 1


def test_bulk_upsert_rejects_whole_batch_on_bad_record(client, admin_headers, teacher_headers):
    class_obj, (ali, sara, _) = _setup(client, admin_headers, teacher_headers)
    batch = [
        {"student_id": ali["id"], "class_id": class_obj["id"], "date": "2026-03-02", "status": "present"},
        {"student_id": sara["id"], "class_id": class_obj["id"], "date": "2026-03-02", "status": "sick"},
    ]

    response = client.put("/api/attendance", json=batch, headers=teacher_headers)

    assert response.status_code == 422
    assert client.get("/api/attendance", headers=teacher_headers).json() == []


def test_empty_batch_is_rejected(client, teacher_headers):
    response = client.put("/api/attendance", json=[], headers=teacher_headers)
    assert response.status_code == 400


def test_single_attendance_lifecycle(client, admin_headers, teacher_headers):
    class_obj, (ali, _, _) = _setup(client, admin_headers, teacher_headers)
    record = {"student_id": ali["id"], "class_id": class_obj["id"], "date": "2026-03-02", "status": "present"}

    created = client.post("/api/attendance", json=record, headers=teacher_headers)
    duplicate = client.post("/api/attendance", json=record, headers=teacher_headers)
    attendance_id = created.json()["id"]
    patched = client.patch(f"/api/attendance/{attendance_id}", json={"status": "late"}, headers=teacher_headers)
    by_student = client.get("/api/attendance", params={"student_id": ali["id"]}, headers=teacher_headers).json()
    deleted = client.delete(f"/api/attendance/{attendance_id}", headers=teacher_headers)

    assert created.status_code == 201
    assert duplicate.status_code == 409
    assert patched.json()["status"] == "late"
    assert [r["id"] for r in by_student] == [attendance_id]
    assert deleted.status_code == 200
    assert client.get(f"/api/attendance/{attendance_id}", headers=teacher_headers).status_code == 404
    assert "Attendance Deleted" in _titles(client, teacher_headers)


def test_report_and_stats_for_today(client, admin_headers, teacher_headers):
    class_obj, students = _setup(client, admin_headers, teacher_headers)
    today = date.today().isoformat()
    batch = [
        {"student_id": s["id"], "class_id": class_obj["id"], "date": today, "status": status}
        for s, status in zip(students, ("present", "late", "absent"))
    ]
    client.put("/api/attendance", json=batch, headers=teacher_headers)

    report = client.get("/api/reports", headers=teacher_headers).json()
    stats = client.get("/api/stats", headers=teacher_headers).json()

    assert report["type"] == "daily"
    assert report["start_date"] == report["end_date"] == today
    assert report["summary"] == {
        "total_records": 3,
        "present_count": 1,
        "absent_count": 1,
        "late_count": 1,
        "attendance_rate": 66.7,
    }
    assert report["charts"]["by_class"] == [
        {"class": "Math 101", "present": 1, "absent": 1, "late": 1, "total": 3}
    ]
    assert {row["student"]["name"] for row in report["attendance"]} == {"Ali", "Sara", "Omid"}
    assert all(row["class"]["name"] == "Math 101" for row in report["attendance"])

    assert stats["total_students"] == 3
    assert (stats["present_today"], stats["absent_today"], stats["late_today"]) == (1, 1, 1)
    assert stats["today_attendance_rate"] == 66.7


def test_report_filters_and_empty_range(client, admin_headers, teacher_headers):
    class_obj, (ali, sara, _) = _setup(client, admin_headers, teacher_headers)
    batch = [
        {"student_id": ali["id"], "class_id": class_obj["id"], "date": "2026-03-02", "status": "present"},
        {"student_id": sara["id"], "class_id": class_obj["id"], "date": "2026-03-02", "status": "absent"},
    ]
    client.put("/api/attendance", json=batch, headers=teacher_headers)

    only_ali = client.get(
        "/api/reports",
        params={"type": "custom", "start_date": "2026-03-01", "end_date": "2026-03-31", "student_id": ali["id"]},
        headers=teacher_headers,
    ).json()
    empty = client.get(
        "/api/reports", params={"start_date": "2026-04-01", "end_date": "2026-04-30"}, headers=teacher_headers
    ).json()
    inverted = client.get(
        "/api/reports", params={"start_date": "2026-04-30", "end_date": "2026-04-01"}, headers=teacher_headers
    )

    assert only_ali["summary"]["total_records"] == 1
    assert only_ali["summary"]["attendance_rate"] == 100.0
    assert empty["summary"]["attendance_rate"] == 0.0
    assert empty["attendance"] == []
    assert inverted.status_code == 400


def test_report_labels_deleted_students_unknown(client, admin_headers, teacher_headers):
    class_obj, (ali, _, _) = _setup(client, admin_headers, teacher_headers)
    client.put(
        "/api/attendance",
        json=[{"student_id": ali["id"], "class_id": class_obj["id"], "date": "2026-03-02", "status": "present"}],
        headers=teacher_headers,
    )
    client.delete(f"/api/students/{ali['id']}", headers=teacher_headers)

    report = client.get(
        "/api/reports", params={"start_date": "2026-03-02", "end_date": "2026-03-02"}, headers=teacher_headers
    ).json()

    assert report["charts"]["by_student"][0]["student"] == "Unknown"
    assert report["attendance"][0]["student"] is None


def test_batch_with_unknown_student_is_rejected_whole(client, admin_headers, teacher_headers):
    class_obj, (ali, _, _) = _setup(client, admin_headers, teacher_headers)
    ghost = "00000000-0000-0000-0000-0000000000aa"
    batch = [
        {"student_id": ali["id"], "class_id": class_obj["id"], "date": "2026-03-02", "status": "present"},
        {"student_id": ghost, "class_id": class_obj["id"], "date": "2026-03-02", "status": "absent"},
    ]

    response = client.put("/api/attendance", json=batch, headers=teacher_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == f"Student not found: {ghost}"
    assert client.get("/api/attendance", headers=teacher_headers).json() == []


def test_attendance_for_unknown_class_is_rejected(client, admin_headers, teacher_headers):
    _, (ali, _, _) = _setup(client, admin_headers, teacher_headers)
    ghost = "00000000-0000-0000-0000-0000000000bb"
    record = {"student_id": ali["id"], "class_id": ghost, "date": "2026-03-02", "status": "present"}

    single = client.post("/api/attendance", json=record, headers=teacher_headers)
    batch = client.put("/api/attendance", json=[record], headers=teacher_headers)

    assert single.status_code == 400
    assert batch.json()["detail"] == f"Class not found: {ghost}"
    assert client.get("/api/attendance", headers=teacher_headers).json() == []
