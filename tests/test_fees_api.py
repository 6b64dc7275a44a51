from datetime import date, timedelta
from decimal import Decimal

from .conftest import create_class, create_student


def _fee(student, class_obj, **overrides):
    payload = {
        "student_id": student["id"],
        "class_id": class_obj["id"],
        "fee_to_be_paid": "100.00",
        "fee_paid": "40.00",
        "payment_date": date.today().isoformat(),
    }
    payload.update(overrides)
    return payload


def _setup(client, headers):
    class_obj = create_class(client, headers)
    student = create_student(client, headers, class_obj["id"])
    return class_obj, student


def test_fee_create_then_accumulate(client, admin_headers):
    class_obj, student = _setup(client, admin_headers)

    created = client.post("/api/fees", json=_fee(student, class_obj), headers=admin_headers)
    topped_up = client.post(
        "/api/fees", json=_fee(student, class_obj, fee_to_be_paid="50.00", fee_paid="10.00"), headers=admin_headers
    )

    assert created.status_code == 201, created.text
    assert Decimal(created.json()["fee_unpaid"]) == Decimal("60.00")
    assert topped_up.status_code == 200
    body = topped_up.json()
    assert body["id"] == created.json()["id"]
    assert Decimal(body["fee_to_be_paid"]) == Decimal("150.00")
    assert Decimal(body["fee_paid"]) == Decimal("50.00")
    assert Decimal(body["fee_unpaid"]) == Decimal("100.00")

    titles = [n["title"] for n in client.get("/api/notifications", headers=admin_headers).json()]
    assert titles.count("Fee Added") == 1
    assert titles.count("Fee Updated") == 1


def test_fee_without_payment_is_fully_unpaid(client, admin_headers):
    class_obj, student = _setup(client, admin_headers)

    response = client.post(
        "/api/fees", json=_fee(student, class_obj, fee_paid=None, fee_to_be_paid="75.5"), headers=admin_headers
    )

    assert Decimal(response.json()["fee_unpaid"]) == Decimal("75.50")


def test_fee_validation(client, admin_headers):
    class_obj, student = _setup(client, admin_headers)
    tomorrow = (date.today() + timedelta(days=1)).isoformat()

    overpaid = client.post("/api/fees", json=_fee(student, class_obj, fee_paid="100.01"), headers=admin_headers)
    future = client.post("/api/fees", json=_fee(student, class_obj, payment_date=tomorrow), headers=admin_headers)
    zero = client.post("/api/fees", json=_fee(student, class_obj, fee_to_be_paid="0", fee_paid="0"), headers=admin_headers)

    assert overpaid.status_code == 422
    assert future.status_code == 422
    assert zero.status_code == 422
    assert client.get("/api/fees", headers=admin_headers).json() == []


def test_fee_list_includes_names(client, admin_headers):
    class_obj, student = _setup(client, admin_headers)
    client.post("/api/fees", json=_fee(student, class_obj), headers=admin_headers)

    fees = client.get("/api/fees", params={"class_id": class_obj["id"]}, headers=admin_headers).json()

    assert len(fees) == 1
    assert fees[0]["student_name"] == "Ali"
    assert fees[0]["father_name"] == "Reza"
    assert fees[0]["class_name"] == "Math 101"
    assert fees[0]["teacher_name"] == "Mr. Karimi"


def test_fee_update_recomputes_unpaid_and_delete(client, admin_headers):
    class_obj, student = _setup(client, admin_headers)
    fee_id = client.post("/api/fees", json=_fee(student, class_obj), headers=admin_headers).json()["id"]

    updated = client.patch(
        f"/api/fees/{fee_id}", json={"fee_to_be_paid": "120.00", "fee_paid": "70.00"}, headers=admin_headers
    )
    overpaid = client.patch(f"/api/fees/{fee_id}", json={"fee_paid": "500.00"}, headers=admin_headers)
    deleted = client.delete(f"/api/fees/{fee_id}", headers=admin_headers)

    assert Decimal(updated.json()["fee_unpaid"]) == Decimal("50.00")
    assert overpaid.status_code == 400
    assert deleted.json() == {"message": "Fee deleted successfully"}
    assert client.get(f"/api/fees/{fee_id}", headers=admin_headers).status_code == 404


def test_fee_amount_change_alone_recomputes_unpaid(client, admin_headers):
    class_obj, student = _setup(client, admin_headers)
    fee_id = client.post("/api/fees", json=_fee(student, class_obj), headers=admin_headers).json()["id"]

    updated = client.patch(f"/api/fees/{fee_id}", json={"fee_to_be_paid": "200"}, headers=admin_headers)

    assert Decimal(updated.json()["fee_unpaid"]) == Decimal("160.00")
    assert Decimal(updated.json()["fee_paid"]) == Decimal("40.00")


def test_fee_for_unknown_student_is_rejected(client, admin_headers):
    class_obj, _ = _setup(client, admin_headers)
    ghost = {"id": "00000000-0000-0000-0000-0000000000cc"}

    response = client.post("/api/fees", json=_fee(ghost, class_obj), headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Student not found")
    assert client.get("/api/fees", headers=admin_headers).json() == []
