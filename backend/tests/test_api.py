"""End-to-end tests through the HTTP API (SQLite in memory)."""

from datetime import date, timedelta

import pytest

API = "/api/v1"
YESTERDAY = (date.today() - timedelta(days=1)).isoformat()
TOMORROW = (date.today() + timedelta(days=1)).isoformat()


def _create(client, resource, payload):
    response = client.post(f"{API}/{resource}/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def jane(client):
    return _create(client, "employees", {"full_name": "Jane Doe", "email": "jane@x.com", "position": "Auditor"})


@pytest.fixture
def acme(client):
    return _create(client, "customers", {
        "company_name": "Acme", "contact_person": "Wile", "email": "wile@acme.com",
    })


@pytest.fixture
def audit(client, jane):
    return _create(client, "tasks", {
        "title": "Audit",
        "due_date": YESTERDAY,
        "status": "Open",
        "assign_to_employee": jane["id"],
        "billing_amount": 1000,
        "paid_amount": 400,
    })


def test_health(client):
    assert client.get(f"{API}/health").json()["status"] == "healthy"
    assert client.get(f"{API}/health/ready").json()["checks"]["database"]["status"] == "ok"


def test_correlation_id_is_echoed(client):
    response = client.get(f"{API}/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_overdue_task_and_employee_balance(client, audit):
    task = client.get(f"{API}/tasks/{audit['id']}").json()
    assert task["status"] == "Overdue"

    [row] = client.get(f"{API}/reports/employees").json()
    assert row["employee"] == "Jane Doe"
    assert row["balance_due"] == 600


def test_delete_employee_requires_confirmation(client, jane, audit):
    response = client.delete(f"{API}/employees/{jane['id']}")

    assert response.status_code == 409
    assert response.json()["detail"]["ids"] == [audit["id"]]
    assert client.get(f"{API}/tasks/{audit['id']}").json()["assign_to_employee"] == jane["id"]


def test_confirmed_employee_delete(client, jane, audit):
    response = client.delete(f"{API}/employees/{jane['id']}", params={"unassign_tasks": "true"})

    assert response.status_code == 200
    assert response.json()["unassigned_tasks"] == 1
    assert client.get(f"{API}/employees/{jane['id']}").status_code == 404
    task = client.get(f"{API}/tasks/{audit['id']}").json()
    assert task["assign_to_employee"] is None


def test_customer_report_sorted_with_completion_rate(client, acme):
    zeta = _create(client, "customers", {"company_name": "zeta", "contact_person": "Z", "email": "z@zeta.com"})
    _create(client, "tasks", {
        "title": "Done", "status": "Completed", "assign_to_customer": acme["id"],
        "billing_amount": 500, "paid_amount": 500,
    })
    _create(client, "tasks", {
        "title": "Open", "status": "Open", "assign_to_customer": acme["id"],
        "billing_amount": 300, "paid_amount": 0, "due_date": TOMORROW,
    })

    rows = client.get(f"{API}/reports/customers", params={"include_idle": "true"}).json()

    assert [r["customer"] for r in rows] == ["Acme", "zeta"]
    assert rows[0]["total_billing"] == 800
    assert rows[0]["total_paid"] == 500
    assert rows[0]["completion_rate"] == 50
    assert rows[1]["customer_id"] == zeta["id"]
    assert rows[1]["completion_rate"] == 0


def test_report_rejects_inverted_range(client):
    response = client.get(f"{API}/reports/employees", params={"from_date": TOMORROW, "to_date": YESTERDAY})
    assert response.status_code == 422


def test_task_validation_errors(client):
    assert client.post(f"{API}/tasks/", json={"status": "Open"}).status_code == 422
    assert client.post(f"{API}/tasks/", json={"title": "x", "status": "Overdue"}).status_code == 422
    assert client.post(f"{API}/tasks/", json={"title": "x", "billing_amount": -1}).status_code == 422
    assert client.post(f"{API}/tasks/", json={"title": "x", "assign_to_employee": "ghost"}).status_code == 422
    assert client.get(f"{API}/tasks/nope").status_code == 404
    assert client.delete(f"{API}/tasks/nope").status_code == 404


def test_completion_email_sent_on_transition(client, acme, emails):
    task = _create(client, "tasks", {"title": "GST Filing", "assign_to_customer": acme["id"]})

    updated = client.patch(f"{API}/tasks/{task['id']}", json={"status": "completed"}).json()

    assert updated["status"] == "Completed"
    assert updated["completed_at"] is not None
    assert emails.sent == [{"to": "wile@acme.com", "work": "GST Filing"}]


def test_task_payment_and_filters(client, acme, audit):
    other = _create(client, "tasks", {"title": "Later", "due_date": TOMORROW, "assign_to_customer": acme["id"]})

    paid = client.post(f"{API}/tasks/{audit['id']}/payments", json={"amount": 100}).json()
    assert paid["paid_amount"] == 500

    overdue = client.get(f"{API}/tasks/", params={"status": "overdue"}).json()
    assert [t["id"] for t in overdue] == [audit["id"]]
    by_customer = client.get(f"{API}/tasks/", params={"customer_id": acme["id"]}).json()
    assert [t["id"] for t in by_customer] == [other["id"]]
    pending = client.get(f"{API}/tasks/", params={"status": "Pending"}).json()
    assert [t["id"] for t in pending] == [other["id"]]
    assert client.get(f"{API}/tasks/", params={"status": "someday"}).status_code == 422


def test_invoice_flow(client, acme):
    task = _create(client, "tasks", {
        "title": "Audit", "assign_to_customer": acme["id"], "billing_amount": 1000, "paid_amount": 100,
    })

    response = client.post(f"{API}/invoices/from-task/{task['id']}")
    assert response.status_code == 201
    invoice = response.json()
    assert invoice["customer_name"] == "Acme"
    assert invoice["balance"] == 900
    assert client.post(f"{API}/invoices/from-task/{task['id']}").status_code == 409
    assert client.get(f"{API}/tasks/", params={"unbilled": "true"}).json() == []

    payment = client.post(f"{API}/payments/", json={
        "invoice_id": invoice["id"], "amount": 400, "method": "Bank Transfer",
    })
    assert payment.status_code == 201
    assert client.get(f"{API}/invoices/{invoice['id']}").json()["paid_amount"] == 500
    assert len(client.get(f"{API}/payments/", params={"invoice_id": invoice["id"]}).json()) == 1

    renamed = client.patch(f"{API}/invoices/{invoice['id']}", json={"invoice_number": "INV-2024-001"})
    assert renamed.json()["invoice_number"] == "INV-2024-001"

    assert client.delete(f"{API}/invoices/{invoice['id']}").json()["success"] is True
    assert client.get(f"{API}/tasks/{task['id']}").json()["invoice_id"] is None
    assert client.get(f"{API}/payments/").json() == []


def test_payment_for_missing_invoice(client):
    response = client.post(f"{API}/payments/", json={"invoice_id": "ghost", "amount": 10, "method": "Cash"})
    assert response.status_code == 404


def test_legal_case_hearings_and_documents(client, documents):
    case = _create(client, "legal-cases", {"case_number": "OP 101/2024", "court_name": "District Court"})
    past = client.post(f"{API}/legal-cases/{case['id']}/hearings", json={"hearing_date": YESTERDAY}).json()
    future = client.post(f"{API}/legal-cases/{case['id']}/hearings", json={"hearing_date": TOMORROW}).json()

    detail = client.get(f"{API}/legal-cases/{case['id']}").json()
    assert [h["id"] for h in detail["past_hearings"]] == [past["id"]]
    assert [h["id"] for h in detail["upcoming_hearings"]] == [future["id"]]

    upload = client.post(
        f"{API}/hearings/{past['id']}/document",
        files={"file": ("order sheet.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert upload.status_code == 200, upload.text
    path = upload.json()["pdf_path"]
    assert path.endswith("_order_sheet.pdf")
    assert path in documents.blobs

    rejected = client.post(
        f"{API}/hearings/{past['id']}/document",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert rejected.status_code == 400

    assert client.delete(f"{API}/hearings/{past['id']}").status_code == 200
    assert documents.removed == [path]
    assert client.delete(f"{API}/hearings/{past['id']}").status_code == 404

    stats = client.get(f"{API}/dashboard/stats").json()
    assert stats["total_cases"] == 1
    assert stats["total_hearings"] == 1
    assert stats["upcoming_hearings"][0]["case_number"] == "OP 101/2024"

    assert client.delete(f"{API}/legal-cases/{case['id']}").status_code == 200
    assert client.get(f"{API}/legal-cases/").json() == []


def test_document_store_outage_keeps_hearing(client, documents):
    case = _create(client, "legal-cases", {"case_number": "OS 7/2023"})
    hearing = client.post(f"{API}/legal-cases/{case['id']}/hearings", json={"hearing_date": TOMORROW}).json()
    client.post(
        f"{API}/hearings/{hearing['id']}/document",
        files={"file": ("a.pdf", b"%PDF", "application/pdf")},
    )
    documents.fail_remove = True

    assert client.delete(f"{API}/hearings/{hearing['id']}").status_code == 502
    assert len(client.get(f"{API}/legal-cases/{case['id']}").json()["hearings"]) == 1


def test_csv_export_and_import(client, acme):
    exported = client.get(f"{API}/customers/export")
    assert exported.status_code == 200
    assert exported.headers["content-type"].startswith("text/csv")

    response = client.post(
        f"{API}/customers/import",
        files={"file": ("customers.csv", exported.content, "text/csv")},
    )
    assert response.status_code == 201
    assert response.json()["imported"] == 1
    assert len(client.get(f"{API}/customers/").json()) == 2

    bad = client.post(
        f"{API}/employees/import",
        files={"file": ("employees.csv", b"full_name,email,position\nBob,nope,Clerk\n", "text/csv")},
    )
    assert bad.status_code == 422
    assert client.get(f"{API}/employees/").json() == []


def test_send_email_endpoint(client, emails):
    ok = client.post(f"{API}/notifications/send-email", json={
        "customerEmail": "c@d.com", "natureOfWork": "ITR Filing",
    })
    assert ok.status_code == 200
    assert ok.json()["status"] == "success"
    assert emails.sent == [{"to": "c@d.com", "work": "ITR Filing"}]

    assert client.post(f"{API}/notifications/send-email", json={}).status_code == 400
    assert client.post(f"{API}/notifications/send-email", json={"customerEmail": 5}).status_code == 400

    emails.fail = True
    assert client.post(f"{API}/notifications/send-email", json={"customerEmail": "c@d.com"}).status_code == 502
