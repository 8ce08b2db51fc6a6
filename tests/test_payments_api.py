import pytest
from datetime import timedelta
from decimal import Decimal
from fastapi import status


def _schedule_bonus(client, employee_id, amount="150.00", when=None):
    payload = {"employee_id": employee_id, "amount": amount, "payment_date": when.isoformat()}
    return client.post("/api/payments/bonus", json=payload)


def test_run_payroll_reports_results(client, make_company, make_employee):
    company = make_company()
    for salary in ("1000", "2000", "3000"):
        make_employee(company, salary=Decimal(salary))

    response = client.post(f"/api/companies/{company.id}/run")
    assert response.status_code == status.HTTP_200_OK
    report = response.json()
    assert report["success_count"] == 3
    assert report["failure_count"] == 0
    assert report["message"] == "All 3 payments processed successfully!"
    assert float(report["total_paid"]) == 6000.0

    history = client.get(f"/api/companies/{company.id}/payments").json()
    assert len(history) == 3
    assert all(p["status"] == "completed" for p in history)
    assert all(p["transaction_hash"].startswith("0x") for p in history)


def test_run_for_unknown_company(client):
    response = client.post("/api/companies/id_missing/run")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_run_for_inactive_company_conflicts(client, make_company, make_employee):
    company = make_company(is_active=False)
    make_employee(company)

    response = client.post(f"/api/companies/{company.id}/run")
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["errors"][0]["code"] == "COMPANY_INACTIVE"
    assert client.get(f"/api/companies/{company.id}/payments").json() == []


def test_failed_payment_listed_with_error(client, gateway, make_company, make_employee):
    company = make_company()
    employee = make_employee(company)
    gateway.fail_addresses = {employee.wallet_address.lower()}

    report = client.post(f"/api/companies/{company.id}/run").json()
    assert report["message"] == "0 payments successful, 1 failed"

    failed = client.get(f"/api/companies/{company.id}/payments", params={"status": "failed"}).json()
    assert len(failed) == 1
    assert failed[0]["error_message"] == "Blockchain transaction failed"
    assert failed[0]["transaction_hash"] is None


def test_payment_history_rejects_unknown_status(client, make_company):
    company = make_company()
    response = client.get(f"/api/companies/{company.id}/payments", params={"status": "lost"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_schedule_and_cancel_bonus(client, clock, make_company, make_employee):
    company = make_company()
    employee = make_employee(company)

    response = _schedule_bonus(client, employee.id, when=clock.now + timedelta(days=2))
    assert response.status_code == status.HTTP_201_CREATED
    bonus = response.json()
    assert bonus["status"] == "scheduled"
    assert bonus["payment_type"] == "bonus"

    cancelled = client.post(f"/api/payments/{bonus['id']}/cancel")
    assert cancelled.status_code == status.HTTP_200_OK
    assert cancelled.json()["status"] == "cancelled"

    again = client.post(f"/api/payments/{bonus['id']}/cancel")
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["errors"][0]["code"] == "NOT_CANCELLABLE"


@pytest.mark.parametrize("amount", ["0", "-5"])
def test_bonus_amount_must_be_positive(client, clock, make_company, make_employee, amount):
    employee = make_employee(make_company())
    response = _schedule_bonus(client, employee.id, amount=amount, when=clock.now)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_bonus_for_unknown_employee(client, clock):
    response = _schedule_bonus(client, "id_nobody", when=clock.now)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_cancel_completed_payment_conflicts(client, make_company, make_employee):
    company = make_company()
    make_employee(company)
    client.post(f"/api/companies/{company.id}/run")
    payment = client.get(f"/api/companies/{company.id}/payments").json()[0]

    response = client.post(f"/api/payments/{payment['id']}/cancel")
    assert response.status_code == status.HTTP_409_CONFLICT
    assert client.get(f"/api/payments/{payment['id']}").json()["status"] == "completed"


def test_run_bonuses_executes_due_bonus(client, clock, make_company, make_employee):
    company = make_company()
    employee = make_employee(company)
    bonus = _schedule_bonus(client, employee.id, amount="75", when=clock.now - timedelta(minutes=5)).json()

    report = client.post(f"/api/companies/{company.id}/run-bonuses").json()
    assert report["run_type"] == "bonus"
    assert report["success_count"] == 1

    stored = client.get(f"/api/payments/{bonus['id']}").json()
    assert stored["status"] == "completed"
    assert stored["transaction_hash"]
