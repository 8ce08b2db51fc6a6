from fastapi import status


def test_scheduler_start_stop(client, scheduler):
    assert client.get("/api/scheduler/status").json()["status"] == "stopped"

    started = client.post("/api/scheduler/start")
    assert started.status_code == status.HTTP_200_OK
    assert started.json()["status"] == "running"
    assert client.post("/api/scheduler/start").json()["status"] == "running"

    stopped = client.post("/api/scheduler/stop")
    assert stopped.json()["status"] == "stopped"
    assert client.post("/api/scheduler/stop").json()["status"] == "stopped"
    assert scheduler.get_status() == "stopped"


def test_schedule_state_reports_due(client, clock, make_company):
    company = make_company(payment_schedule="weekly")
    clock.advance(days=7)

    data = client.get(f"/api/companies/{company.id}/schedule-state").json()
    assert data["state"] == "due"


def test_schedule_state_after_run(client, clock, make_company, make_employee):
    company = make_company(payment_schedule="biweekly")
    make_employee(company)
    clock.advance(days=20)
    client.post(f"/api/companies/{company.id}/run")

    data = client.get(f"/api/companies/{company.id}/schedule-state").json()
    assert data["state"] == "scheduled"
    assert data["next_payment_date"].startswith("2024-02-04")


def test_schedule_state_unknown_company(client):
    response = client.get("/api/companies/id_missing/schedule-state")
    assert response.status_code == status.HTTP_404_NOT_FOUND
