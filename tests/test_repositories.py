import pytest
from datetime import timedelta
from decimal import Decimal

from paystream.core.exceptions import InvalidStatusTransitionError, NotFoundError
from paystream.models.payment import PaymentStatus, can_transition
from paystream.repositories import CompanyRepository, EmployeeRepository, PaymentRepository


def _payment(db_session, company, employee=None, **overrides):
    data = {
        "company_id": company.id,
        "employee_id": employee.id if employee else None,
        "amount": Decimal("100"),
        "payment_date": company.created_at,
        "status": "pending",
        "payment_type": "monthly",
    }
    data.update(overrides)
    return PaymentRepository(db_session).create(data)


def test_create_assigns_prefixed_id(db_session, make_company):
    company = make_company()
    assert company.id.startswith("id_")
    assert len(company.id) == 19


def test_create_keeps_explicit_id(db_session):
    company = CompanyRepository(db_session).create({
        "id": "id_fixed",
        "name": "Fixed",
        "email": "fixed@acme.io",
        "wallet_address": "0xabc",
    })
    assert company.id == "id_fixed"
    assert company.payment_schedule == "monthly"
    assert company.is_active is True


def test_get_missing_raises_not_found(db_session):
    with pytest.raises(NotFoundError) as exc_info:
        CompanyRepository(db_session).get("id_missing")
    assert exc_info.value.status_code == 404
    assert CompanyRepository(db_session).find("id_missing") is None


def test_update_ignores_unknown_fields_and_id(db_session, make_company):
    company = make_company()
    updated = CompanyRepository(db_session).update(company.id, {
        "name": "Renamed",
        "id": "id_hijack",
        "not_a_column": 1,
    })
    assert updated.id == company.id
    assert updated.name == "Renamed"


def test_delete(db_session, make_company):
    repo = CompanyRepository(db_session)
    company = make_company()
    assert repo.delete(company.id) is True
    with pytest.raises(NotFoundError):
        repo.delete(company.id)


def test_search_matches_any_field_case_insensitively(db_session, make_company):
    make_company(name="Globex Industries")
    make_company(name="Initech", email="Payroll@GLOBEX-partner.io")
    make_company(name="Umbrella")

    names = sorted(c.name for c in CompanyRepository(db_session).search("globex"))
    assert names == ["Globex Industries", "Initech"]


def test_search_treats_wildcards_literally(db_session, make_company):
    make_company(name="100% Remote")
    make_company(name="Office Ltd")

    assert [c.name for c in CompanyRepository(db_session).search("%")] == ["100% Remote"]


def test_by_wallet_is_case_insensitive(db_session, make_company):
    company = make_company(wallet_address="0xAbCdEf0000000000000000000000000000000001")
    found = CompanyRepository(db_session).by_wallet("0xabcdef0000000000000000000000000000000001")
    assert found.id == company.id
    assert CompanyRepository(db_session).by_wallet("0xdead") is None


def test_employees_for_company(db_session, make_company, make_employee):
    company = make_company()
    other = make_company()
    make_employee(company, name="Zed")
    make_employee(company, name="Amy", is_active=False)
    make_employee(other, name="Bob")

    repo = EmployeeRepository(db_session)
    assert [e.name for e in repo.for_company(company.id)] == ["Amy", "Zed"]
    assert [e.name for e in repo.active_for_company(company.id)] == ["Zed"]


def test_transaction_hash_round_trips(db_session, make_company, make_employee):
    company = make_company()
    payment = _payment(db_session, company, make_employee(company))
    tx_hash = "0x" + "ab" * 32

    PaymentRepository(db_session).mark_completed(payment.id, tx_hash)

    stored = PaymentRepository(db_session).get(payment.id)
    assert stored.status == "completed"
    assert stored.transaction_hash == tx_hash


def test_completed_payment_cannot_return_to_pending(db_session, make_company):
    company = make_company()
    payment = _payment(db_session, company)
    repo = PaymentRepository(db_session)
    repo.mark_completed(payment.id, "0x01")

    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        repo.update(payment.id, {"status": "pending"})
    assert exc_info.value.status_code == 409
    assert repo.get(payment.id).status == "completed"


def test_terminal_status_cannot_be_rewritten(db_session, make_company):
    company = make_company()
    payment = _payment(db_session, company)
    repo = PaymentRepository(db_session)
    repo.mark_failed(payment.id, "rejected")

    with pytest.raises(InvalidStatusTransitionError):
        repo.mark_failed(payment.id, "rejected again")
    assert repo.get(payment.id).error_message == "rejected"


@pytest.mark.parametrize("finish", ["completed", "failed", "cancelled"])
def test_terminal_payment_fields_are_frozen(db_session, make_company, finish):
    company = make_company()
    payment = _payment(db_session, company, status="scheduled", payment_type="bonus")
    repo = PaymentRepository(db_session)
    repo.update(payment.id, {"status": finish, "transaction_hash": "0x01" if finish == "completed" else None})

    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        repo.update(payment.id, {"amount": Decimal("999"), "transaction_hash": None})
    assert exc_info.value.status_code == 409

    stored = repo.get(payment.id)
    assert stored.status == finish
    assert stored.amount == Decimal("100")
    assert stored.transaction_hash == ("0x01" if finish == "completed" else None)


def test_pending_payment_fields_can_change(db_session, make_company):
    company = make_company()
    payment = _payment(db_session, company)

    updated = PaymentRepository(db_session).update(payment.id, {"error_message": "retrying"})
    assert updated.error_message == "retrying"
    assert updated.status == "pending"


@pytest.mark.parametrize("current, requested, allowed", [
    ("pending", "completed", True),
    ("pending", "failed", True),
    ("pending", "cancelled", False),
    ("scheduled", "completed", True),
    ("scheduled", "cancelled", True),
    ("scheduled", "pending", False),
    ("completed", "failed", False),
    ("failed", "completed", False),
    ("cancelled", "scheduled", False),
])
def test_transition_table(current, requested, allowed):
    assert can_transition(current, requested) is allowed


def test_payments_for_company_filters_and_orders(db_session, make_company):
    company = make_company()
    base = company.created_at
    old = _payment(db_session, company, payment_date=base)
    new = _payment(db_session, company, payment_date=base + timedelta(days=3), status="scheduled",
                   payment_type="bonus")

    repo = PaymentRepository(db_session)
    assert [p.id for p in repo.for_company(company.id)] == [new.id, old.id]
    assert [p.id for p in repo.for_company(company.id, status=PaymentStatus.SCHEDULED.value)] == [new.id]
    assert [p.id for p in repo.for_company(company.id, limit=1)] == [new.id]


def test_latest_completed_date_counts_every_payment_type(db_session, make_company):
    company = make_company()
    base = company.created_at
    repo = PaymentRepository(db_session)
    assert repo.latest_completed_date(company.id) is None

    monthly = _payment(db_session, company, payment_date=base + timedelta(days=1))
    bonus = _payment(db_session, company, payment_date=base + timedelta(days=5), payment_type="bonus")
    repo.mark_completed(monthly.id, "0x01")
    repo.mark_completed(bonus.id, "0x02")

    failed = _payment(db_session, company, payment_date=base + timedelta(days=9))
    repo.mark_failed(failed.id, "rejected")

    assert repo.latest_completed_date(company.id).replace(tzinfo=None) == (base + timedelta(days=5)).replace(tzinfo=None)
