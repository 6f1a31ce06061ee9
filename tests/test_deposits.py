"""Tests for balance deposits and the unpaid-jobs cap."""

from decimal import Decimal

import pytest

from src.services.errors import CapExceededError, InvalidAmountError, NotFoundError, TransactionFailure
from src.services.payments import PaymentService


@pytest.fixture
def client_with_200_unpaid(store, build_world):
    ids = build_world(store, client_balance="10", price="120")
    store.create_job(contract_id=ids["contract"], description="walls", price=Decimal("80"))
    return ids


def test_deposit_within_cap_increases_balance_by_amount(store, client_with_200_unpaid):
    receipt = PaymentService(store).deposit(client_with_200_unpaid["client"], 40)

    assert receipt.amount == Decimal("40")
    assert receipt.balance == Decimal("50")
    assert receipt.max_deposit == Decimal("50")
    assert store.get_profile(client_with_200_unpaid["client"]).balance == Decimal("50")


def test_deposit_exactly_at_cap_is_allowed(store, client_with_200_unpaid):
    PaymentService(store).deposit(client_with_200_unpaid["client"], "50.00")
    assert store.get_profile(client_with_200_unpaid["client"]).balance == Decimal("60")


def test_deposit_over_cap_is_rejected_without_change(store, client_with_200_unpaid):
    with pytest.raises(CapExceededError) as exc:
        PaymentService(store).deposit(client_with_200_unpaid["client"], 60)

    assert exc.value.status_code == 400
    assert exc.value.message == "Maximum Deposit Amount Exceeded."
    assert exc.value.payload["max_deposit"] == Decimal("50")
    assert store.get_profile(client_with_200_unpaid["client"]).balance == Decimal("10")


def test_deposit_cap_ignores_paid_jobs_and_other_contracts(store, client_with_200_unpaid, build_world):
    ids = client_with_200_unpaid
    PaymentService(store, clock=None).deposit(ids["client"], 1)  # 11 now
    store.create_contract(client_id=ids["client"], contractor_id=ids["contractor"], terms="later", status="new")
    other = build_world(store, price="4000")

    # unpaid in-progress total for our client is still 200
    with pytest.raises(CapExceededError):
        PaymentService(store).deposit(ids["client"], "50.01")
    assert other["client"] != ids["client"]


def test_deposit_uses_configured_ratio(store, client_with_200_unpaid):
    service = PaymentService(store, deposit_cap_ratio=Decimal("0.5"))
    receipt = service.deposit(client_with_200_unpaid["client"], 100)
    assert receipt.max_deposit == Decimal("100")


def test_deposit_without_unpaid_jobs_is_not_found(store, build_world):
    ids = build_world(store, status="new")
    with pytest.raises(NotFoundError):
        PaymentService(store).deposit(ids["client"], 1)
    assert store.get_profile(ids["client"]).balance == Decimal("100")


def test_deposit_to_contractor_is_not_found(store, world):
    with pytest.raises(NotFoundError):
        PaymentService(store).deposit(world["contractor"], 1)


@pytest.mark.parametrize("amount", [0, -5, "abc", None, "NaN", "1.234"])
def test_deposit_rejects_invalid_amounts(store, world, amount):
    with pytest.raises(InvalidAmountError):
        PaymentService(store).deposit(world["client"], amount)
    assert store.get_profile(world["client"]).balance == Decimal("100")


def test_deposit_store_fault_rolls_back(store, client_with_200_unpaid, monkeypatch):
    def boom(self, profile_id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(f"{type(store).__module__}._UnitOfWork.get_profile", boom)

    with pytest.raises(TransactionFailure) as exc:
        PaymentService(store).deposit(client_with_200_unpaid["client"], 20)

    assert exc.value.message == "Error! while depositing money."
    assert store.get_profile(client_with_200_unpaid["client"]).balance == Decimal("10")


@pytest.mark.parametrize("amount", [Decimal("1e30"), "123456789012345678901234567890.00"])
def test_deposit_huge_amount_reaches_cap_check(store, client_with_200_unpaid, amount):
    with pytest.raises(CapExceededError):
        PaymentService(store).deposit(client_with_200_unpaid["client"], amount)
    assert store.get_profile(client_with_200_unpaid["client"]).balance == Decimal("10")


def test_deposit_huge_amount_with_sub_cents_is_invalid(store, world):
    with pytest.raises(InvalidAmountError):
        PaymentService(store).deposit(world["client"], "123456789012345678901234567890.001")
