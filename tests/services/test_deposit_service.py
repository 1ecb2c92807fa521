"""
Tests for DepositService.

Covers:
- Cap = 25% of unpaid jobs on in-progress contracts (200 unpaid -> 50)
- Boundary: at the cap accepted, above it rejected
- Amount validation before any store access
- Paid jobs and non-in-progress contracts do not raise the cap
- Zero cap rejects every deposit
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from marketplace_kernel.domain.dtos import ContractStatus
from marketplace_kernel.exceptions import (
    DepositCapExceededError,
    InvalidAmountError,
)
from marketplace_kernel.services.deposit_service import (
    DEFAULT_DEPOSIT_CAP_RATIO,
    DepositService,
    validate_deposit_amount,
)

PAID_AT = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def debtor(ledger):
    """Client owing 200 on an in-progress contract."""
    client = ledger.client(balance="100")
    contractor = ledger.contractor()
    contract = ledger.contract(client, contractor)
    ledger.job(contract, "120")
    ledger.job(contract, "80")
    return client


class TestValidateDepositAmount:
    """Amount parsing."""

    @pytest.mark.parametrize("amount", [Decimal("50"), 50, 50.5, "50", " 12.34 "])
    def test_accepts_positive_numbers(self, amount):
        assert validate_deposit_amount(amount) > 0

    @pytest.mark.parametrize(
        "amount", [0, "0", -50, "-0.01", None, "", "abc", "NaN", "inf", True, [], {}]
    )
    def test_rejects_non_positive_or_non_numeric(self, amount):
        with pytest.raises(InvalidAmountError) as exc_info:
            validate_deposit_amount(amount)
        assert exc_info.value.code == "INVALID_AMOUNT"

    @pytest.mark.parametrize("amount", ["0.0000000001", Decimal("1.0000000005"), "1E-10"])
    def test_rejects_amounts_finer_than_ledger_precision(self, amount):
        with pytest.raises(InvalidAmountError):
            validate_deposit_amount(amount)

    @pytest.mark.parametrize(
        "amount,expected",
        [("0.000000001", Decimal("0.000000001")), ("5.0000000000000", Decimal("5"))],
    )
    def test_accepts_ledger_precision(self, amount, expected):
        assert validate_deposit_amount(amount) == expected

    def test_float_goes_through_str(self):
        assert validate_deposit_amount(0.1) == Decimal("0.1")


class TestDeposit:
    """Capped deposits."""

    def test_max_deposit_is_quarter_of_unpaid(self, session, debtor):
        assert DepositService(session).max_deposit_for(debtor.id) == Decimal("50")

    def test_deposit_at_cap_succeeds(self, session, ledger, debtor):
        result = DepositService(session).deposit(debtor.id, "50")

        assert result.amount == Decimal("50")
        assert result.max_deposit == Decimal("50")
        assert result.new_balance == Decimal("150")
        assert ledger.balance(debtor) == Decimal("150")

    def test_deposit_above_cap_fails(self, session, ledger, debtor):
        with pytest.raises(DepositCapExceededError) as exc_info:
            DepositService(session).deposit(debtor.id, "51")

        assert "25%" in str(exc_info.value)
        assert exc_info.value.max_deposit == Decimal("50")
        assert ledger.balance(debtor) == Decimal("100")

    def test_just_above_cap_fails(self, session, debtor):
        with pytest.raises(DepositCapExceededError):
            DepositService(session).deposit(debtor.id, "50.01")

    def test_invalid_amount_checked_first(self, session, debtor, captured_logs):
        with pytest.raises(InvalidAmountError):
            DepositService(session).deposit(debtor.id, "-5")
        assert not any(r["message"] == "deposit_rejected" for r in captured_logs())

    def test_paid_jobs_do_not_count(self, session, ledger):
        client = ledger.client()
        contract = ledger.contract(client, ledger.contractor())
        ledger.job(contract, "1000", paid_at=PAID_AT)
        ledger.job(contract, "40")

        assert DepositService(session).max_deposit_for(client.id) == Decimal("10")

    @pytest.mark.parametrize("status", [ContractStatus.NEW, ContractStatus.TERMINATED])
    def test_other_contract_statuses_do_not_count(self, session, ledger, status):
        client = ledger.client()
        contractor = ledger.contractor()
        ledger.job(ledger.contract(client, contractor, status=status), "400")
        ledger.job(ledger.contract(client, contractor), "40")

        assert DepositService(session).max_deposit_for(client.id) == Decimal("10")

    def test_only_own_obligations_count(self, session, ledger, debtor):
        """Jobs owed by other clients, or owed TO a contractor, are ignored."""
        other = ledger.client()
        contractor = ledger.contractor()
        ledger.job(ledger.contract(other, contractor), "4000")

        assert DepositService(session).max_deposit_for(debtor.id) == Decimal("50")
        assert DepositService(session).max_deposit_for(contractor.id) == Decimal("0")

    def test_zero_cap_rejects_everything(self, session, ledger):
        client = ledger.client(balance="10")

        with pytest.raises(DepositCapExceededError):
            DepositService(session).deposit(client.id, "0.01")
        assert ledger.balance(client) == Decimal("10")

    def test_unknown_profile_has_zero_cap(self, session):
        with pytest.raises(DepositCapExceededError):
            DepositService(session).deposit(uuid4(), "1")

    def test_custom_cap_ratio(self, session, ledger, debtor):
        service = DepositService(session, cap_ratio=Decimal("0.5"))

        service.deposit(debtor.id, "100")

        assert ledger.balance(debtor) == Decimal("200")
        assert service.cap_ratio == Decimal("0.5")

    def test_cap_message_names_configured_percentage(self, session, debtor):
        with pytest.raises(DepositCapExceededError) as exc_info:
            DepositService(session, cap_ratio=Decimal("0.1")).deposit(debtor.id, "21")
        assert "10%" in str(exc_info.value)

    @pytest.mark.parametrize("ratio", [Decimal("-0.1"), Decimal("1.5")])
    def test_cap_ratio_out_of_range(self, session, ratio):
        with pytest.raises(ValueError):
            DepositService(session, cap_ratio=ratio)

    def test_default_ratio_is_quarter(self):
        assert DEFAULT_DEPOSIT_CAP_RATIO == Decimal("0.25")

    def test_deposit_logged(self, session, debtor, captured_logs):
        DepositService(session).deposit(debtor.id, "20")

        applied = [r for r in captured_logs() if r["message"] == "deposit_applied"]
        assert len(applied) == 1
        assert applied[0]["profile_id"] == str(debtor.id)


class TestCapBoundary:
    """Accept iff amount <= 0.25 * total unpaid."""

    @settings(
        max_examples=25,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    @given(
        unpaid=st.decimals(min_value=Decimal("0.04"), max_value=10000, places=2),
        amount=st.decimals(min_value=Decimal("0.01"), max_value=5000, places=2),
    )
    def test_cap_boundary(self, session, ledger, unpaid, amount):
        client = ledger.client(balance="0")
        ledger.job(ledger.contract(client, ledger.contractor()), unpaid)
        cap = unpaid * Decimal("0.25")

        try:
            DepositService(session).deposit(client.id, amount)
        except DepositCapExceededError:
            assert amount > cap
            session.rollback()
        else:
            assert amount <= cap
            session.commit()
            assert ledger.balance(client) == amount


class TestStoredPrecision:

    def test_new_balance_matches_stored_balance(self, session, ledger, debtor):
        result = DepositService(session).deposit(debtor.id, "0.123456789")
        session.commit()

        assert result.new_balance == Decimal("100.123456789")
        assert ledger.balance(debtor) == result.new_balance
