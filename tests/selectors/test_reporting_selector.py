"""
Tests for ReportingSelector.

Covers:
- best_profession: highest earning profession, ties, empty windows
- best_clients: ordering, limit, ties
- Window filter: inclusive bounds, unpaid jobs ignored
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from marketplace_kernel.domain.reporting_window import parse_date_window
from marketplace_kernel.selectors.reporting_selector import ReportingSelector


def _at(day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(2024, 3, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def march():
    return parse_date_window("2024-03-01", "2024-03-31")


@pytest.fixture
def earnings(ledger):
    """Contractor A (Programmer) earned 500, contractor B (Designer) 300."""
    client = ledger.client(first_name="Paying")
    a = ledger.contractor(first_name="A", profession="Programmer")
    b = ledger.contractor(first_name="B", profession="Designer")
    ledger.job(ledger.contract(client, a), "500", paid_at=_at(5))
    ledger.job(ledger.contract(client, b), "300", paid_at=_at(6))
    return client, a, b


class TestBestProfession:

    def test_highest_earner(self, session, march, earnings):
        best = ReportingSelector(session).best_profession(march)

        assert best.profession == "Programmer"
        assert best.earned == Decimal("500")

    def test_sums_across_contractors_of_one_profession(self, session, ledger, march, earnings):
        client, _, _ = earnings
        other_designer = ledger.contractor(first_name="C", profession="Designer")
        ledger.job(ledger.contract(client, other_designer), "250", paid_at=_at(7))

        best = ReportingSelector(session).best_profession(march)

        assert best.profession == "Designer"
        assert best.earned == Decimal("550")

    def test_empty_window(self, session, earnings):
        window = parse_date_window("2024-04-01", "2024-04-30")
        assert ReportingSelector(session).best_profession(window) is None

    def test_unpaid_jobs_ignored(self, session, ledger, march, earnings):
        client, _, b = earnings
        ledger.job(ledger.contract(client, b), "10000")

        assert ReportingSelector(session).best_profession(march).profession == "Programmer"

    def test_tie_broken_by_profession_name(self, session, ledger, march):
        client = ledger.client()
        for profession in ("Zoologist", "Architect"):
            contractor = ledger.contractor(profession=profession)
            ledger.job(ledger.contract(client, contractor), "100", paid_at=_at(3))

        assert ReportingSelector(session).best_profession(march).profession == "Architect"


class TestBestClients:

    def test_orders_by_total_paid(self, session, ledger, march):
        contractor = ledger.contractor()
        totals = {"Ann": ["10", "15"], "Bob": ["40"], "Cid": ["5"]}
        for name, prices in totals.items():
            contract = ledger.contract(ledger.client(first_name=name), contractor)
            for price in prices:
                ledger.job(contract, price, paid_at=_at(10))

        rows = ReportingSelector(session).best_clients(march, limit=3)

        assert [(r.full_name, r.paid) for r in rows] == [
            ("Bob Client", Decimal("40")),
            ("Ann Client", Decimal("25")),
            ("Cid Client", Decimal("5")),
        ]

    def test_default_limit_is_two(self, session, ledger, march):
        contractor = ledger.contractor()
        for name in ("Ann", "Bob", "Cid"):
            contract = ledger.contract(ledger.client(first_name=name), contractor)
            ledger.job(contract, "10", paid_at=_at(10))

        assert len(ReportingSelector(session).best_clients(march)) == 2

    def test_ties_broken_by_name(self, session, ledger, march):
        contractor = ledger.contractor()
        for name in ("Zed", "Amy"):
            contract = ledger.contract(ledger.client(first_name=name), contractor)
            ledger.job(contract, "10", paid_at=_at(10))

        rows = ReportingSelector(session).best_clients(march, limit=1)

        assert rows[0].full_name == "Amy Client"

    def test_row_carries_client_id(self, session, march, earnings):
        client, _, _ = earnings
        rows = ReportingSelector(session).best_clients(march)
        assert rows[0].id == client.id
        assert rows[0].paid == Decimal("800")

    def test_empty_window(self, session, earnings):
        window = parse_date_window("2023-01-01", "2023-01-31")
        assert ReportingSelector(session).best_clients(window) == []

    def test_limit_must_be_positive(self, session, march):
        with pytest.raises(ValueError):
            ReportingSelector(session).best_clients(march, limit=0)


class TestWindowBounds:

    @pytest.fixture
    def edge_jobs(self, ledger):
        client = ledger.client()
        contractor = ledger.contractor(profession="Edge")
        contract = ledger.contract(client, contractor)
        ledger.job(contract, "1", paid_at=datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc))
        ledger.job(contract, "2", paid_at=datetime(2024, 3, 31, 23, 59, 59, tzinfo=timezone.utc))
        ledger.job(contract, "4", paid_at=datetime(2024, 4, 1, 0, 0, tzinfo=timezone.utc))
        ledger.job(contract, "8", paid_at=datetime(2024, 2, 29, 23, 59, 59, tzinfo=timezone.utc))
        return client

    def test_day_bounds_are_inclusive(self, session, march, edge_jobs):
        best = ReportingSelector(session).best_profession(march)
        assert best.earned == Decimal("3")

    def test_datetime_bounds(self, session, edge_jobs):
        window = parse_date_window("2024-03-01T00:00:00+00:00", "2024-03-31T12:00:00+00:00")
        rows = ReportingSelector(session).best_clients(window)
        assert rows[0].paid == Decimal("1")

    def test_offset_bounds_normalized_to_utc(self, session, edge_jobs):
        # 2024-04-01T02:00+02:00 is 2024-04-01T00:00Z
        window = parse_date_window("2024-04-01T02:00:00+02:00", "2024-04-01T02:00:00+02:00")
        assert ReportingSelector(session).best_profession(window).earned == Decimal("4")
