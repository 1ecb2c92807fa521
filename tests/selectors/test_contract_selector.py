"""Tests for ContractSelector visibility rules."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from marketplace_kernel.domain.dtos import ContractStatus
from marketplace_kernel.exceptions import ContractNotFoundError
from marketplace_kernel.selectors.contract_selector import ContractSelector


@pytest.fixture
def parties(ledger):
    client = ledger.client()
    contractor = ledger.contractor()
    stranger = ledger.client(first_name="Stranger")
    return client, contractor, stranger


class TestGetVisibleContract:

    def test_visible_to_both_parties(self, session, ledger, parties):
        client, contractor, _ = parties
        contract = ledger.contract(client, contractor)
        selector = ContractSelector(session)

        assert selector.get_visible_contract(client.id, contract.id).id == contract.id
        assert selector.get_visible_contract(contractor.id, contract.id).id == contract.id

    def test_hidden_from_others(self, session, ledger, parties):
        client, contractor, stranger = parties
        contract = ledger.contract(client, contractor)

        with pytest.raises(ContractNotFoundError):
            ContractSelector(session).get_visible_contract(stranger.id, contract.id)

    def test_missing(self, session, parties):
        client, _, _ = parties
        with pytest.raises(ContractNotFoundError):
            ContractSelector(session).get_visible_contract(client.id, uuid4())

    def test_returns_dto(self, session, ledger, parties):
        client, contractor, _ = parties
        contract = ledger.contract(client, contractor, status=ContractStatus.NEW, terms="Build a shed")

        info = ContractSelector(session).get_visible_contract(client.id, contract.id)

        assert info.status is ContractStatus.NEW
        assert info.terms == "Build a shed"
        assert info.client_id == client.id
        assert info.contractor_id == contractor.id


class TestListActiveContracts:

    def test_excludes_terminated_and_foreign(self, session, ledger, parties):
        client, contractor, stranger = parties
        new = ledger.contract(client, contractor, status=ContractStatus.NEW)
        active = ledger.contract(client, contractor)
        ledger.contract(client, contractor, status=ContractStatus.TERMINATED)
        ledger.contract(stranger, contractor)

        ids = {c.id for c in ContractSelector(session).list_active_contracts(client.id)}

        assert ids == {new.id, active.id}

    def test_contractor_sees_all_their_clients(self, session, ledger, parties):
        client, contractor, stranger = parties
        ledger.contract(client, contractor)
        ledger.contract(stranger, contractor)

        assert len(ContractSelector(session).list_active_contracts(contractor.id)) == 2


class TestListUnpaidJobs:

    def test_only_unpaid_on_in_progress(self, session, ledger, parties):
        client, contractor, _ = parties
        active = ledger.contract(client, contractor)
        new = ledger.contract(client, contractor, status=ContractStatus.NEW)
        wanted = ledger.job(active, "10")
        ledger.job(active, "20", paid_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        ledger.job(new, "30")

        jobs = ContractSelector(session).list_unpaid_jobs(client.id)

        assert [j.id for j in jobs] == [wanted.id]
        assert jobs[0].paid is False

    def test_stranger_sees_nothing(self, session, ledger, parties):
        client, contractor, stranger = parties
        ledger.job(ledger.contract(client, contractor), "10")

        assert ContractSelector(session).list_unpaid_jobs(stranger.id) == []
