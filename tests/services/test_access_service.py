"""Tests for AccessService caller resolution."""

from decimal import Decimal
from uuid import uuid4

import pytest

from marketplace_kernel.domain.dtos import ProfileType
from marketplace_kernel.exceptions import ProfileNotFoundError, UnauthenticatedError
from marketplace_kernel.services.access_service import AccessService


class TestResolveCaller:

    def test_resolves_uuid_string(self, session, ledger):
        client = ledger.client(balance="10", first_name="Harry", last_name="Potter")

        info = AccessService(session).resolve_caller(str(client.id))

        assert info.id == client.id
        assert info.full_name == "Harry Potter"
        assert info.profile_type == ProfileType.CLIENT
        assert info.is_client is True

    def test_resolves_uuid(self, session, ledger):
        contractor = ledger.contractor()
        info = AccessService(session).resolve_caller(contractor.id)
        assert info.is_client is False

    @pytest.mark.parametrize("identifier", [None, "", "not-a-uuid", 42])
    def test_malformed_identifier(self, session, identifier):
        with pytest.raises(UnauthenticatedError) as exc_info:
            AccessService(session).resolve_caller(identifier)
        assert exc_info.value.code == "UNAUTHENTICATED"

    def test_unknown_profile(self, session, captured_logs):
        with pytest.raises(UnauthenticatedError):
            AccessService(session).resolve_caller(str(uuid4()))
        assert any(r["message"] == "caller_unresolved" for r in captured_logs())


class TestGetProfile:

    def test_found(self, session, ledger):
        client = ledger.client(balance="12.5")
        assert AccessService(session).get_profile(client.id).balance == Decimal("12.5")

    def test_not_found(self, session):
        with pytest.raises(ProfileNotFoundError):
            AccessService(session).get_profile(uuid4())
