"""
Module: marketplace_kernel.selectors.contract_selector
Responsibility: Contract visibility for a resolved caller.  A caller sees a
    contract only when they are its client or its contractor.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Visibility: every query filters on ``client_id = caller OR
      contractor_id = caller``.  A contract the caller is not a party to
      is indistinguishable from a missing one.
"""

from uuid import UUID

from sqlalchemy import or_, select

from marketplace_kernel.domain.dtos import ContractInfo, ContractStatus, JobInfo
from marketplace_kernel.exceptions import ContractNotFoundError
from marketplace_kernel.models.contract import Contract
from marketplace_kernel.models.job import Job
from marketplace_kernel.selectors.base import BaseSelector


def _visible_to(caller_id: UUID):
    return or_(Contract.client_id == caller_id, Contract.contractor_id == caller_id)


class ContractSelector(BaseSelector):
    """Read-only contract and job queries scoped to one caller."""

    def get_visible_contract(self, caller_id: UUID, contract_id: UUID) -> ContractInfo:
        """
        Get a contract the caller is a party to.

        Raises:
            ContractNotFoundError: Missing, or the caller is not a party.
        """
        stmt = select(Contract).where(Contract.id == contract_id, _visible_to(caller_id))
        contract = self.session.execute(stmt).scalar_one_or_none()
        if contract is None:
            raise ContractNotFoundError(str(contract_id))
        return ContractInfo.from_model(contract)

    def list_active_contracts(self, caller_id: UUID) -> list[ContractInfo]:
        """Non-terminated contracts the caller is a party to."""
        stmt = (
            select(Contract)
            .where(
                _visible_to(caller_id),
                Contract.status != ContractStatus.TERMINATED.value,
            )
            .order_by(Contract.created_at, Contract.id)
        )
        return [
            ContractInfo.from_model(c)
            for c in self.session.execute(stmt).scalars().all()
        ]

    def list_unpaid_jobs(self, caller_id: UUID) -> list[JobInfo]:
        """Unpaid jobs on in-progress contracts the caller is a party to."""
        stmt = (
            select(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .where(
                _visible_to(caller_id),
                Contract.status == ContractStatus.IN_PROGRESS.value,
                Job.paid.is_(False),
            )
            .order_by(Job.created_at, Job.id)
        )
        return [JobInfo.from_model(j) for j in self.session.execute(stmt).scalars().all()]
