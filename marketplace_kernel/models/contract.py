"""
Module: marketplace_kernel.models.contract
Responsibility: ORM persistence for contracts binding one client to one
    contractor.  Jobs accrue against a contract; the contract decides who
    may pay for them.
Architecture position: Kernel > Models.  Imports db/base.py and the domain
    enums only.

Invariants enforced:
    - client_id <> contractor_id (ck_contract_distinct_parties).
    - client_id and contractor_id are immutable once written (enforced by
      db/immutability.py); status transitions happen outside the kernel.

Failure modes:
    - IntegrityError on a self-contract or dangling profile reference.
    - ImmutabilityViolationError when a flush rewrites either party.
"""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace_kernel.db.base import TrackedBase, UUIDString
from marketplace_kernel.domain.dtos import ContractStatus

if TYPE_CHECKING:
    from marketplace_kernel.models.job import Job
    from marketplace_kernel.models.profile import Profile


class Contract(TrackedBase):
    """
    Agreement between a client and a contractor.

    Guarantees:
        - Exactly one client and one contractor, distinct profiles.
        - status in {new, in_progress, terminated}.

    Non-goals:
        - This model does NOT check that client is a CLIENT profile or that
          contractor is a CONTRACTOR profile; provisioning owns that.
    """

    __tablename__ = "contracts"

    __table_args__ = (
        CheckConstraint(
            "client_id <> contractor_id",
            name="ck_contract_distinct_parties",
        ),
        Index("idx_contract_client", "client_id"),
        Index("idx_contract_contractor", "contractor_id"),
        Index("idx_contract_status", "status"),
    )

    terms: Mapped[str] = mapped_column(String(4000), nullable=False)

    status: Mapped[ContractStatus] = mapped_column(
        String(20),
        nullable=False,
        default=ContractStatus.NEW.value,
    )

    client_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("profiles.id"),
        nullable=False,
    )

    contractor_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("profiles.id"),
        nullable=False,
    )

    client: Mapped["Profile"] = relationship(foreign_keys=[client_id])

    contractor: Mapped["Profile"] = relationship(foreign_keys=[contractor_id])

    jobs: Mapped[list["Job"]] = relationship(back_populates="contract")

    def __repr__(self) -> str:
        return f"<Contract {self.id}: {self.status}>"
