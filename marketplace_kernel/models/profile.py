"""
Module: marketplace_kernel.models.profile
Responsibility: ORM persistence for marketplace participants (clients and
    contractors) and their account balances.
Architecture position: Kernel > Models.  Imports db/base.py and the domain
    enums only.  MUST NOT import from services/, selectors/, or outer layers.

Invariants enforced:
    - balance >= 0 (ck_profile_balance_non_negative).  A payment that would
      overdraw a client is rejected by PaymentService before flush; the
      constraint is the last line of defence.
    - balance is mutated only by PaymentService and DepositService, inside
      a transaction, after locking the row (LedgerStore.lock_profile_for_update).

Failure modes:
    - IntegrityError if a flush would leave a negative balance.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_kernel.db.base import TrackedBase
from marketplace_kernel.domain.dtos import ProfileType


class Profile(TrackedBase):
    """
    A client or contractor with an account balance.

    Guarantees:
        - profile_type is set at provisioning and never changes in the kernel.
        - balance defaults to zero and never goes negative.
    """

    __tablename__ = "profiles"

    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_profile_balance_non_negative"),
        Index("idx_profile_type", "profile_type"),
        Index("idx_profile_profession", "profession"),
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)

    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    profession: Mapped[str] = mapped_column(String(100), nullable=False)

    balance: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    profile_type: Mapped[ProfileType] = mapped_column(
        String(20),
        nullable=False,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Profile {self.id}: {self.full_name} ({self.profile_type})>"
