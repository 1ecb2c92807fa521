"""
Module: marketplace_kernel.models.job
Responsibility: ORM persistence for priced units of work on a contract and
    their one-way payment state.
Architecture position: Kernel > Models.  Imports db/base.py only.

Invariants enforced:
    - price > 0 (ck_job_price_positive).
    - payment_date is set iff paid (ck_job_paid_has_payment_date).
    - paid moves false -> true exactly once; once paid, paid, payment_date,
      price and contract_id are frozen and the row cannot be deleted
      (db/immutability.py).

Failure modes:
    - IntegrityError on a non-positive price or inconsistent paid/payment_date.
    - ImmutabilityViolationError when a flush touches a paid job.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace_kernel.db.base import TrackedBase, UUIDString

if TYPE_CHECKING:
    from marketplace_kernel.models.contract import Contract


class Job(TrackedBase):
    """
    A priced job under a contract.

    Guarantees:
        - Created unpaid with no payment_date.
        - Mutated at most once, by PaymentService, when it is paid.
    """

    __tablename__ = "jobs"

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_job_price_positive"),
        CheckConstraint(
            "(paid AND payment_date IS NOT NULL) "
            "OR (NOT paid AND payment_date IS NULL)",
            name="ck_job_paid_has_payment_date",
        ),
        Index("idx_job_contract", "contract_id"),
        Index("idx_job_paid_payment_date", "paid", "payment_date"),
    )

    description: Mapped[str] = mapped_column(String(4000), nullable=False)

    price: Mapped[Decimal] = mapped_column(nullable=False)

    contract_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("contracts.id"),
        nullable=False,
    )

    paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    payment_date: Mapped[datetime | None] = mapped_column(nullable=True)

    contract: Mapped["Contract"] = relationship(back_populates="jobs")

    def __repr__(self) -> str:
        state = "paid" if self.paid else "unpaid"
        return f"<Job {self.id}: {self.price} ({state})>"
