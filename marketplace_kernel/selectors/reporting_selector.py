"""
Module: marketplace_kernel.selectors.reporting_selector
Responsibility: Read-only revenue aggregates over paid jobs inside a payment
    date window: the best-earning contractor profession and the clients who
    paid the most.
Architecture position: Kernel > Selectors.  Receives an already validated
    DateWindow (domain/reporting_window.py).

Invariants enforced:
    - Only jobs with ``paid = true`` and ``start <= payment_date <= end``
      count.
    - Deterministic ordering: sums descending, ties broken by ascending
      profession name (best_profession) or ascending first name, last name
      and id (best_clients).

Failure modes:
    - Returns None / an empty list when no paid job falls in the window.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import aliased

from marketplace_kernel.domain.dtos import ClientPayments, ProfessionEarnings
from marketplace_kernel.domain.reporting_window import (
    DEFAULT_BEST_CLIENTS_LIMIT,
    DateWindow,
)
from marketplace_kernel.models.contract import Contract
from marketplace_kernel.models.job import Job
from marketplace_kernel.models.profile import Profile
from marketplace_kernel.selectors.base import BaseSelector


class ReportingSelector(BaseSelector):
    """Revenue reports derived from Job rows at query time."""

    def _paid_in_window(self, query, window: DateWindow):
        return query.where(
            Job.paid.is_(True),
            Job.payment_date >= window.start,
            Job.payment_date <= window.end,
        )

    def best_profession(self, window: DateWindow) -> ProfessionEarnings | None:
        """
        Profession whose contractors earned the most inside the window.

        Returns:
            ProfessionEarnings for the top profession, or None if no paid
            job falls inside the window.
        """
        contractor = aliased(Profile, name="contractor")
        earned = func.sum(Job.price).label("earned")

        query = (
            select(contractor.profession, earned)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(contractor, Contract.contractor_id == contractor.id)
            .group_by(contractor.profession)
            .order_by(earned.desc(), contractor.profession.asc())
            .limit(1)
        )
        row = self.session.execute(self._paid_in_window(query, window)).first()
        if row is None:
            return None
        return ProfessionEarnings(profession=row.profession, earned=Decimal(row.earned))

    def best_clients(
        self,
        window: DateWindow,
        limit: int = DEFAULT_BEST_CLIENTS_LIMIT,
    ) -> list[ClientPayments]:
        """
        Clients who paid the most inside the window.

        Args:
            window: Validated payment date window.
            limit: Maximum number of rows (positive; resolve with
                reporting_window.resolve_limit first).

        Returns:
            Up to ``limit`` ClientPayments, highest total first.
        """
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")

        client = aliased(Profile, name="client")
        paid = func.sum(Job.price).label("paid")

        query = (
            select(client.id, client.first_name, client.last_name, paid)
            .select_from(Job)
            .join(Contract, Job.contract_id == Contract.id)
            .join(client, Contract.client_id == client.id)
            .group_by(client.id, client.first_name, client.last_name)
            .order_by(
                paid.desc(),
                client.first_name.asc(),
                client.last_name.asc(),
                client.id.asc(),
            )
            .limit(limit)
        )
        rows = self.session.execute(self._paid_in_window(query, window)).all()

        return [
            ClientPayments(
                id=row.id,
                full_name=f"{row.first_name} {row.last_name}",
                paid=Decimal(row.paid),
            )
            for row in rows
        ]
