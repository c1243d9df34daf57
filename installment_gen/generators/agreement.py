"""Synthetic project agreements and installment plans."""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterator

from installment_gen.generators.base import BaseGenerator
from installment_gen.models import (
    InstallmentFrequency,
    InstallmentPlan,
    ProjectAgreement,
    ProjectAgreementStatus,
)


class ProjectAgreementGenerator(BaseGenerator):
    """Generate synthetic project sale agreements and installment plans."""

    # (min, max) selling price in thousands
    PRICE_RANGE = (500, 25000)

    DURATIONS_YEARS = [Decimal("0.5"), Decimal("1"), Decimal("1.5"), Decimal("2"), Decimal("3"), Decimal("5")]
    DOWN_PAYMENT_PERCENTAGES = [Decimal("0"), Decimal("10"), Decimal("15"), Decimal("20"), Decimal("25"), Decimal("30")]

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
        num_projects: int = 5,
    ) -> None:
        super().__init__(seed, locale)
        self.project_ids = [f"proj-{i + 1:03d}" for i in range(num_projects)]

    def generate(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> ProjectAgreement:
        """Generate a project agreement.

        Parameters
        ----------
        start_date : date | None
            Earliest issue date (default: two years ago).
        end_date : date | None
            Latest issue date (default: today).

        Returns
        -------
        ProjectAgreement
            Generated agreement without an agreement number; the invoicing
            workflow allocates one.
        """
        end_date = end_date or date.today()
        start_date = start_date or end_date - timedelta(days=730)

        project_id = self.rng.choice(self.project_ids)
        num_units = 1 if self.rng.random() < 0.85 else 2
        unit_ids = [
            f"{project_id}-unit-{self.rng.randint(1, 400):04d}" for _ in range(num_units)
        ]
        selling_price = Decimal(self.rng.randint(*self.PRICE_RANGE) * 1000)

        return ProjectAgreement(
            agreement_id=self.fake.uuid4(),
            agreement_number="",
            client_id=self.fake.uuid4(),
            project_id=project_id,
            unit_ids=unit_ids,
            selling_price=selling_price,
            issue_date=self.fake.date_between(start_date=start_date, end_date=end_date),
            description=f"{self.fake.last_name()} Residency - {', '.join(unit_ids)}",
            status=ProjectAgreementStatus.ACTIVE,
            selling_price_category_id="cat-unit-sales",
            created_at=datetime.now(),
        )

    def generate_plan(self) -> InstallmentPlan:
        """Generate an installment plan with common market terms."""
        return InstallmentPlan(
            duration_years=self.rng.choice(self.DURATIONS_YEARS),
            down_payment_percentage=self.rng.choice(self.DOWN_PAYMENT_PERCENTAGES),
            frequency=self.rng.choice(list(InstallmentFrequency)),
        )

    def generate_batch(
        self,
        count: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Iterator[ProjectAgreement]:
        """Generate ``count`` agreements."""
        for _ in range(count):
            yield self.generate(start_date=start_date, end_date=end_date)
