"""Agreement models: project sales, rentals and installment plans."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from installment_gen.models.enums import (
    InstallmentFrequency,
    ProjectAgreementStatus,
    RentalAgreementStatus,
)


@dataclass
class ProjectAgreement:
    """Sale of one or more project units to a client."""

    agreement_id: str
    agreement_number: str
    client_id: str
    project_id: str
    unit_ids: list[str]
    selling_price: Decimal  # Total amount to be collected
    issue_date: date
    description: str | None = None
    status: ProjectAgreementStatus = ProjectAgreementStatus.ACTIVE
    selling_price_category_id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class InstallmentPlan:
    """Terms for amortizing a selling price into periodic invoices."""

    duration_years: Decimal
    down_payment_percentage: Decimal  # 0-100
    frequency: InstallmentFrequency = InstallmentFrequency.MONTHLY


@dataclass
class RentalAgreement:
    """Lease of a property to a tenant."""

    agreement_id: str
    agreement_number: str
    contact_id: str
    property_id: str
    start_date: date
    end_date: date
    monthly_rent: Decimal
    rent_due_day: int = 1
    status: RentalAgreementStatus = RentalAgreementStatus.ACTIVE
    security_deposit: Decimal | None = None
    building_id: str | None = None
    previous_agreement_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    unit_ids: list[str] = field(default_factory=list)
