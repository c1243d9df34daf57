"""Invoice models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from installment_gen.models.enums import InstallmentFrequency, InvoiceStatus, InvoiceType


@dataclass
class Invoice:
    """Receivable issued to a client or tenant."""

    invoice_id: str
    invoice_number: str
    contact_id: str
    amount: Decimal
    issue_date: date
    due_date: date
    invoice_type: InvoiceType
    status: InvoiceStatus = InvoiceStatus.UNPAID
    paid_amount: Decimal = Decimal("0")
    description: str | None = None
    agreement_id: str | None = None
    project_id: str | None = None
    unit_id: str | None = None
    property_id: str | None = None
    building_id: str | None = None
    category_id: str | None = None
    security_deposit_charge: Decimal | None = None
    rental_month: str | None = None  # YYYY-MM
    created_at: datetime | None = None  # Record creation timestamp


@dataclass
class RecurringInvoiceTemplate:
    """Template that produces one invoice per period (e.g. monthly rent)."""

    template_id: str
    agreement_id: str
    contact_id: str
    property_id: str
    amount: Decimal
    description_template: str  # "{Month}" is replaced with the billed month
    day_of_month: int
    next_due_date: date
    frequency: InstallmentFrequency = InstallmentFrequency.MONTHLY
    invoice_type: InvoiceType = InvoiceType.RENTAL
    building_id: str | None = None
    active: bool = True
    auto_generate: bool = True
