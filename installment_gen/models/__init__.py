"""Domain models for agreements, invoices and numbering."""

from installment_gen.models.agreement import InstallmentPlan, ProjectAgreement, RentalAgreement
from installment_gen.models.base import Event
from installment_gen.models.enums import (
    InstallmentFrequency,
    InvoiceStatus,
    InvoiceType,
    ProjectAgreementStatus,
    RentalAgreementStatus,
)
from installment_gen.models.invoice import Invoice, RecurringInvoiceTemplate
from installment_gen.models.numbering import NumberingState

__all__ = [
    "Event",
    "InstallmentFrequency",
    "InstallmentPlan",
    "Invoice",
    "InvoiceStatus",
    "InvoiceType",
    "NumberingState",
    "ProjectAgreement",
    "ProjectAgreementStatus",
    "RecurringInvoiceTemplate",
    "RentalAgreement",
    "RentalAgreementStatus",
]
