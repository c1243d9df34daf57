"""Invoice schedule generators and synthetic agreement generators."""

from installment_gen.generators.agreement import ProjectAgreementGenerator
from installment_gen.generators.dates import add_months_clamped
from installment_gen.generators.rental import RenewalInvoices, RentalRenewalInvoiceGenerator
from installment_gen.generators.schedule import (
    GenerationResult,
    InstallmentScheduleGenerator,
    generate_installment_schedule,
)

__all__ = [
    "GenerationResult",
    "InstallmentScheduleGenerator",
    "ProjectAgreementGenerator",
    "RenewalInvoices",
    "RentalRenewalInvoiceGenerator",
    "add_months_clamped",
    "generate_installment_schedule",
]
