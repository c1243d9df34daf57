"""Caller-side workflows that generate invoices and persist them."""

from installment_gen.workflows.project_agreement import ProjectAgreementInvoicing
from installment_gen.workflows.rental_renewal import RentalAgreementRenewal

__all__ = ["ProjectAgreementInvoicing", "RentalAgreementRenewal"]
