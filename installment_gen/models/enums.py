"""Enumeration types for agreement and invoice entities."""

from enum import Enum


class InstallmentFrequency(str, Enum):
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    YEARLY = "Yearly"


class InvoiceStatus(str, Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"
    PARTIALLY_PAID = "Partially Paid"
    OVERDUE = "Overdue"
    DRAFT = "Draft"


class InvoiceType(str, Enum):
    RENTAL = "Rental"
    SECURITY_DEPOSIT = "Security Deposit"
    SERVICE_CHARGE = "Service Charge"
    INSTALLMENT = "Installment"


class ProjectAgreementStatus(str, Enum):
    ACTIVE = "Active"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


class RentalAgreementStatus(str, Enum):
    ACTIVE = "Active"
    TERMINATED = "Terminated"
    EXPIRED = "Expired"
    RENEWED = "Renewed"
