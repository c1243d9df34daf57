"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from installment_gen.models import (
    InstallmentFrequency,
    InstallmentPlan,
    Invoice,
    InvoiceStatus,
    InvoiceType,
    NumberingState,
    ProjectAgreement,
)
from installment_gen.store import PROJECT_AGREEMENT, PROJECT_INVOICE, InvoiceLedger


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def numbering_state() -> NumberingState:
    """Project invoice numbering starting at 1."""
    return NumberingState(prefix="P-INV-", next_number=1, padding=5)


@pytest.fixture
def sample_agreement() -> ProjectAgreement:
    """Agreement from the quarterly schedule example."""
    return ProjectAgreement(
        agreement_id="agr-001",
        agreement_number="P-AGR-0001",
        client_id="client-001",
        project_id="proj-001",
        unit_ids=["unit-A-101", "unit-A-102"],
        selling_price=Decimal("1000000"),
        issue_date=date(2024, 3, 15),
        selling_price_category_id="cat-unit-sales",
    )


@pytest.fixture
def quarterly_plan() -> InstallmentPlan:
    """Two years, 20% down, quarterly installments."""
    return InstallmentPlan(
        duration_years=Decimal("2"),
        down_payment_percentage=Decimal("20"),
        frequency=InstallmentFrequency.QUARTERLY,
    )


@pytest.fixture
def make_invoice() -> Callable[..., Invoice]:
    """Factory for already-issued invoices."""

    def _make(
        invoice_number: str,
        agreement_id: str | None = None,
        status: InvoiceStatus = InvoiceStatus.UNPAID,
        amount: Decimal = Decimal("100.00"),
    ) -> Invoice:
        return Invoice(
            invoice_id=f"existing-{invoice_number}",
            invoice_number=invoice_number,
            contact_id="client-999",
            amount=amount,
            issue_date=date(2023, 1, 1),
            due_date=date(2023, 1, 1),
            invoice_type=InvoiceType.INSTALLMENT,
            status=status,
            agreement_id=agreement_id,
        )

    return _make


@pytest.fixture
def ledger() -> InvoiceLedger:
    """Ledger with project numbering configured."""
    ledger = InvoiceLedger()
    ledger.configure_numbering(PROJECT_INVOICE, NumberingState(prefix="P-INV-", next_number=1, padding=5))
    ledger.configure_numbering(PROJECT_AGREEMENT, NumberingState(prefix="P-AGR-", next_number=1, padding=4))
    return ledger
