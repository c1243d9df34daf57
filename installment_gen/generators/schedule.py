"""Installment schedule generator for project sale agreements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from installment_gen.exceptions import ConfigurationMissingError, InvalidEntityStateError
from installment_gen.generators.dates import add_months_clamped
from installment_gen.generators.numbering import (
    advance,
    format_document_number,
    next_available_sequence,
)
from installment_gen.models import (
    InstallmentFrequency,
    InstallmentPlan,
    Invoice,
    InvoiceStatus,
    InvoiceType,
    NumberingState,
    ProjectAgreement,
)


@dataclass
class GenerationResult:
    """Invoices produced for one agreement and the advanced numbering state."""

    invoices: list[Invoice]
    numbering_state: NumberingState
    down_payment: Decimal = Decimal("0")
    installment_amount: Decimal = Decimal("0")
    total_installments: int = 0
    consumed_numbers: list[str] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        """Sum of all generated invoice amounts."""
        return sum((inv.amount for inv in self.invoices), Decimal("0"))


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a monetary or rate input to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def to_date(value: date | datetime | str) -> date:
    """Accept a date, a datetime or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def format_percentage(value: Decimal) -> str:
    """Render ``Decimal("20.0")`` as ``"20"`` and ``Decimal("12.50")`` as ``"12.5"``."""
    return format(value.normalize(), "f")


class InstallmentScheduleGenerator:
    """Split a selling price into a down payment and periodic installments.

    The generator is a pure calculation: it reads the agreement, the plan,
    the numbering counter and the invoices already issued, and returns new
    invoice records together with the counter to write back. Persisting
    either is the caller's job.
    """

    PERIOD_MONTHS = {
        InstallmentFrequency.MONTHLY: 1,
        InstallmentFrequency.QUARTERLY: 3,
        InstallmentFrequency.YEARLY: 12,
    }

    def generate(
        self,
        agreement: ProjectAgreement,
        plan: InstallmentPlan | None,
        numbering_state: NumberingState | None,
        existing_invoices: Iterable[Invoice] = (),
    ) -> GenerationResult:
        """Generate the invoice schedule for an agreement.

        Parameters
        ----------
        agreement : ProjectAgreement
            Agreement being invoiced.
        plan : InstallmentPlan | None
            Installment terms. Callers must decide what to do when a project
            has no plan before calling.
        numbering_state : NumberingState | None
            Invoice number counter for the invoice prefix.
        existing_invoices : Iterable[Invoice]
            Every invoice already issued, scanned so that the counter heals
            when it lags behind.

        Returns
        -------
        GenerationResult
            Down-payment invoice (if any) followed by installments 1..N, and
            the advanced numbering state.

        Raises
        ------
        ConfigurationMissingError
            If no numbering state is supplied.
        InvalidEntityStateError
            If the plan is missing or the financial terms are out of range.
        """
        if numbering_state is None:
            raise ConfigurationMissingError("Invoice numbering settings are not configured")
        if plan is None:
            raise InvalidEntityStateError(
                f"Agreement {agreement.agreement_id} has no installment plan to generate from"
            )

        selling_price = to_decimal(agreement.selling_price)
        percentage = to_decimal(plan.down_payment_percentage)
        duration_years = to_decimal(plan.duration_years)
        period_months = self.PERIOD_MONTHS[InstallmentFrequency(plan.frequency)]
        issue_date = to_date(agreement.issue_date)

        if selling_price < 0:
            raise InvalidEntityStateError(f"Selling price must be >= 0, got {selling_price}")
        if not Decimal("0") <= percentage <= Decimal("100"):
            raise InvalidEntityStateError(
                f"Down payment percentage must be within 0-100, got {percentage}"
            )
        if duration_years <= 0:
            raise InvalidEntityStateError(f"Duration must be positive, got {duration_years} years")

        # Amounts keep full precision; display layers round.
        down_payment = selling_price * percentage / 100
        remaining = selling_price - down_payment

        total_installments = int(
            (duration_years * 12 / period_months).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        )
        if total_installments > 0:
            installment_amount = remaining / total_installments
        else:
            installment_amount = Decimal("0")

        cursor = next_available_sequence(
            numbering_state, (inv.invoice_number for inv in existing_invoices)
        )

        invoices: list[Invoice] = []
        suffix = f" - {agreement.description}" if agreement.description else ""

        if down_payment > 0:
            invoices.append(
                self._build_invoice(
                    agreement,
                    invoice_number=format_document_number(
                        numbering_state.prefix, cursor, numbering_state.padding
                    ),
                    amount=down_payment,
                    on=issue_date,
                    description=f"Down Payment ({format_percentage(percentage)}%){suffix}",
                )
            )
            cursor += 1

        if installment_amount > 0:
            for i in range(1, total_installments + 1):
                invoices.append(
                    self._build_invoice(
                        agreement,
                        invoice_number=format_document_number(
                            numbering_state.prefix, cursor, numbering_state.padding
                        ),
                        amount=installment_amount,
                        on=add_months_clamped(issue_date, i * period_months),
                        description=f"Installment {i}/{total_installments}{suffix}",
                    )
                )
                cursor += 1

        return GenerationResult(
            invoices=invoices,
            numbering_state=advance(numbering_state, cursor),
            down_payment=down_payment,
            installment_amount=installment_amount,
            total_installments=total_installments,
            consumed_numbers=[inv.invoice_number for inv in invoices],
        )

    def _build_invoice(
        self,
        agreement: ProjectAgreement,
        invoice_number: str,
        amount: Decimal,
        on: date,
        description: str,
    ) -> Invoice:
        return Invoice(
            invoice_id=f"inv-{invoice_number}",
            invoice_number=invoice_number,
            contact_id=agreement.client_id,
            amount=amount,
            issue_date=on,
            due_date=on,
            invoice_type=InvoiceType.INSTALLMENT,
            status=InvoiceStatus.UNPAID,
            paid_amount=Decimal("0"),
            description=description,
            agreement_id=agreement.agreement_id,
            project_id=agreement.project_id,
            unit_id=agreement.unit_ids[0] if agreement.unit_ids else None,
            category_id=agreement.selling_price_category_id,
        )


def generate_installment_schedule(
    agreement: ProjectAgreement,
    plan: InstallmentPlan | None,
    numbering_state: NumberingState | None,
    existing_invoices: Iterable[Invoice] = (),
) -> GenerationResult:
    """Module-level shortcut for ``InstallmentScheduleGenerator().generate``."""
    return InstallmentScheduleGenerator().generate(
        agreement, plan, numbering_state, existing_invoices
    )
