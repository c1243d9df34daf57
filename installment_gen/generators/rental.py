"""Invoices issued when a rental agreement is renewed."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from installment_gen.exceptions import ConfigurationMissingError
from installment_gen.generators.dates import add_months_clamped, month_label
from installment_gen.generators.numbering import (
    advance,
    format_document_number,
    next_available_sequence,
)
from installment_gen.generators.schedule import to_date, to_decimal
from installment_gen.models import (
    InstallmentFrequency,
    Invoice,
    InvoiceStatus,
    InvoiceType,
    NumberingState,
    RecurringInvoiceTemplate,
    RentalAgreement,
)


@dataclass
class RenewalInvoices:
    """Output of a renewal: upfront invoices, rent template and counter."""

    invoices: list[Invoice]
    recurring_template: RecurringInvoiceTemplate | None
    numbering_state: NumberingState


class RentalRenewalInvoiceGenerator:
    """Generate the upfront invoices for a renewed rental agreement.

    A renewal bills the increase in security deposit (if any) and the first
    month of rent on the new start date, and sets up a monthly template for
    the following months.
    """

    RENT_DESCRIPTION = "Rent for {Month}"

    def generate(
        self,
        agreement: RentalAgreement,
        previous_deposit: Decimal | int | float | None,
        numbering_state: NumberingState | None,
        existing_invoices: Iterable[Invoice] = (),
    ) -> RenewalInvoices:
        """Generate renewal invoices.

        Parameters
        ----------
        agreement : RentalAgreement
            The new (renewed) agreement.
        previous_deposit : Decimal | int | float | None
            Security deposit held under the previous agreement.
        numbering_state : NumberingState | None
            Rental invoice counter.
        existing_invoices : Iterable[Invoice]
            Every invoice already issued.

        Returns
        -------
        RenewalInvoices
            Generated invoices, the recurring rent template and the counter.
        """
        if numbering_state is None:
            raise ConfigurationMissingError("Rental invoice numbering settings are not configured")

        start_date = to_date(agreement.start_date)
        monthly_rent = to_decimal(agreement.monthly_rent)
        new_deposit = to_decimal(agreement.security_deposit or 0)
        incremental_deposit = new_deposit - to_decimal(previous_deposit or 0)

        cursor = next_available_sequence(
            numbering_state, (inv.invoice_number for inv in existing_invoices)
        )
        invoices: list[Invoice] = []

        if incremental_deposit > 0:
            number = format_document_number(numbering_state.prefix, cursor, numbering_state.padding)
            invoices.append(
                Invoice(
                    invoice_id=f"inv-{number}",
                    invoice_number=number,
                    contact_id=agreement.contact_id,
                    amount=incremental_deposit,
                    issue_date=start_date,
                    due_date=start_date,
                    invoice_type=InvoiceType.RENTAL,
                    status=InvoiceStatus.UNPAID,
                    description="Incremental Security Deposit (Renewal)",
                    agreement_id=agreement.agreement_id,
                    property_id=agreement.property_id,
                    building_id=agreement.building_id,
                    security_deposit_charge=incremental_deposit,
                )
            )
            cursor += 1

        template = None
        if monthly_rent > 0:
            number = format_document_number(numbering_state.prefix, cursor, numbering_state.padding)
            invoices.append(
                Invoice(
                    invoice_id=f"inv-{number}",
                    invoice_number=number,
                    contact_id=agreement.contact_id,
                    amount=monthly_rent,
                    issue_date=start_date,
                    due_date=start_date,
                    invoice_type=InvoiceType.RENTAL,
                    status=InvoiceStatus.UNPAID,
                    description=f"Rent for {month_label(start_date)} (Renewal)",
                    agreement_id=agreement.agreement_id,
                    property_id=agreement.property_id,
                    building_id=agreement.building_id,
                    rental_month=start_date.strftime("%Y-%m"),
                )
            )
            cursor += 1

            template = RecurringInvoiceTemplate(
                template_id=f"rec-{agreement.agreement_id}",
                agreement_id=agreement.agreement_id,
                contact_id=agreement.contact_id,
                property_id=agreement.property_id,
                building_id=agreement.building_id,
                amount=monthly_rent,
                description_template=self.RENT_DESCRIPTION,
                day_of_month=agreement.rent_due_day or 1,
                next_due_date=add_months_clamped(start_date, 1),
                frequency=InstallmentFrequency.MONTHLY,
                invoice_type=InvoiceType.RENTAL,
            )

        return RenewalInvoices(
            invoices=invoices,
            recurring_template=template,
            numbering_state=advance(numbering_state, cursor),
        )
