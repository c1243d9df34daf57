"""Rental agreement renewal."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from installment_gen.exceptions import (
    ConfigurationMissingError,
    InvalidEntityStateError,
    InvoiceGenerationError,
)
from installment_gen.generators.numbering import allocate_document_number
from installment_gen.generators.rental import RenewalInvoices, RentalRenewalInvoiceGenerator
from installment_gen.generators.schedule import to_date, to_decimal
from installment_gen.models import RentalAgreement, RentalAgreementStatus
from installment_gen.store.ledger import RENTAL_AGREEMENT, RENTAL_INVOICE, InvoiceLedger
from installment_gen.workflows.project_agreement import GENERATION_ERRORS

logger = logging.getLogger(__name__)


class RentalAgreementRenewal:
    """Replace an active rental agreement with a renewed one."""

    def __init__(
        self,
        ledger: InvoiceLedger,
        generator: RentalRenewalInvoiceGenerator | None = None,
    ) -> None:
        self.ledger = ledger
        self.generator = generator or RentalRenewalInvoiceGenerator()

    def renew(
        self,
        agreement_id: str,
        start_date: date | str,
        end_date: date | str,
        monthly_rent: Decimal | int | float | str,
        security_deposit: Decimal | int | float | str | None = None,
        rent_due_day: int = 1,
        description: str | None = None,
        generate_invoices: bool = True,
    ) -> tuple[RentalAgreement, RenewalInvoices | None]:
        """Renew a rental agreement.

        The old agreement must have no open invoices. Its recurring
        templates are deactivated and it is marked ``RENEWED``; the new
        agreement gets the next rental agreement number.

        Returns
        -------
        tuple[RentalAgreement, RenewalInvoices | None]
            The new agreement and, when requested, its renewal invoices.

        Raises
        ------
        InvalidEntityStateError
            If the old agreement has open invoices, the terms are invalid or
            the new agreement ID is taken.
        DuplicateInvoiceNumberError
            If a renewal invoice collides with a stored one.
        StaleNumberingStateError
            If another writer advanced a counter meanwhile.

        A rejected renewal leaves the ledger unchanged.
        """
        previous = self.ledger.get_rental_agreement(agreement_id)

        open_invoices = self.ledger.get_open_invoices(agreement_id)
        if open_invoices:
            raise InvalidEntityStateError(
                f"Cannot renew. {len(open_invoices)} open invoice(s). Please pay all invoices first."
            )

        try:
            start = to_date(start_date)
            end = to_date(end_date)
            rent = to_decimal(monthly_rent)
            deposit = (
                to_decimal(security_deposit)
                if security_deposit is not None
                else previous.security_deposit
            )
        except GENERATION_ERRORS as exc:
            logger.exception(
                "Invalid renewal terms for agreement %s",
                previous.agreement_number,
                extra={"agreement_id": agreement_id},
            )
            raise InvoiceGenerationError("Failed to generate invoices") from exc

        if end <= start:
            raise InvalidEntityStateError("Renewal end date must be after its start date")
        if rent < 0:
            raise InvalidEntityStateError(f"Monthly rent must be >= 0, got {rent}")

        agreement_numbering = self.ledger.get_numbering(RENTAL_AGREEMENT)
        if agreement_numbering is None:
            raise ConfigurationMissingError("Rental agreement numbering settings are not configured")
        invoice_numbering = self.ledger.get_numbering(RENTAL_INVOICE)
        if generate_invoices and invoice_numbering is None:
            raise ConfigurationMissingError("Rental invoice numbering settings are not configured")

        number, new_agreement_numbering = allocate_document_number(
            agreement_numbering, self.ledger.rental_agreement_numbers()
        )
        renewed = RentalAgreement(
            agreement_id=f"ra-{number}",
            agreement_number=number,
            contact_id=previous.contact_id,
            property_id=previous.property_id,
            building_id=previous.building_id,
            start_date=start,
            end_date=end,
            monthly_rent=rent,
            rent_due_day=rent_due_day or 1,
            status=RentalAgreementStatus.ACTIVE,
            security_deposit=deposit,
            previous_agreement_id=previous.agreement_id,
            description=description or previous.description,
            unit_ids=list(previous.unit_ids),
        )

        renewal = None
        if generate_invoices:
            try:
                renewal = self.generator.generate(
                    renewed,
                    previous.security_deposit,
                    invoice_numbering,
                    self.ledger.invoices.values(),
                )
            except GENERATION_ERRORS as exc:
                logger.exception(
                    "Failed to generate renewal invoices for %s",
                    previous.agreement_number,
                    extra={"agreement_id": agreement_id, "numbering_key": RENTAL_INVOICE},
                )
                raise InvoiceGenerationError("Failed to generate invoices") from exc

        # Nothing is written until every check has passed.
        self.ledger.check_numbering_version(RENTAL_AGREEMENT, agreement_numbering.version)
        self.ledger.check_new_agreement(renewed.agreement_id)
        if renewal is not None:
            self.ledger.check_numbering_version(RENTAL_INVOICE, invoice_numbering.version)
            self.ledger.check_invoices(
                renewal.invoices, pending_agreement_ids=[renewed.agreement_id]
            )

        self.ledger.update_numbering(
            RENTAL_AGREEMENT, new_agreement_numbering, expected_version=agreement_numbering.version
        )
        for template in self.ledger.get_agreement_templates(previous.agreement_id):
            template.active = False
        previous.status = RentalAgreementStatus.RENEWED
        self.ledger.add_rental_agreement(renewed)

        if renewal is not None:
            self.ledger.commit_invoices(
                renewal.invoices,
                RENTAL_INVOICE,
                renewal.numbering_state,
                expected_version=invoice_numbering.version,
            )
            if renewal.recurring_template is not None:
                self.ledger.add_recurring_template(renewal.recurring_template)

        invoice_count = len(renewal.invoices) if renewal else 0
        logger.info(
            "Renewed rental agreement %s as %s (%d invoices)",
            previous.agreement_number,
            renewed.agreement_number,
            invoice_count,
            extra={
                "agreement_id": renewed.agreement_id,
                "agreement_number": renewed.agreement_number,
                "invoice_count": invoice_count,
            },
        )
        return renewed, renewal
