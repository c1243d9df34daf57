"""In-memory ledger of agreements, invoices and numbering counters."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from installment_gen.exceptions import (
    DuplicateInvoiceNumberError,
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
    StaleNumberingStateError,
)
from installment_gen.models import (
    Invoice,
    InvoiceStatus,
    NumberingState,
    ProjectAgreement,
    RecurringInvoiceTemplate,
    RentalAgreement,
)

# Well-known numbering sequences
PROJECT_INVOICE = "project_invoice"
RENTAL_INVOICE = "rental_invoice"
PROJECT_AGREEMENT = "project_agreement"
RENTAL_AGREEMENT = "rental_agreement"

OPEN_INVOICE_STATUSES = frozenset(
    {InvoiceStatus.UNPAID, InvoiceStatus.PARTIALLY_PAID, InvoiceStatus.OVERDUE}
)


@dataclass
class InvoiceLedger:
    """In-memory store for agreements and invoices with relationship tracking.

    Also acts as the numbering registry: each sequence is stored with a
    version and written back with compare-and-swap, so two writers that
    started from the same snapshot cannot both advance the counter.
    """

    # Primary entities
    project_agreements: dict[str, ProjectAgreement] = field(default_factory=dict)
    rental_agreements: dict[str, RentalAgreement] = field(default_factory=dict)
    invoices: dict[str, Invoice] = field(default_factory=dict)
    recurring_templates: dict[str, RecurringInvoiceTemplate] = field(default_factory=dict)

    # Numbering registry
    numbering: dict[str, NumberingState] = field(default_factory=dict)

    # Relationship indexes
    _agreement_invoices: dict[str, list[str]] = field(default_factory=dict)
    _invoice_numbers: set[str] = field(default_factory=set)

    def add_project_agreement(self, agreement: ProjectAgreement) -> None:
        """Add a project agreement to the ledger.

        Raises
        ------
        InvalidEntityStateError
            If an agreement with the same ID is already stored.
        """
        self.check_new_agreement(agreement.agreement_id)
        if agreement.created_at is None:
            agreement.created_at = datetime.now()
        self.project_agreements[agreement.agreement_id] = agreement
        self._agreement_invoices[agreement.agreement_id] = []

    def add_rental_agreement(self, agreement: RentalAgreement) -> None:
        """Add a rental agreement to the ledger.

        Raises
        ------
        InvalidEntityStateError
            If an agreement with the same ID is already stored.
        """
        self.check_new_agreement(agreement.agreement_id)
        if agreement.created_at is None:
            agreement.created_at = datetime.now()
        self.rental_agreements[agreement.agreement_id] = agreement
        self._agreement_invoices[agreement.agreement_id] = []

    def check_new_agreement(self, agreement_id: str) -> None:
        """Raise InvalidEntityStateError if ``agreement_id`` is taken."""
        # Project and rental agreements share the invoice index.
        if agreement_id in self._agreement_invoices:
            raise InvalidEntityStateError(f"Agreement {agreement_id} already exists")

    def add_invoice(self, invoice: Invoice) -> None:
        """Add an invoice to the ledger."""
        self._check_invoice(invoice)
        self._store_invoice(invoice)

    def add_invoices(self, invoices: Iterable[Invoice]) -> None:
        """Add several invoices; nothing is written unless all are valid."""
        invoices = list(invoices)
        self.check_invoices(invoices)
        for invoice in invoices:
            self._store_invoice(invoice)

    def add_recurring_template(self, template: RecurringInvoiceTemplate) -> None:
        """Add or replace a recurring invoice template."""
        if template.agreement_id not in self._agreement_invoices:
            raise ReferentialIntegrityError(f"Agreement {template.agreement_id} not found")
        self.recurring_templates[template.template_id] = template

    def _check_invoice(self, invoice: Invoice, pending_agreement_ids: Iterable[str] = ()) -> None:
        if (
            invoice.agreement_id
            and invoice.agreement_id not in self._agreement_invoices
            and invoice.agreement_id not in pending_agreement_ids
        ):
            raise ReferentialIntegrityError(f"Agreement {invoice.agreement_id} not found")
        if invoice.invoice_number in self._invoice_numbers:
            raise DuplicateInvoiceNumberError(
                f"Invoice number {invoice.invoice_number} already exists"
            )
        if invoice.invoice_id in self.invoices:
            raise DuplicateInvoiceNumberError(f"Invoice {invoice.invoice_id} already exists")

    def check_invoices(
        self, invoices: list[Invoice], pending_agreement_ids: Iterable[str] = ()
    ) -> None:
        """Validate a batch of invoices without storing them.

        Parameters
        ----------
        invoices : list[Invoice]
            Invoices about to be stored.
        pending_agreement_ids : Iterable[str]
            Agreements that will be added before the invoices are stored.

        Raises
        ------
        ReferentialIntegrityError
            If an invoice points at an unknown agreement.
        DuplicateInvoiceNumberError
            If an invoice number or ID is taken or repeated in the batch.
        """
        pending = set(pending_agreement_ids)
        seen: set[str] = set()
        for invoice in invoices:
            self._check_invoice(invoice, pending)
            if invoice.invoice_number in seen:
                raise DuplicateInvoiceNumberError(
                    f"Invoice number {invoice.invoice_number} appears twice in the batch"
                )
            seen.add(invoice.invoice_number)

    def _store_invoice(self, invoice: Invoice) -> None:
        if invoice.created_at is None:
            invoice.created_at = datetime.now()
        self.invoices[invoice.invoice_id] = invoice
        self._invoice_numbers.add(invoice.invoice_number)
        if invoice.agreement_id:
            self._agreement_invoices[invoice.agreement_id].append(invoice.invoice_id)

    # Numbering registry
    def configure_numbering(self, key: str, state: NumberingState) -> None:
        """Install (or replace) a numbering sequence."""
        self.numbering[key] = state

    def get_numbering(self, key: str) -> NumberingState | None:
        """Get the current state of a numbering sequence, or None if unset."""
        return self.numbering.get(key)

    def update_numbering(self, key: str, new_state: NumberingState, expected_version: int) -> None:
        """Write back a numbering state computed from ``expected_version``.

        Raises
        ------
        EntityNotFoundError
            If the sequence is not configured.
        StaleNumberingStateError
            If the stored version changed since the caller read it.
        """
        self.check_numbering_version(key, expected_version)
        if new_state != self.numbering[key]:
            self.numbering[key] = new_state

    def check_numbering_version(self, key: str, expected_version: int) -> None:
        """Raise if sequence ``key`` is missing or no longer at ``expected_version``."""
        current = self.numbering.get(key)
        if current is None:
            raise EntityNotFoundError(f"Numbering sequence {key} not configured")
        if current.version != expected_version:
            raise StaleNumberingStateError(
                f"Numbering sequence {key} is at version {current.version}, "
                f"expected {expected_version}"
            )

    def commit_invoices(
        self,
        invoices: list[Invoice],
        numbering_key: str,
        numbering_state: NumberingState,
        expected_version: int,
    ) -> None:
        """Persist generated invoices and their numbering state together.

        Every check runs before anything is written, so a rejected commit
        leaves the ledger unchanged.
        """
        self.check_numbering_version(numbering_key, expected_version)
        self.check_invoices(invoices)
        for invoice in invoices:
            self._store_invoice(invoice)
        self.numbering[numbering_key] = numbering_state

    # Query methods
    def get_project_agreement(self, agreement_id: str) -> ProjectAgreement:
        """Get a project agreement by ID."""
        try:
            return self.project_agreements[agreement_id]
        except KeyError:
            raise EntityNotFoundError(f"Project agreement {agreement_id} not found") from None

    def get_rental_agreement(self, agreement_id: str) -> RentalAgreement:
        """Get a rental agreement by ID."""
        try:
            return self.rental_agreements[agreement_id]
        except KeyError:
            raise EntityNotFoundError(f"Rental agreement {agreement_id} not found") from None

    def get_agreement_invoices(self, agreement_id: str) -> list[Invoice]:
        """Get all invoices for an agreement, in insertion order."""
        invoice_ids = self._agreement_invoices.get(agreement_id, [])
        return [self.invoices[iid] for iid in invoice_ids]

    def get_open_invoices(self, agreement_id: str) -> list[Invoice]:
        """Get invoices of an agreement that still have a balance to collect."""
        return [
            inv
            for inv in self.get_agreement_invoices(agreement_id)
            if inv.status in OPEN_INVOICE_STATUSES
        ]

    def get_agreement_templates(self, agreement_id: str) -> list[RecurringInvoiceTemplate]:
        """Get recurring templates attached to an agreement."""
        return [t for t in self.recurring_templates.values() if t.agreement_id == agreement_id]

    def invoice_numbers(self, prefix: str | None = None) -> list[str]:
        """Get issued invoice numbers, optionally only those with ``prefix``."""
        if prefix is None:
            return list(self._invoice_numbers)
        return [n for n in self._invoice_numbers if n.startswith(prefix)]

    def project_agreement_numbers(self) -> list[str]:
        """Get issued project agreement numbers."""
        return [a.agreement_number for a in self.project_agreements.values()]

    def rental_agreement_numbers(self) -> list[str]:
        """Get issued rental agreement numbers."""
        return [a.agreement_number for a in self.rental_agreements.values()]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "project_agreements": len(self.project_agreements),
            "rental_agreements": len(self.rental_agreements),
            "invoices": len(self.invoices),
            "recurring_templates": len(self.recurring_templates),
        }
