"""Project agreement creation and installment invoicing."""

from __future__ import annotations

import logging

from installment_gen.exceptions import (
    ConfigurationMissingError,
    InvalidEntityStateError,
    InvoiceGenerationError,
)
from installment_gen.generators.numbering import allocate_document_number, claim_document_number
from installment_gen.generators.schedule import GenerationResult, InstallmentScheduleGenerator
from installment_gen.models import InstallmentPlan, ProjectAgreement
from installment_gen.store.ledger import PROJECT_AGREEMENT, PROJECT_INVOICE, InvoiceLedger

logger = logging.getLogger(__name__)

# Malformed dates, amounts or frequencies surface as one of these.
GENERATION_ERRORS = (ValueError, TypeError, ArithmeticError)


class ProjectAgreementInvoicing:
    """Create project agreements and generate their installment invoices.

    The ledger plays the part of the external data API: agreements, invoices
    and numbering counters are read from it and written back to it.
    """

    def __init__(
        self,
        ledger: InvoiceLedger,
        generator: InstallmentScheduleGenerator | None = None,
    ) -> None:
        self.ledger = ledger
        self.generator = generator or InstallmentScheduleGenerator()

    def create_agreement(
        self,
        agreement: ProjectAgreement,
        plan: InstallmentPlan | None = None,
        generate_invoices: bool = True,
        skip_plan_check: bool = False,
    ) -> GenerationResult | None:
        """Record a new agreement and optionally invoice it.

        Parameters
        ----------
        agreement : ProjectAgreement
            New agreement. When ``agreement_number`` is empty a number is
            allocated from the ``project_agreement`` sequence.
        plan : InstallmentPlan | None
            The project's installment plan.
        generate_invoices : bool
            Generate the schedule right away when a plan is available.
        skip_plan_check : bool
            Proceed without a plan (installments will be entered manually).

        Returns
        -------
        GenerationResult | None
            The generated schedule, or None when no invoices were generated.

        Raises
        ------
        ConfigurationMissingError
            If the project has no plan and ``skip_plan_check`` is False, or
            agreement numbering is needed but not configured.
        InvalidEntityStateError
            If the agreement ID or its manual agreement number is already in use.
        """
        if plan is None and not skip_plan_check:
            raise ConfigurationMissingError(
                f"Project {agreement.project_id} does not have an installment plan configured"
            )

        self.ledger.check_new_agreement(agreement.agreement_id)
        self._assign_agreement_number(agreement)
        self.ledger.add_project_agreement(agreement)
        logger.info(
            "Created project agreement %s for client %s",
            agreement.agreement_number,
            agreement.client_id,
            extra={
                "agreement_id": agreement.agreement_id,
                "agreement_number": agreement.agreement_number,
            },
        )

        if plan is None or not generate_invoices:
            return None
        return self.generate_invoices(agreement.agreement_id, plan)

    def _assign_agreement_number(self, agreement: ProjectAgreement) -> None:
        state = self.ledger.get_numbering(PROJECT_AGREEMENT)

        if agreement.agreement_number:
            if agreement.agreement_number in self.ledger.project_agreement_numbers():
                raise InvalidEntityStateError(
                    f"Agreement number {agreement.agreement_number} is already in use"
                )
            # Manually numbered; keep the counter ahead of it when it matches.
            if state is not None:
                self.ledger.update_numbering(
                    PROJECT_AGREEMENT,
                    claim_document_number(state, agreement.agreement_number),
                    expected_version=state.version,
                )
            return

        if state is None:
            raise ConfigurationMissingError("Project agreement numbering settings are not configured")
        number, new_state = allocate_document_number(state, self.ledger.project_agreement_numbers())
        agreement.agreement_number = number
        self.ledger.update_numbering(PROJECT_AGREEMENT, new_state, expected_version=state.version)

    def generate_invoices(
        self,
        agreement_id: str,
        plan: InstallmentPlan | None,
        allow_duplicates: bool = False,
    ) -> GenerationResult:
        """Generate and persist the installment schedule of an agreement.

        Parameters
        ----------
        agreement_id : str
            Agreement to invoice.
        plan : InstallmentPlan | None
            Installment plan of the agreement's project.
        allow_duplicates : bool
            Generate even if the agreement already has invoices.

        Returns
        -------
        GenerationResult
            The persisted invoices and numbering state.

        Raises
        ------
        ConfigurationMissingError
            If the plan or the project invoice numbering is missing.
        InvalidEntityStateError
            If the agreement already has invoices and duplicates are not allowed.
        InvoiceGenerationError
            If the agreement or plan holds malformed values. Nothing is
            persisted in that case.
        StaleNumberingStateError
            If another writer advanced the invoice counter meanwhile.
        """
        agreement = self.ledger.get_project_agreement(agreement_id)

        if plan is None:
            raise ConfigurationMissingError(
                f"Project {agreement.project_id} does not have an installment plan configured"
            )

        numbering = self.ledger.get_numbering(PROJECT_INVOICE)
        if numbering is None:
            raise ConfigurationMissingError("Project invoice numbering settings are not configured")

        existing_count = len(self.ledger.get_agreement_invoices(agreement_id))
        if existing_count and not allow_duplicates:
            raise InvalidEntityStateError(
                f"Agreement {agreement.agreement_number} already has {existing_count} invoices; "
                "generating new ones might create duplicates"
            )

        try:
            result = self.generator.generate(
                agreement, plan, numbering, self.ledger.invoices.values()
            )
        except GENERATION_ERRORS as exc:
            logger.exception(
                "Failed to generate invoices for agreement %s",
                agreement.agreement_number,
                extra={"agreement_id": agreement_id},
            )
            raise InvoiceGenerationError("Failed to generate invoices") from exc

        self.ledger.commit_invoices(
            result.invoices,
            PROJECT_INVOICE,
            result.numbering_state,
            expected_version=numbering.version,
        )

        if result.invoices:
            logger.info(
                "Generated %d invoices for agreement %s (%s..%s)",
                len(result.invoices),
                agreement.agreement_number,
                result.invoices[0].invoice_number,
                result.invoices[-1].invoice_number,
                extra={
                    "agreement_id": agreement_id,
                    "numbering_key": PROJECT_INVOICE,
                    "first_invoice_number": result.invoices[0].invoice_number,
                    "last_invoice_number": result.invoices[-1].invoice_number,
                    "invoice_count": len(result.invoices),
                },
            )
        else:
            logger.warning(
                "No invoices generated for agreement %s",
                agreement.agreement_number,
                extra={"agreement_id": agreement_id, "invoice_count": 0},
            )

        return result
