"""Sample portfolio scenario: synthetic project sales with installment invoices."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Any

from installment_gen.config import ScenarioConfig
from installment_gen.exceptions import ConfigurationMissingError
from installment_gen.generators.agreement import ProjectAgreementGenerator
from installment_gen.models import InstallmentPlan, InvoiceStatus, NumberingState
from installment_gen.store.ledger import PROJECT_AGREEMENT, PROJECT_INVOICE, InvoiceLedger
from installment_gen.workflows.project_agreement import ProjectAgreementInvoicing

logger = logging.getLogger(__name__)


class SamplePortfolioScenario:
    """Generate a portfolio of project agreements and their invoice schedules.

    This scenario creates:
    - Synthetic project agreements spread over a date range
    - One installment plan per project (some projects have none)
    - Installment invoices for agreements whose project has a plan
    - Agreements without a plan are recorded with no invoices
    """

    def __init__(
        self,
        numbering: dict[str, NumberingState],
        num_agreements: int = 50,
        plan_coverage: float = 0.9,
        start_date: date | None = None,
        end_date: date | None = None,
        seed: int | None = None,
        locale: str = "en_US",
        *,
        config: ScenarioConfig | None = None,
    ) -> None:
        """Initialize the scenario.

        Parameters
        ----------
        numbering : dict[str, NumberingState]
            Numbering sequences; ``project_invoice`` and ``project_agreement``
            are required.
        num_agreements : int
            Number of agreements to generate.
        plan_coverage : float
            Share of projects with an installment plan (0.0 to 1.0).
        start_date, end_date : date | None
            Range of agreement issue dates.
        seed : int | None
            Random seed for reproducibility.
        locale : str
            Faker locale.
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides the
            count, coverage and date range.
        """
        missing = [key for key in (PROJECT_INVOICE, PROJECT_AGREEMENT) if key not in numbering]
        if missing:
            raise ConfigurationMissingError(f"Numbering settings missing for: {', '.join(missing)}")

        if config is not None:
            num_agreements = config.num_agreements
            plan_coverage = config.plan_coverage
            start_date = config.start_date or start_date
            end_date = config.end_date or end_date
        self.config = config

        self.num_agreements = num_agreements
        self.plan_coverage = plan_coverage
        self.start_date = start_date
        self.end_date = end_date
        self.seed = seed

        self.ledger = InvoiceLedger()
        for key, state in numbering.items():
            self.ledger.configure_numbering(key, state)

        self._agreement_gen = ProjectAgreementGenerator(seed=seed, locale=locale)
        self._invoicing = ProjectAgreementInvoicing(self.ledger)
        self.plans: dict[str, InstallmentPlan | None] = {}

    def _plan_for(self, project_id: str) -> InstallmentPlan | None:
        if project_id not in self.plans:
            has_plan = self._agreement_gen.rng.random() < self.plan_coverage
            self.plans[project_id] = self._agreement_gen.generate_plan() if has_plan else None
        return self.plans[project_id]

    def generate(self) -> InvoiceLedger:
        """Generate all data for the scenario.

        Returns
        -------
        InvoiceLedger
            Ledger containing the agreements, invoices and final counters.
        """
        logger.info(
            "Starting sample portfolio scenario: %d agreements, %.0f%% of projects with plans",
            self.num_agreements,
            self.plan_coverage * 100,
        )

        for agreement in self._agreement_gen.generate_batch(
            self.num_agreements, start_date=self.start_date, end_date=self.end_date
        ):
            plan = self._plan_for(agreement.project_id)
            self._invoicing.create_agreement(agreement, plan=plan, skip_plan_check=plan is None)

        logger.info(
            "Generated %d agreements with %d invoices",
            len(self.ledger.project_agreements),
            len(self.ledger.invoices),
            extra={"numbering_key": PROJECT_INVOICE, "invoice_count": len(self.ledger.invoices)},
        )
        return self.ledger

    def export(self, sinks: list[Any]) -> None:
        """Export generated data to sinks.

        Parameters
        ----------
        sinks : list[Any]
            List of sink instances (JsonFileSink, KafkaSink, etc.). Sinks
            with ``publish_events`` also get one ``invoice.created`` event
            per invoice.
        """
        invoices = list(self.ledger.invoices.values())
        for sink in sinks:
            sink.write_batch("project_agreements", list(self.ledger.project_agreements.values()))
            sink.write_batch("invoices", invoices)
            sink.write_batch(
                "numbering",
                [{"key": key, **asdict(state)} for key, state in self.ledger.numbering.items()],
            )
            if hasattr(sink, "publish_events"):
                sink.publish_events("invoices", invoices)

        logger.info("Exported sample portfolio to %d sinks", len(sinks))

    def get_portfolio_summary(self) -> dict[str, Any]:
        """Get summary statistics for the portfolio.

        Returns
        -------
        dict[str, Any]
            Portfolio summary statistics.
        """
        agreements = list(self.ledger.project_agreements.values())
        invoices = list(self.ledger.invoices.values())

        if not agreements:
            return {}

        total_sales = sum((a.selling_price for a in agreements), Decimal("0"))
        total_invoiced = sum((inv.amount for inv in invoices), Decimal("0"))

        status_counts: dict[str, int] = {}
        for inv in invoices:
            status_counts[inv.status.value] = status_counts.get(inv.status.value, 0) + 1

        invoiced_agreements = {inv.agreement_id for inv in invoices}

        return {
            "total_agreements": len(agreements),
            "agreements_without_invoices": len(agreements) - len(invoiced_agreements),
            "total_invoices": len(invoices),
            "total_selling_price": float(total_sales),
            "total_invoiced": float(total_invoiced),
            "unpaid_invoices": status_counts.get(InvoiceStatus.UNPAID.value, 0),
            "invoice_status_distribution": status_counts,
            "next_invoice_number": self.ledger.numbering[PROJECT_INVOICE].next_number,
        }
