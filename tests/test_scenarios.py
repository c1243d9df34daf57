"""Tests for the sample portfolio scenario and synthetic agreement generator."""

import json
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from installment_gen.config import ScenarioConfig
from installment_gen.exceptions import ConfigurationMissingError
from installment_gen.generators.agreement import ProjectAgreementGenerator
from installment_gen.models import NumberingState
from installment_gen.scenarios import SamplePortfolioScenario
from installment_gen.sinks import JsonFileSink, KafkaSink
from installment_gen.store import PROJECT_AGREEMENT, PROJECT_INVOICE


@pytest.fixture
def numbering() -> dict[str, NumberingState]:
    return {
        PROJECT_INVOICE: NumberingState(prefix="P-INV-", next_number=1, padding=5),
        PROJECT_AGREEMENT: NumberingState(prefix="P-AGR-", next_number=1, padding=4),
    }


class TestProjectAgreementGenerator:
    """Tests for ProjectAgreementGenerator."""

    def test_generate(self, seed: int) -> None:
        agreement = ProjectAgreementGenerator(seed=seed).generate(
            start_date=date(2024, 1, 1), end_date=date(2024, 12, 31)
        )

        assert agreement.agreement_number == ""
        assert agreement.project_id.startswith("proj-")
        assert 1 <= len(agreement.unit_ids) <= 2
        assert Decimal("500000") <= agreement.selling_price <= Decimal("25000000")
        assert date(2024, 1, 1) <= agreement.issue_date <= date(2024, 12, 31)

    def test_generate_plan(self, seed: int) -> None:
        plan = ProjectAgreementGenerator(seed=seed).generate_plan()

        assert plan.duration_years in ProjectAgreementGenerator.DURATIONS_YEARS
        assert plan.down_payment_percentage in ProjectAgreementGenerator.DOWN_PAYMENT_PERCENTAGES

    def test_seeded_batches_match(self, seed: int) -> None:
        first = list(ProjectAgreementGenerator(seed=seed).generate_batch(5))
        second = list(ProjectAgreementGenerator(seed=seed).generate_batch(5))

        assert [a.agreement_id for a in first] == [a.agreement_id for a in second]
        assert [a.selling_price for a in first] == [a.selling_price for a in second]


class TestSamplePortfolioScenario:
    """Tests for SamplePortfolioScenario."""

    def test_requires_numbering(self) -> None:
        with pytest.raises(ConfigurationMissingError, match="project_agreement"):
            SamplePortfolioScenario(
                numbering={PROJECT_INVOICE: NumberingState(prefix="P-INV-")}
            )

    def test_generate(self, seed: int, numbering: dict[str, NumberingState]) -> None:
        scenario = SamplePortfolioScenario(
            numbering=numbering, num_agreements=10, plan_coverage=1.0, seed=seed
        )
        ledger = scenario.generate()

        assert len(ledger.project_agreements) == 10
        assert all(ledger.get_agreement_invoices(a) for a in ledger.project_agreements)
        assert sorted(ledger.project_agreement_numbers()) == [f"P-AGR-{n:04d}" for n in range(1, 11)]

    def test_invoice_numbers_unique_and_contiguous(
        self, seed: int, numbering: dict[str, NumberingState]
    ) -> None:
        scenario = SamplePortfolioScenario(
            numbering=numbering, num_agreements=8, plan_coverage=1.0, seed=seed
        )
        ledger = scenario.generate()

        numbers = sorted(ledger.invoice_numbers())
        assert numbers == [f"P-INV-{n:05d}" for n in range(1, len(numbers) + 1)]
        assert ledger.get_numbering(PROJECT_INVOICE).next_number == len(numbers) + 1

    def test_totals_match_selling_price(
        self, seed: int, numbering: dict[str, NumberingState]
    ) -> None:
        scenario = SamplePortfolioScenario(
            numbering=numbering, num_agreements=8, plan_coverage=1.0, seed=seed
        )
        ledger = scenario.generate()

        for agreement_id, agreement in ledger.project_agreements.items():
            invoiced = sum(
                (inv.amount for inv in ledger.get_agreement_invoices(agreement_id)), Decimal("0")
            )
            assert abs(invoiced - agreement.selling_price) < Decimal("0.01")

    def test_no_plans(self, seed: int, numbering: dict[str, NumberingState]) -> None:
        scenario = SamplePortfolioScenario(
            numbering=numbering, num_agreements=5, plan_coverage=0.0, seed=seed
        )
        ledger = scenario.generate()

        assert len(ledger.project_agreements) == 5
        assert ledger.invoices == {}
        summary = scenario.get_portfolio_summary()
        assert summary["agreements_without_invoices"] == 5
        assert summary["next_invoice_number"] == 1

    def test_one_plan_per_project(self, seed: int, numbering: dict[str, NumberingState]) -> None:
        scenario = SamplePortfolioScenario(
            numbering=numbering, num_agreements=20, plan_coverage=1.0, seed=seed
        )
        scenario.generate()

        projects = {a.project_id for a in scenario.ledger.project_agreements.values()}
        assert set(scenario.plans) == projects

    def test_reproducible(self, seed: int, numbering: dict[str, NumberingState]) -> None:
        def snapshot() -> list[tuple]:
            scenario = SamplePortfolioScenario(
                numbering=numbering, num_agreements=6, plan_coverage=0.5, seed=seed
            )
            ledger = scenario.generate()
            return [
                (inv.invoice_number, inv.agreement_id, inv.amount, inv.due_date)
                for inv in ledger.invoices.values()
            ]

        assert snapshot() == snapshot()

    def test_config_overrides(self, seed: int, numbering: dict[str, NumberingState]) -> None:
        config = ScenarioConfig(
            num_agreements=3,
            plan_coverage=1.0,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        )
        scenario = SamplePortfolioScenario(numbering=numbering, seed=seed, config=config)
        ledger = scenario.generate()

        assert len(ledger.project_agreements) == 3
        assert all(
            date(2024, 1, 1) <= a.issue_date <= date(2024, 1, 31)
            for a in ledger.project_agreements.values()
        )

    def test_summary(self, seed: int, numbering: dict[str, NumberingState]) -> None:
        scenario = SamplePortfolioScenario(
            numbering=numbering, num_agreements=5, plan_coverage=1.0, seed=seed
        )
        scenario.generate()

        summary = scenario.get_portfolio_summary()

        assert summary["total_agreements"] == 5
        assert summary["agreements_without_invoices"] == 0
        assert summary["unpaid_invoices"] == summary["total_invoices"]
        assert summary["invoice_status_distribution"] == {"Unpaid": summary["total_invoices"]}
        assert summary["total_invoiced"] == pytest.approx(summary["total_selling_price"], abs=0.05)

    def test_summary_empty(self, numbering: dict[str, NumberingState]) -> None:
        scenario = SamplePortfolioScenario(numbering=numbering, num_agreements=0)
        scenario.generate()

        assert scenario.get_portfolio_summary() == {}

    def test_export_json(self, seed: int, numbering: dict[str, NumberingState]) -> None:
        scenario = SamplePortfolioScenario(
            numbering=numbering, num_agreements=3, plan_coverage=1.0, seed=seed
        )
        scenario.generate()

        with tempfile.TemporaryDirectory() as tmpdir:
            scenario.export([JsonFileSink(tmpdir)])

            out = Path(tmpdir)
            agreements = json.loads((out / "project_agreements.json").read_text(encoding="utf-8"))
            invoices = json.loads((out / "invoices.json").read_text(encoding="utf-8"))
            counters = json.loads((out / "numbering.json").read_text(encoding="utf-8"))

        assert len(agreements) == 3
        assert len(invoices) == len(scenario.ledger.invoices)
        by_key = {row["key"]: row for row in counters}
        assert by_key[PROJECT_INVOICE]["next_number"] == len(invoices) + 1
        assert by_key[PROJECT_AGREEMENT]["next_number"] == 4

    def test_export_kafka_publishes_events(
        self, seed: int, numbering: dict[str, NumberingState]
    ) -> None:
        scenario = SamplePortfolioScenario(
            numbering=numbering, num_agreements=2, plan_coverage=1.0, seed=seed
        )
        scenario.generate()

        with patch("installment_gen.sinks.kafka.Producer") as producer_class:
            producer_class.return_value.flush.return_value = 0
            scenario.export([KafkaSink("kafka:9092")])

        topics = [c.kwargs["topic"] for c in producer_class.return_value.produce.call_args_list]
        invoice_count = len(scenario.ledger.invoices)
        assert topics.count("dev.billing.invoices") == invoice_count
        assert topics.count("dev.billing.events") == invoice_count
        assert topics.count("dev.billing.project_agreements") == 2
