"""Tests for domain models."""

from dataclasses import FrozenInstanceError
from datetime import date, datetime
from decimal import Decimal

import pytest

from installment_gen.exceptions import ConfigurationError
from installment_gen.models import (
    Event,
    InstallmentFrequency,
    InstallmentPlan,
    InvoiceStatus,
    NumberingState,
    RecurringInvoiceTemplate,
    RentalAgreement,
    RentalAgreementStatus,
)


class TestEnums:
    """Enum values match the stored representations."""

    def test_frequency_values(self) -> None:
        assert [f.value for f in InstallmentFrequency] == ["Monthly", "Quarterly", "Yearly"]

    def test_lookup_by_value(self) -> None:
        assert InstallmentFrequency("Quarterly") is InstallmentFrequency.QUARTERLY
        assert InvoiceStatus("Partially Paid") is InvoiceStatus.PARTIALLY_PAID

    def test_str_enum_compares_to_value(self) -> None:
        assert InvoiceStatus.UNPAID == "Unpaid"


class TestNumberingState:
    """Tests for NumberingState."""

    def test_defaults(self) -> None:
        state = NumberingState(prefix="P-INV-")

        assert state.next_number == 1
        assert state.padding == 5
        assert state.version == 0

    def test_frozen(self) -> None:
        state = NumberingState(prefix="P-INV-")

        with pytest.raises(FrozenInstanceError):
            state.next_number = 2

    def test_empty_prefix_allowed(self) -> None:
        assert NumberingState(prefix="").prefix == ""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"prefix": "P-INV-", "next_number": 0},
            {"prefix": "P-INV-", "padding": -1},
            {"prefix": "P-INV-", "version": -1},
            {"prefix": None},
        ],
    )
    def test_invalid(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError):
            NumberingState(**kwargs)


class TestInstallmentPlan:
    """Tests for InstallmentPlan."""

    def test_default_frequency(self) -> None:
        plan = InstallmentPlan(duration_years=Decimal("1"), down_payment_percentage=Decimal("0"))

        assert plan.frequency == InstallmentFrequency.MONTHLY

    def test_frozen(self) -> None:
        plan = InstallmentPlan(duration_years=Decimal("1"), down_payment_percentage=Decimal("0"))

        with pytest.raises(FrozenInstanceError):
            plan.duration_years = Decimal("2")


class TestRentalModels:
    """Tests for rental agreement and recurring template defaults."""

    def test_rental_agreement_defaults(self) -> None:
        agreement = RentalAgreement(
            agreement_id="ra-1",
            agreement_number="R-AGR-0001",
            contact_id="tenant-1",
            property_id="prop-1",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
            monthly_rent=Decimal("1500"),
        )

        assert agreement.status == RentalAgreementStatus.ACTIVE
        assert agreement.rent_due_day == 1
        assert agreement.unit_ids == []
        assert agreement.previous_agreement_id is None

    def test_template_defaults(self) -> None:
        template = RecurringInvoiceTemplate(
            template_id="rec-ra-1",
            agreement_id="ra-1",
            contact_id="tenant-1",
            property_id="prop-1",
            amount=Decimal("1500"),
            description_template="Rent for {Month}",
            day_of_month=1,
            next_due_date=date(2024, 2, 1),
        )

        assert template.active is True
        assert template.auto_generate is True
        assert template.frequency == InstallmentFrequency.MONTHLY


class TestEvent:
    """Tests for Event."""

    def test_metadata_default(self) -> None:
        event = Event(
            event_id="invoice.created:inv-1",
            event_type="invoice.created",
            event_time=datetime(2024, 1, 1),
            source="installment-gen",
            subject="inv-1",
            data={},
        )

        assert event.metadata == {}
