"""Scenarios for generating sample billing data sets."""

from installment_gen.scenarios.sample_portfolio import SamplePortfolioScenario

__all__ = ["SamplePortfolioScenario"]
