#!/usr/bin/env python3
"""Generate a sample portfolio of project agreements and installment invoices.

Numbering settings come from ``NUMBERING_SETTINGS`` (JSON) or the
``--invoice-prefix``/``--agreement-prefix`` options.

Examples
--------
    python scripts/generate_sample_data.py --agreements 20 --output local/
    python scripts/generate_sample_data.py --agreements 5 --console
    python scripts/generate_sample_data.py --kafka localhost:9092
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from installment_gen.config import InstallmentGenConfig, NumberingConfig, ScenarioConfig
from installment_gen.exceptions import InstallmentGenError
from installment_gen.logging import get_logger, setup_logging
from installment_gen.scenarios import SamplePortfolioScenario
from installment_gen.sinks import ConsoleSink, JsonFileSink, KafkaSink
from installment_gen.store import PROJECT_AGREEMENT, PROJECT_INVOICE

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate project agreements with installment invoice schedules",
    )
    parser.add_argument(
        "--agreements",
        type=int,
        default=50,
        help="Number of agreements to generate (default: 50)",
    )
    parser.add_argument(
        "--plan-coverage",
        type=float,
        default=0.9,
        help="Share of projects with an installment plan (default: 0.9)",
    )
    parser.add_argument(
        "--start-date",
        type=date.fromisoformat,
        default=None,
        help="Earliest agreement issue date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--end-date",
        type=date.fromisoformat,
        default=None,
        help="Latest agreement issue date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--invoice-prefix",
        default=None,
        help="Project invoice prefix when NUMBERING_SETTINGS is not set (e.g. P-INV-)",
    )
    parser.add_argument(
        "--agreement-prefix",
        default=None,
        help="Project agreement prefix when NUMBERING_SETTINGS is not set (e.g. P-AGR-)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory for JSON output (default: OUTPUT_DIR or ./output)",
    )
    parser.add_argument(
        "--console",
        action="store_true",
        help="Print records to stdout instead of writing files",
    )
    parser.add_argument(
        "--kafka",
        default=None,
        metavar="BOOTSTRAP_SERVERS",
        help="Also publish records to Kafka",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point."""
    args = parse_args(argv)
    config = InstallmentGenConfig.from_env()

    setup_logging(args.log_level or config.log_level, "json" if args.json_logs else "standard")

    if args.invoice_prefix:
        config.numbering[PROJECT_INVOICE] = NumberingConfig(prefix=args.invoice_prefix)
    if args.agreement_prefix:
        config.numbering[PROJECT_AGREEMENT] = NumberingConfig(prefix=args.agreement_prefix)

    scenario_config = ScenarioConfig(
        num_agreements=args.agreements,
        plan_coverage=args.plan_coverage,
        start_date=args.start_date,
        end_date=args.end_date,
    )

    try:
        scenario = SamplePortfolioScenario(
            numbering=config.numbering_states(),
            seed=args.seed if args.seed is not None else config.seed,
            locale=config.locale,
            config=scenario_config,
        )
        scenario.generate()
    except InstallmentGenError as exc:
        logger.error("Generation aborted: %s", exc)
        return 1

    sinks = []
    if args.console:
        sinks.append(ConsoleSink(pretty=config.output.pretty_json, max_records=10))
    else:
        sinks.append(JsonFileSink(args.output or config.output.json_output_dir, pretty=config.output.pretty_json))
    if args.kafka:
        config.kafka.bootstrap_servers = args.kafka
        sinks.append(KafkaSink(config.kafka))

    try:
        scenario.export(sinks)
    except InstallmentGenError as exc:
        logger.error("Export failed: %s", exc)
        return 1
    finally:
        for sink in sinks:
            sink.close()

    for key, value in scenario.get_portfolio_summary().items():
        logger.info("%s: %s", key, value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
