"""Configuration management for installment-gen."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from installment_gen.exceptions import ConfigurationError
from installment_gen.models.numbering import NumberingState


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "dev.billing"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class NumberingConfig:
    """Document numbering settings for one sequence (e.g. project invoices)."""

    prefix: str
    next_number: int = 1
    padding: int = 5

    def to_state(self) -> NumberingState:
        """Build the initial numbering state for the ledger."""
        return NumberingState(
            prefix=self.prefix,
            next_number=self.next_number,
            padding=self.padding,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NumberingConfig":
        """Create from a settings mapping.

        Accepts both ``next_number`` and the ``nextNumber`` spelling used by
        exported application settings.
        """
        if "prefix" not in data:
            raise ConfigurationError("Numbering settings require a prefix")
        next_number = data.get("next_number", data.get("nextNumber", 1))
        return cls(
            prefix=str(data["prefix"]),
            next_number=int(next_number),
            padding=int(data.get("padding", 5)),
        )


@dataclass
class ScenarioConfig:
    """Configuration for the sample portfolio scenario."""

    name: str = "sample_portfolio"
    num_agreements: int = 50
    start_date: date | None = None
    end_date: date | None = None
    plan_coverage: float = 0.9


@dataclass
class InstallmentGenConfig:
    """Main configuration for installment-gen."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    numbering: dict[str, NumberingConfig] = field(default_factory=dict)
    scenario: ScenarioConfig | None = None
    seed: int | None = None
    locale: str = "en_US"
    log_level: str = "INFO"

    def numbering_states(self) -> dict[str, NumberingState]:
        """Return the configured numbering states keyed by sequence name."""
        return {key: cfg.to_state() for key, cfg in self.numbering.items()}

    @classmethod
    def from_env(cls) -> "InstallmentGenConfig":
        """Create config from environment variables."""
        import json
        import os

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic_prefix=os.getenv("TOPIC_PREFIX", "dev.billing"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        numbering_str = os.getenv("NUMBERING_SETTINGS")
        numbering: dict[str, NumberingConfig] = {}
        if numbering_str:
            try:
                raw = json.loads(numbering_str)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(f"NUMBERING_SETTINGS is not valid JSON: {exc}") from exc
            if not isinstance(raw, dict):
                raise ConfigurationError("NUMBERING_SETTINGS must be a JSON object")
            numbering = {key: NumberingConfig.from_dict(value) for key, value in raw.items()}

        return cls(
            kafka=kafka,
            output=output,
            numbering=numbering,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            locale=os.getenv("LOCALE", "en_US"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
