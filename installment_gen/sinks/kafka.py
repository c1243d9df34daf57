"""Kafka sink for publishing generated billing records."""

import json
import logging
import time
from dataclasses import dataclass, is_dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from installment_gen.config import KafkaConfig
from installment_gen.exceptions import SinkError
from installment_gen.sinks.serialization import to_dict, to_event

logger = logging.getLogger(__name__)


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0

    @property
    def throughput(self) -> float:
        """Calculate records per second achieved."""
        if self.start_time is None or self.end_time is None:
            return 0.0
        duration = self.end_time - self.start_time
        return self.sent / duration if duration > 0 else 0.0


class KafkaSink:
    """Output records to Kafka topics.

    Records of one agreement share a message key so that consumers see an
    agreement's invoices in order.
    """

    # Entity type to key field mapping
    KEY_FIELDS = {
        "invoices": "agreement_id",
        "project_agreements": "agreement_id",
        "rental_agreements": "agreement_id",
        "recurring_templates": "agreement_id",
        "events": "subject",
    }

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()

    def topic_for(self, entity_type: str) -> str:
        """Map an entity type to its topic (``dev.billing.invoices``)."""
        if not self.config.topic_prefix:
            return entity_type
        return f"{self.config.topic_prefix}.{entity_type}"

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _get_key(self, entity_type: str, record: Any) -> str | None:
        """Extract message key from record based on entity type."""
        key_field = self.KEY_FIELDS.get(entity_type)
        if not key_field:
            return None

        if is_dataclass(record):
            key = getattr(record, key_field, None)
        elif isinstance(record, dict):
            key = record.get(key_field)
        else:
            return None
        return str(key) if key else None

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Send a single record to a Kafka topic."""
        value = json.dumps(to_dict(record), ensure_ascii=False, default=str).encode("utf-8")

        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=value,
                callback=self._delivery_callback,
            )
        except (KafkaException, BufferError) as exc:
            self.stats.failed += 1
            raise SinkError(f"Cannot produce to {topic}: {exc}") from exc

        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to the entity type's topic."""
        topic = self.topic_for(entity_type)
        logger.info("Writing batch to %s: %d records", topic, len(records))

        if self.stats.start_time is None:
            self.stats.start_time = time.time()

        for record in records:
            self.send(topic, record, key=self._get_key(entity_type, record))

        self.flush()
        self.stats.end_time = time.time()
        logger.info(
            "Batch complete: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )

    def publish_events(self, entity_type: str, records: list[Any], action: str = "created") -> None:
        """Publish records wrapped in the event envelope.

        ``invoices`` become ``invoice.created`` events on the ``events``
        topic, keyed by the record ID.
        """
        singular = entity_type[:-1] if entity_type.endswith("s") else entity_type
        subject_field = "invoice_id" if singular == "invoice" else "agreement_id"
        events = [
            to_event(record, f"{singular}.{action}", subject_field=subject_field)
            for record in records
        ]
        self.write_batch("events", events)

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        remaining = self.producer.flush(timeout)
        if remaining:
            logger.warning("%d messages still pending after flush", remaining)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
