"""Output sinks for exporting generated data."""

from installment_gen.sinks.console import ConsoleSink
from installment_gen.sinks.json_file import JsonFileSink
from installment_gen.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
