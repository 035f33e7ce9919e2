"""Kafka topic partition lists, offsets and timeout helpers."""

__version__ = "0.1.0"
__all__ = ["timeouts", "topic_partition_list"]