"""
Prometheus metrics collection for student-roster

Collectors live on a private registry. Nothing is served over HTTP; the CLI can
dump the current values with generate_metrics().
"""
from contextlib import contextmanager

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Registry for all roster metrics
REGISTRY = CollectorRegistry()


# =======================
# RECORD METRICS
# =======================

records_written_total = Counter(
    name="roster_records_written_total",
    documentation="Student records written to storage",
    labelnames=["operation"],  # operation: add, update, delete
    registry=REGISTRY,
)

validation_failures_total = Counter(
    name="roster_validation_failures_total",
    documentation="Records rejected by the validation engine",
    labelnames=["operation"],  # operation: add, update, import
    registry=REGISTRY,
)

storage_errors_total = Counter(
    name="roster_storage_errors_total",
    documentation="Storage engine failures surfaced as StorageError",
    labelnames=["operation"],
    registry=REGISTRY,
)


# =======================
# BULK TRANSFER METRICS
# =======================

import_rows_total = Counter(
    name="roster_import_rows_total",
    documentation="CSV data rows seen by the importer",
    labelnames=["outcome"],  # outcome: accepted, duplicate, invalid, parse_error
    registry=REGISTRY,
)

export_records_total = Counter(
    name="roster_export_records_total",
    documentation="Records written to CSV exports",
    registry=REGISTRY,
)

transfer_duration_seconds = Histogram(
    name="roster_transfer_duration_seconds",
    documentation="Time spent importing or exporting a CSV file",
    labelnames=["direction"],  # direction: import, export
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0],
    registry=REGISTRY,
)


# =======================
# HELPERS
# =======================

def generate_metrics() -> bytes:
    """Current values of every roster metric in Prometheus text format"""
    return generate_latest(REGISTRY)


@contextmanager
def track_duration(histogram: Histogram, **labels):
    """
    Observe the time spent in the block, whether or not it raises

    Usage:
        with track_duration(transfer_duration_seconds, direction="import"):
            ...
    """
    with histogram.labels(**labels).time():
        yield


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """Add value to a counter, selecting the labelled child when labels are given"""
    target = counter.labels(**labels) if labels else counter
    target.inc(value)


def get_metric_value(name: str, **labels) -> float:
    """
    Current value of one sample, 0.0 when it has not been recorded yet

    Args:
        name: Sample name, e.g. "roster_import_rows_total"
        **labels: Label values identifying the sample
    """
    value = REGISTRY.get_sample_value(name, labels or None)
    return 0.0 if value is None else value
