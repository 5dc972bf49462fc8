"""Prometheus metrics for dues, penalties, compliance and fee quotes"""

from prometheus_client import Counter, Histogram

# Dues
dues_assessment_counter = Counter(
    "uvwie_dues_assessment_total",
    "Total-due calculations",
    ["outcome"],  # assessed | invalid | not_found | unavailable | error
)

# Compliance
compliance_status_counter = Counter(
    "uvwie_compliance_classification_total",
    "Compliance classifications by resulting status",
    ["status"],
)

# Penalties
penalty_applied_counter = Counter(
    "uvwie_penalty_applied_total",
    "Penalties written back to payment records",
)

penalty_amount_histogram = Histogram(
    "uvwie_penalty_amount_naira",
    "Size of applied penalties in Naira",
    buckets=[0, 500, 1_000, 5_000, 10_000, 50_000, 100_000],
)

# Fee quotes
fee_quote_counter = Counter(
    "uvwie_fee_quote_total",
    "Fee quotes served",
    ["shop_size"],
)

# Data store
dependency_failure_counter = Counter(
    "uvwie_dependency_failures_total",
    "Requests failed by the data store",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_dues_outcome(outcome: str) -> None:
    dues_assessment_counter.labels(outcome=outcome).inc()


def record_compliance(status: str) -> None:
    """Count a classification under its resulting status"""
    compliance_status_counter.labels(status=status).inc()


def record_penalty(amount: float) -> None:
    penalty_applied_counter.inc()
    penalty_amount_histogram.observe(amount)
