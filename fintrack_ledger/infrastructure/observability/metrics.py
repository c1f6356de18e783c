"""Prometheus metrics for ledger operations and installment scheduling"""

from prometheus_client import Counter, Histogram

# Ledger metrics
ledger_operation_counter = Counter(
    "fintrack_ledger_operation_total",
    "Ledger operations by outcome",
    ["operation", "outcome"],  # outcome: success | validation | not_found | business_rule | persistence
)

backfill_transaction_counter = Counter(
    "fintrack_installment_backfill_transactions_total",
    "Historical transactions generated when installments are created",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_operation(operation: str, outcome: str) -> None:
    """Record a ledger operation outcome"""
    ledger_operation_counter.labels(operation=operation, outcome=outcome).inc()
