"""
Prometheus metrics for ledger monitoring.

Tracks:
- Transaction writes by operation
- Status changes by target status
- Service data encryption and decryption outcomes
"""
from prometheus_client import Counter

transaction_writes_total = Counter(
    "transaction_writes_total",
    "Total transaction write statements",
    ["operation"],  # insert, update, update_status, update_extra_data, update_reward_state
)

transaction_status_changes_total = Counter(
    "transaction_status_changes_total",
    "Total accepted in-memory status changes",
    ["status"],
)

service_data_operations_total = Counter(
    "service_data_operations_total",
    "Total service data operations",
    ["operation", "result"],  # operation: store, read; result: success, empty, failed
)
