"""Shared enumerations for the ledger."""
from enum import Enum


class TransactionStatus(str, Enum):
    """Payment status of a transaction."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELED = "canceled"
    REFUNDED = "refunded"
    FAILED = "failed"


ALLOWED_STATUSES = tuple(status.value for status in TransactionStatus)

# Reward fulfilment
NOT_SENT = 0
SENT = 1

# Currency symbol placement
SYMBOL_BEFORE = 0
SYMBOL_AFTER = 1
