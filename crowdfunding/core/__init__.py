"""Core ledger logic."""
from .crypto import ServiceDataCipher
from .currencies import Currencies, Currency
from .messages import DefaultMessages, MessageFormatter
from .transaction import Transaction
from .users import User, Users

__all__ = [
    "Currencies",
    "Currency",
    "DefaultMessages",
    "MessageFormatter",
    "ServiceDataCipher",
    "Transaction",
    "User",
    "Users",
]
