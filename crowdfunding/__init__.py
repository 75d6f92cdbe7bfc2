"""Crowdfunding ledger: transactions, currencies and users."""
from crowdfunding.constants import TransactionStatus
from crowdfunding.core import Currencies, Currency, Transaction, User, Users

__version__ = "0.1.0"

__all__ = [
    "Currencies",
    "Currency",
    "Transaction",
    "TransactionStatus",
    "User",
    "Users",
]
