"""Database package for the crowdfunding ledger."""
from .connection import close_db, get_engine, get_session_factory, init_db
from .gateway import TableGateway
from .models import Base, CurrencyModel, TransactionModel, UserModel

__all__ = [
    "Base",
    "CurrencyModel",
    "TableGateway",
    "TransactionModel",
    "UserModel",
    "close_db",
    "get_engine",
    "get_session_factory",
    "init_db",
]
