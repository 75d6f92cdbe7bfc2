"""
User-facing error messages.

Components take a ``MessageFormatter`` so a host application can plug in its
own translations; ``DefaultMessages`` carries the English strings.
"""
from typing import Any, Dict, Mapping, Optional, Protocol

NO_SECRET_KEY = "no_secret_key"
INVALID_TRANSACTION_ID = "invalid_transaction_id"
INVALID_CURRENCY_CODE = "invalid_currency_code"
INVALID_CURRENCY_ID = "invalid_currency_id"
INVALID_USER_ID = "invalid_user_id"
INVALID_SERVICE_DATA = "invalid_service_data"


class MessageFormatter(Protocol):
    def format(self, key: str, **params: Any) -> str: ...


class DefaultMessages:
    """Message catalog backed by a plain dictionary."""

    MESSAGES: Dict[str, str] = {
        NO_SECRET_KEY: "A secret key is required to access service data.",
        INVALID_TRANSACTION_ID: "The transaction has no valid ID.",
        INVALID_CURRENCY_CODE: "Invalid currency code.",
        INVALID_CURRENCY_ID: "Invalid currency ID.",
        INVALID_USER_ID: "Invalid user ID.",
        INVALID_SERVICE_DATA: "Service data must be a mapping, got {type_name}.",
    }

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self.messages = dict(self.MESSAGES)
        if overrides:
            self.messages.update(overrides)

    def format(self, key: str, **params: Any) -> str:
        """Return the message for ``key``; unknown keys come back as-is."""
        template = self.messages.get(key, key)
        return template.format(**params) if params else template


default_messages = DefaultMessages()
