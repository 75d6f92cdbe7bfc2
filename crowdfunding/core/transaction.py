"""
Funding transaction ledger record.

A ``Transaction`` wraps one row of the ``transactions`` table: it loads and
persists the full record, runs narrow single-column updates for status,
extra data and reward state, and keeps the payment-gateway service data
encrypted at rest.
"""
import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union

import structlog
from sqlalchemy.orm import Session, sessionmaker

from crowdfunding.constants import ALLOWED_STATUSES, NOT_SENT, SENT, TransactionStatus
from crowdfunding.core import messages as msg
from crowdfunding.core.crypto import ServiceDataCipher
from crowdfunding.core.messages import MessageFormatter, default_messages
from crowdfunding.database.gateway import TableGateway
from crowdfunding.database.models import TransactionModel
from crowdfunding.exceptions import (
    InvalidArgumentError,
    InvalidTransactionIdError,
    MissingSecretError,
    ServiceDataDecryptionError,
)
from crowdfunding.monitoring import metrics

logger = structlog.get_logger(__name__)

# Columns read by load() and written by persist(); service_data is handled apart.
FIELDS = (
    "id",
    "txn_date",
    "txn_amount",
    "txn_currency",
    "txn_status",
    "txn_id",
    "parent_txn_id",
    "extra_data",
    "status_reason",
    "project_id",
    "reward_id",
    "investor_id",
    "receiver_id",
    "service_provider",
    "service_alias",
    "reward_state",
    "fee",
)

DECIMAL_FIELDS = frozenset({"txn_amount", "fee"})
INTEGER_FIELDS = frozenset(
    {"id", "project_id", "reward_id", "investor_id", "receiver_id", "reward_state"}
)

DEFAULTS: Dict[str, Any] = {
    "txn_amount": Decimal("0.00"),
    "fee": Decimal("0.00"),
    "txn_currency": "",
    "txn_status": TransactionStatus.PENDING.value,
    "project_id": 0,
    "investor_id": 0,
    "receiver_id": 0,
    "reward_state": NOT_SENT,
}


def _to_decimal(name: str, value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidArgumentError(f"{name} is not a decimal value: {value!r}") from e


def _to_int(name: str, value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} is not an integer value: {value!r}") from e


def _to_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


class Transaction:
    """
    One payment-gateway event tied to a project, an investor and a receiver.

    Example:
        transaction = Transaction(session_factory)
        transaction.load({"id": 1, "receiver_id": 2})
        transaction.set_status("completed").update_status()
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker[Session]] = None,
        messages: Optional[MessageFormatter] = None,
    ):
        """
        Initialize an empty transaction.

        Args:
            session_factory: Optional session factory (process default if omitted)
            messages: Optional formatter for error messages
        """
        self.gateway = TableGateway(TransactionModel.__table__, session_factory)
        self.messages = messages or default_messages
        self.reset()

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, amount={self.txn_amount}, "
            f"currency={self.txn_currency}, status={self.txn_status})>"
        )

    def reset(self) -> "Transaction":
        """Return every field to its empty state."""
        for name in FIELDS:
            setattr(self, name, DEFAULTS.get(name))
        # None means "not read yet"; {} means "read, nothing stored".
        self._service_data: Optional[Dict[str, Any]] = None
        # Set when the stored blob did not open with the last secret tried.
        self._service_data_unreadable = False
        return self

    # Persistence

    def load(self, keys: Union[int, str, Mapping[str, Any]]) -> "Transaction":
        """
        Load a transaction by ID or by column predicates.

        Args:
            keys: Transaction ID, or a mapping such as {"id": 1, "receiver_id": 2}

        Returns:
            Transaction: self, reset to empty when no row matches
        """
        if isinstance(keys, Mapping):
            criteria = dict(keys)
        else:
            criteria = {"id": _to_int("id", keys) or 0}

        row = self.gateway.fetch_one(FIELDS, criteria) if criteria else None

        self.reset()
        if row is not None:
            self.bind(row)

        logger.debug("transaction_loaded", criteria=list(criteria), found=row is not None)
        return self

    def bind(self, data: Mapping[str, Any], ignored: Iterable[str] = ()) -> "Transaction":
        """
        Merge field values into the record without touching storage.

        Mapping or list values for ``extra_data`` are stored as JSON text.
        Statuses go through ``set_status``. Unknown keys are skipped.
        """
        ignored = set(ignored)
        for key, value in data.items():
            if key in ignored or key not in FIELDS:
                continue

            if key == "txn_status":
                self.set_status(value)
                continue

            if key == "extra_data" and isinstance(value, (Mapping, list, tuple)):
                value = json.dumps(value, default=str)
            elif key in DECIMAL_FIELDS:
                value = _to_decimal(key, value)
            elif key in INTEGER_FIELDS:
                value = _to_int(key, value)
            elif key == "txn_date":
                value = _to_datetime(value)

            setattr(self, key, value)
        return self

    def persist(self) -> "Transaction":
        """
        Insert the record when it has no ID, otherwise update every column.

        After return ``id`` holds the key of the stored row.
        """
        values = {name: getattr(self, name) for name in FIELDS if name != "id"}
        values["extra_data"] = self.extra_data or None

        if not self.id:
            # Unset columns fall back to their table defaults
            values = {name: value for name, value in values.items() if value is not None}
            self.id = self.gateway.insert(values)
            metrics.transaction_writes_total.labels(operation="insert").inc()
            logger.info(
                "transaction_inserted",
                transaction_id=self.id,
                status=self.txn_status,
                currency=self.txn_currency,
            )
        else:
            self.gateway.update(values, {"id": self.id})
            metrics.transaction_writes_total.labels(operation="update").inc()
            logger.info("transaction_updated", transaction_id=self.id, status=self.txn_status)

        return self

    def _require_id(self) -> int:
        if not self.id:
            raise InvalidTransactionIdError(self.messages.format(msg.INVALID_TRANSACTION_ID))
        return int(self.id)

    def update_extra_data(self) -> "Transaction":
        """Persist only the extra data column."""
        transaction_id = self._require_id()
        self.gateway.update({"extra_data": self.extra_data or None}, {"id": transaction_id})
        metrics.transaction_writes_total.labels(operation="update_extra_data").inc()
        return self

    def update_status(self) -> "Transaction":
        """Persist only the status column."""
        transaction_id = self._require_id()
        self.gateway.update({"txn_status": self.txn_status}, {"id": transaction_id})
        metrics.transaction_writes_total.labels(operation="update_status").inc()
        logger.info("transaction_status_updated", transaction_id=transaction_id, status=self.txn_status)
        return self

    def update_reward_state(self, state: Any) -> bool:
        """
        Mark the reward as sent (truthy) or not sent (falsy).

        The row must match both the ID and the receiver ID of this record.

        Returns:
            bool: True when a row was changed
        """
        transaction_id = self._require_id()
        state = SENT if state else NOT_SENT

        rows = self.gateway.update(
            {"reward_state": state},
            {"id": transaction_id, "receiver_id": self.receiver_id},
        )
        metrics.transaction_writes_total.labels(operation="update_reward_state").inc()

        if rows:
            self.reward_state = state
        else:
            logger.warning(
                "reward_state_not_updated",
                transaction_id=transaction_id,
                receiver_id=self.receiver_id,
            )
        return rows > 0

    # Extra data

    def get_extra_data(self) -> Dict[str, Any]:
        """Decode extra data; anything but a JSON object yields an empty dict."""
        if not isinstance(self.extra_data, str):
            return {}
        try:
            data = json.loads(self.extra_data)
        except (ValueError, RecursionError):
            return {}
        return data if isinstance(data, dict) else {}

    def add_extra_data(self, data: Any) -> "Transaction":
        """Overlay ``data`` onto the stored extra data; later keys win."""
        if not isinstance(data, Mapping):
            return self
        extra_data = self.get_extra_data()
        extra_data.update(data)
        self.extra_data = json.dumps(extra_data, default=str)
        return self

    # Service data

    def get_service_data(self, secret: str) -> Dict[str, Any]:
        """
        Return the decrypted service data, reading it on first access.

        A blob that fails to decrypt is not cached, so a later call with the
        right secret still reads it and a later store cannot wipe it by accident.

        Args:
            secret: Secret the data was stored with

        Returns:
            Dict[str, Any]: Service data; empty when nothing is stored or the
                secret does not match

        Raises:
            MissingSecretError: Empty secret
            InvalidTransactionIdError: Record has no ID
        """
        if not secret:
            raise MissingSecretError(self.messages.format(msg.NO_SECRET_KEY))
        transaction_id = self._require_id()

        if self._service_data is None:
            blob = self.gateway.fetch_value("service_data", {"id": transaction_id})
            service_data = self._decrypt_service_data(blob, secret)
            if service_data is None:
                self._service_data_unreadable = True
                return {}
            self._service_data = service_data
            self._service_data_unreadable = False

        return self._service_data

    def _decrypt_service_data(
        self, blob: Optional[bytes], secret: str
    ) -> Optional[Dict[str, Any]]:
        """Decode a stored blob; None when it does not open with ``secret``."""
        if not blob:
            metrics.service_data_operations_total.labels(operation="read", result="empty").inc()
            return {}

        try:
            plaintext = ServiceDataCipher(secret).decrypt(bytes(blob))
        except ServiceDataDecryptionError:
            metrics.service_data_operations_total.labels(operation="read", result="failed").inc()
            logger.warning("service_data_decryption_failed", transaction_id=self.id)
            return None

        try:
            data = json.loads(plaintext.decode("utf-8"))
        except (ValueError, RecursionError):
            data = None

        metrics.service_data_operations_total.labels(operation="read", result="success").inc()
        return data if isinstance(data, dict) else {}

    def set_service_data(self, data: Optional[Mapping[str, Any]]) -> "Transaction":
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                self.messages.format(msg.INVALID_SERVICE_DATA, type_name=type(data).__name__)
            )
        self._service_data = dict(data)
        self._service_data_unreadable = False
        return self

    def store_service_data(self, secret: str) -> "Transaction":
        """
        Encrypt and persist the service data column.

        Empty service data is stored as NULL.

        Raises:
            MissingSecretError: Empty secret
            InvalidTransactionIdError: Record has no ID
            ServiceDataDecryptionError: The stored blob failed to decrypt and
                nothing was set since, so storing would discard it
        """
        if not secret:
            raise MissingSecretError(self.messages.format(msg.NO_SECRET_KEY))
        transaction_id = self._require_id()
        if self._service_data_unreadable:
            raise ServiceDataDecryptionError(
                "Stored service data could not be read; set new data before storing"
            )

        payload: Optional[bytes] = None
        if self._service_data:
            plaintext = json.dumps(self._service_data, default=str).encode("utf-8")
            payload = ServiceDataCipher(secret).encrypt(plaintext)

        self.gateway.update({"service_data": payload}, {"id": transaction_id})
        metrics.service_data_operations_total.labels(
            operation="store", result="success" if payload else "empty"
        ).inc()
        logger.info("service_data_stored", transaction_id=transaction_id, empty=payload is None)
        return self

    # Status

    def set_status(self, status: Union[str, TransactionStatus]) -> "Transaction":
        """Set the status; values outside the allowed set are ignored."""
        if isinstance(status, TransactionStatus):
            status = status.value
        if status in ALLOWED_STATUSES:
            self.txn_status = status
            metrics.transaction_status_changes_total.labels(status=status).inc()
        else:
            logger.debug("transaction_status_ignored", transaction_id=self.id, status=status)
        return self

    def get_status(self) -> Optional[str]:
        return self.txn_status

    def is_completed(self) -> bool:
        return self.txn_status == TransactionStatus.COMPLETED.value

    def is_pending(self) -> bool:
        return self.txn_status == TransactionStatus.PENDING.value

    def set_status_reason(self, reason: Any) -> "Transaction":
        self.status_reason = str(reason)
        return self

    # Accessors

    def get_id(self) -> int:
        return int(self.id or 0)

    def get_amount(self) -> Optional[Decimal]:
        return self.txn_amount

    def get_currency(self) -> Optional[str]:
        return self.txn_currency

    def get_transaction_id(self) -> Optional[str]:
        return self.txn_id

    def get_investor_id(self) -> int:
        return int(self.investor_id or 0)

    def get_receiver_id(self) -> int:
        return int(self.receiver_id or 0)

    def get_project_id(self) -> int:
        return int(self.project_id or 0)

    def get_reward_id(self) -> int:
        return int(self.reward_id or 0)

    def get_fee(self) -> Optional[Decimal]:
        return self.fee

    def set_fee(self, fee: Any) -> "Transaction":
        self.fee = _to_decimal("fee", fee)
        return self

    def set_reward_state(self, state: Any) -> "Transaction":
        self.reward_state = SENT if state else NOT_SENT
        return self

    def set_transaction_id(self, txn_id: Optional[str]) -> "Transaction":
        self.txn_id = txn_id
        return self

    def set_parent_id(self, parent_txn_id: Optional[str]) -> "Transaction":
        self.parent_txn_id = parent_txn_id
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Field values keyed by column name (service data excluded)."""
        return {name: getattr(self, name) for name in FIELDS}
