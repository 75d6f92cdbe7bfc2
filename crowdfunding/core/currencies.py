"""Currency catalog: a load-once collection of currency records."""
from collections.abc import Iterable, Iterator
from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session, sessionmaker

from crowdfunding.constants import SYMBOL_AFTER, SYMBOL_BEFORE
from crowdfunding.core import messages as msg
from crowdfunding.core.messages import MessageFormatter, default_messages
from crowdfunding.database.gateway import TableGateway
from crowdfunding.database.models import CurrencyModel
from crowdfunding.exceptions import InvalidCurrencyError

logger = structlog.get_logger(__name__)

COLUMNS = ("id", "title", "code", "symbol", "position")


class Currency(BaseModel):
    """Immutable currency record."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    code: str
    symbol: Optional[str] = None
    position: int = SYMBOL_BEFORE

    @property
    def symbol_after(self) -> bool:
        return self.position == SYMBOL_AFTER


class Currencies:
    """
    Currencies loaded by ID or code in a single query.

    Example:
        currencies = Currencies(session_factory)
        currencies.load(codes=["USD", "GBP"])
        usd = currencies.get_currency_by_code("USD")
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker[Session]] = None,
        messages: Optional[MessageFormatter] = None,
    ):
        self.gateway = TableGateway(CurrencyModel.__table__, session_factory)
        self.messages = messages or default_messages
        self.items: List[Dict[str, Any]] = []

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def load(self, ids: Iterable[Any] = (), codes: Iterable[str] = ()) -> "Currencies":
        """
        Load currencies.

        IDs take precedence over codes. With neither, every currency is loaded.
        """
        ids = [int(value) for value in ids]
        codes = list(codes)

        table = self.gateway.table
        where = []
        if ids:
            where.append(table.c.id.in_(ids))
        elif codes:
            where.append(table.c.code.in_(codes))

        self.items = self.gateway.fetch_all(COLUMNS, where)
        logger.debug("currencies_loaded", count=len(self.items))
        return self

    def get_currency_by_code(self, code: str) -> Optional[Currency]:
        """
        Return the loaded currency with this code, or None.

        Raises:
            InvalidCurrencyError: Empty code
        """
        if not code:
            raise InvalidCurrencyError(self.messages.format(msg.INVALID_CURRENCY_CODE))

        for item in self.items:
            if item["code"] == code:
                return Currency(**item)
        return None

    def get_currency(self, currency_id: Any) -> Optional[Currency]:
        """
        Return the loaded currency with this ID, or None.

        Raises:
            InvalidCurrencyError: Empty or zero ID
        """
        currency_id = int(currency_id or 0)
        if not currency_id:
            raise InvalidCurrencyError(self.messages.format(msg.INVALID_CURRENCY_ID))

        for item in self.items:
            if int(item["id"]) == currency_id:
                return Currency(**item)
        return None
