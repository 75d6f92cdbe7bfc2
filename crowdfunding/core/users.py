"""User directory: minimal user records loaded by ID."""
from collections.abc import Iterable, Iterator
from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session, sessionmaker

from crowdfunding.core import messages as msg
from crowdfunding.core.messages import MessageFormatter, default_messages
from crowdfunding.database.gateway import TableGateway
from crowdfunding.database.models import UserModel
from crowdfunding.exceptions import InvalidUserIdError

logger = structlog.get_logger(__name__)

COLUMNS = ("id", "name", "email")


class User(BaseModel):
    """Immutable user record."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str


class Users:
    """Users loaded by ID. An empty ID list loads nothing."""

    def __init__(
        self,
        session_factory: Optional[sessionmaker[Session]] = None,
        messages: Optional[MessageFormatter] = None,
    ):
        self.gateway = TableGateway(UserModel.__table__, session_factory)
        self.messages = messages or default_messages
        self.items: List[Dict[str, Any]] = []

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def load(self, ids: Iterable[Any] = ()) -> "Users":
        ids = [int(value) for value in ids]
        if not ids:
            return self

        self.items = self.gateway.fetch_all(COLUMNS, [self.gateway.table.c.id.in_(ids)])
        logger.debug("users_loaded", requested=len(ids), count=len(self.items))
        return self

    def get_user(self, user_id: Any) -> Optional[User]:
        """
        Return the loaded user with this ID, or None.

        Raises:
            InvalidUserIdError: Empty or zero ID
        """
        user_id = int(user_id or 0)
        if not user_id:
            raise InvalidUserIdError(self.messages.format(msg.INVALID_USER_ID))

        for item in self.items:
            if int(item["id"]) == user_id:
                return User(**item)
        return None
