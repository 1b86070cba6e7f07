"""
Transaction runners: one unit of work, one DAO, one connection.

**Conceptual**: Route handlers never open connections themselves. They ask a
runner to build a DAO for a fresh transaction and run a block against it:

    widget = transactions.txn_with_dao(dao_factory.widget_dao, lambda dao: dao.get_widget(7))

SqlTransactions commits when the block returns and rolls back when it
raises. MemoryTransactions has the same shape but no database, which lets
the HTTP layer be tested with in-memory DAOs.
"""

import logging
from typing import Callable, Optional, Protocol, TypeVar

from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

D = TypeVar("D")
T = TypeVar("T")


class Transactions(Protocol):
    def txn_with_dao(
        self,
        dao_builder: Callable[[Optional[Connection]], D],
        block: Callable[[D], T],
    ) -> T:
        ...

    def dispose(self) -> None:
        ...


class SqlTransactions:
    """Runs each block inside engine.begin()."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def txn_with_dao(
        self,
        dao_builder: Callable[[Optional[Connection]], D],
        block: Callable[[D], T],
    ) -> T:
        with self.engine.begin() as conn:
            return block(dao_builder(conn))

    def dispose(self) -> None:
        """Close pooled connections (on shutdown)."""
        logger.info("Disposing database connection pool")
        self.engine.dispose()


class MemoryTransactions:
    """No database: the builder receives None and the block runs directly."""

    def txn_with_dao(
        self,
        dao_builder: Callable[[Optional[Connection]], D],
        block: Callable[[D], T],
    ) -> T:
        return block(dao_builder(None))

    def dispose(self) -> None:
        pass
