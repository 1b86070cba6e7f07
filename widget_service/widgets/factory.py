"""
DAO factories: which WidgetDao implementation a transaction gets.

The factory is chosen once at startup (SQL in production, memory in tests)
and injected into the HTTP app alongside the matching transaction runner.
"""

from typing import Optional, Protocol

from sqlalchemy.engine import Connection

from widget_service.widgets.memory_dao import MemoryWidgetDao
from widget_service.widgets.models import WidgetDao
from widget_service.widgets.sql_dao import SqlWidgetDao


class DaoFactory(Protocol):
    def widget_dao(self, conn: Optional[Connection]) -> WidgetDao:
        ...


class SqlDaoFactory:
    def widget_dao(self, conn: Optional[Connection]) -> WidgetDao:
        if conn is None:
            raise ValueError("SqlDaoFactory requires a database connection")
        return SqlWidgetDao(conn)


class MemoryDaoFactory:
    """Hands out the same MemoryWidgetDao every time so data survives between transactions."""

    def __init__(self):
        self._widget_dao = MemoryWidgetDao()

    def widget_dao(self, conn: Optional[Connection]) -> WidgetDao:
        return self._widget_dao
