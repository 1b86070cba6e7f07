"""
Tests for the WidgetDao implementations.

**Purpose**: The in-memory and SQL DAOs must be interchangeable, so the same
behavioral tests run against both: MemoryWidgetDao directly, and SqlWidgetDao
inside a transaction on an in-memory SQLite database (see conftest.py).
"""

from datetime import timezone

import pytest

from widget_service.db.tables import widgets as widgets_table
from widget_service.db.transactions import MemoryTransactions, SqlTransactions
from widget_service.widgets.factory import MemoryDaoFactory, SqlDaoFactory
from widget_service.widgets.models import WidgetNotFoundError


@pytest.fixture(params=["memory", "sql"])
def run(request, sqlite_engine):
    """
    A function that runs a block against a fresh-transaction DAO.

    Parametrized so every test below runs once per implementation.
    """
    if request.param == "memory":
        transactions, factory = MemoryTransactions(), MemoryDaoFactory()
    else:
        transactions, factory = SqlTransactions(sqlite_engine), SqlDaoFactory()

    def _run(block):
        return transactions.txn_with_dao(factory.widget_dao, block)

    return _run


def test_create_then_get(run):
    created = run(lambda dao: dao.create_widget("sprocket"))

    fetched = run(lambda dao: dao.get_widget(created.id))

    assert fetched == created
    assert fetched.name == "sprocket"
    assert fetched.created_at.tzinfo is not None


def test_get_missing_returns_none(run):
    assert run(lambda dao: dao.get_widget(2_147_483_647)) is None


def test_ids_are_distinct_and_increasing(run):
    a = run(lambda dao: dao.create_widget("a"))
    b = run(lambda dao: dao.create_widget("b"))

    assert b.id > a.id


def test_get_all_in_creation_order(run):
    names = ["foo", "bar", "baz"]
    created = [run(lambda dao, n=n: dao.create_widget(n)) for n in names]

    all_widgets = run(lambda dao: dao.get_all_widgets())

    assert [w.id for w in all_widgets] == [w.id for w in created]
    assert [w.name for w in all_widgets] == names


def test_get_all_empty(run):
    assert run(lambda dao: dao.get_all_widgets()) == []


def test_update_widget_name(run):
    created = run(lambda dao: dao.create_widget("old"))

    updated = run(lambda dao: dao.update_widget_name(created.id, "new"))

    assert updated.id == created.id
    assert updated.name == "new"
    assert updated.created_at == created.created_at
    assert run(lambda dao: dao.get_widget(created.id)).name == "new"


def test_update_missing_widget_raises(run):
    with pytest.raises(WidgetNotFoundError, match="Widget 999 not found"):
        run(lambda dao: dao.update_widget_name(999, "nope"))


def test_first_letter_counts(run):
    for name in ["apple", "Avocado", "banana", "cherry", "Cranberry", "coconut"]:
        run(lambda dao, n=name: dao.create_widget(n))

    counts = run(lambda dao: dao.widget_name_first_letter_counts())

    assert counts == {"A": 2, "B": 1, "C": 3}
    assert list(counts) == ["A", "B", "C"]


def test_first_letter_counts_empty(run):
    assert run(lambda dao: dao.widget_name_first_letter_counts()) == {}


def test_sql_transaction_rolls_back_on_error(sqlite_engine):
    """A block that raises leaves no trace in the database."""
    transactions = SqlTransactions(sqlite_engine)
    factory = SqlDaoFactory()

    def create_then_fail(dao):
        dao.create_widget("doomed")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        transactions.txn_with_dao(factory.widget_dao, create_then_fail)

    with sqlite_engine.connect() as conn:
        assert conn.execute(widgets_table.select()).all() == []


def test_sql_created_at_is_utc(sqlite_engine):
    transactions = SqlTransactions(sqlite_engine)

    widget = transactions.txn_with_dao(
        SqlDaoFactory().widget_dao, lambda dao: dao.create_widget("clock")
    )

    assert widget.created_at.tzinfo == timezone.utc


def test_sql_dao_factory_requires_connection():
    with pytest.raises(ValueError, match="requires a database connection"):
        SqlDaoFactory().widget_dao(None)


def test_memory_dao_factory_reuses_dao():
    factory = MemoryDaoFactory()

    assert factory.widget_dao(None) is factory.widget_dao(None)


def test_memory_first_letter_counts_keep_one_character():
    """Upper-casing "ß" gives "SS"; the key is still a single character."""
    transactions, factory = MemoryTransactions(), MemoryDaoFactory()
    for name in ["straße", "ßtraße", "sand"]:
        transactions.txn_with_dao(factory.widget_dao, lambda dao, n=name: dao.create_widget(n))

    counts = transactions.txn_with_dao(
        factory.widget_dao, lambda dao: dao.widget_name_first_letter_counts()
    )

    assert counts == {"S": 3}
    assert all(len(letter) == 1 for letter in counts)
