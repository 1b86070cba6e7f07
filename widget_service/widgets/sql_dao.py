"""
WidgetDao backed by SQLAlchemy Core.

**Conceptual**: One SqlWidgetDao wraps one Connection that is already inside
a transaction (see widget_service.db.transactions). The DAO never commits or
rolls back; the transaction runner owns that.

Inserts and updates use RETURNING so the database-generated id and
created_at come back without a second query.
"""

from datetime import timezone
from typing import Dict, List, Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Connection, Row

from widget_service.db.tables import widgets
from widget_service.widgets.models import Widget, WidgetNotFoundError


def _to_widget(row: Row) -> Widget:
    created_at = row.created_at
    # drivers without timezone support hand back naive UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Widget(id=row.id, name=row.name, created_at=created_at)


class SqlWidgetDao:
    def __init__(self, conn: Connection):
        self.conn = conn

    def get_widget(self, widget_id: int) -> Optional[Widget]:
        row = self.conn.execute(
            select(widgets).where(widgets.c.id == widget_id)
        ).one_or_none()
        return _to_widget(row) if row is not None else None

    def get_all_widgets(self) -> List[Widget]:
        rows = self.conn.execute(select(widgets).order_by(widgets.c.id.asc()))
        return [_to_widget(r) for r in rows]

    def create_widget(self, name: str) -> Widget:
        row = self.conn.execute(
            insert(widgets).values(name=name).returning(*widgets.c)
        ).one()
        return _to_widget(row)

    def update_widget_name(self, widget_id: int, name: str) -> Widget:
        row = self.conn.execute(
            update(widgets)
            .where(widgets.c.id == widget_id)
            .values(name=name)
            .returning(*widgets.c)
        ).one_or_none()
        if row is None:
            raise WidgetNotFoundError(widget_id)
        return _to_widget(row)

    def widget_name_first_letter_counts(self) -> Dict[str, int]:
        # group on a derived "prefix" column rather than repeating the expression
        prefixes = select(
            func.upper(func.substr(widgets.c.name, 1, 1)).label("prefix")
        ).subquery("prefixes")

        rows = self.conn.execute(
            select(prefixes.c.prefix, func.count())
            .group_by(prefixes.c.prefix)
            .order_by(prefixes.c.prefix)
        )
        return {prefix: count for prefix, count in rows}
