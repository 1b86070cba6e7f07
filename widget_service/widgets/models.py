"""
Widget record and the persistence interface.

**Conceptual**: WidgetDao is the seam between HTTP handlers and storage.
There are two implementations: SqlWidgetDao (PostgreSQL through SQLAlchemy
Core, one instance per transaction) and MemoryWidgetDao (a dict, for tests
and demos that do not care about SQL). Handlers are written against the
protocol and never know which one they got.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Protocol


class WidgetNotFoundError(LookupError):
    """Raised when an operation targets a widget id that does not exist."""

    def __init__(self, widget_id: int):
        self.widget_id = widget_id
        super().__init__(f"Widget {widget_id} not found")


@dataclass(frozen=True)
class Widget:
    """
    A stored widget.

    Attributes:
        id: Database-generated identifier.
        name: Display name.
        created_at: Creation time (timezone-aware, UTC).
    """
    id: int
    name: str
    created_at: datetime


class WidgetDao(Protocol):
    def get_widget(self, widget_id: int) -> Optional[Widget]:
        """Return the widget with that id, or None if not found."""
        ...

    def get_all_widgets(self) -> List[Widget]:
        """Return all widgets in creation order (newest last)."""
        ...

    def create_widget(self, name: str) -> Widget:
        """Insert a widget and return it with its generated id and timestamp."""
        ...

    def update_widget_name(self, widget_id: int, name: str) -> Widget:
        """Rename a widget and return the updated record.

        Raises:
            WidgetNotFoundError: If no widget has that id.
        """
        ...

    def widget_name_first_letter_counts(self) -> Dict[str, int]:
        """Map each upper-cased first letter to how many widget names start with it.

        Keys are in ascending order.
        """
        ...
