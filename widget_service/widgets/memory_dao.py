"""In-memory WidgetDao for tests and local runs without a database."""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from widget_service.widgets.models import Widget, WidgetNotFoundError


def _prefix(name: str) -> str:
    # upper() can expand one character into several ("\u00df" -> "SS"); keep one
    return name[:1].upper()[:1]


class MemoryWidgetDao:
    """
    Dict-backed WidgetDao.

    Ids start at 1 and increase, matching a SERIAL column. All methods hold
    one lock, so a single instance can be shared across request threads.
    """

    def __init__(self):
        self._widgets: Dict[int, Widget] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get_widget(self, widget_id: int) -> Optional[Widget]:
        with self._lock:
            return self._widgets.get(widget_id)

    def get_all_widgets(self) -> List[Widget]:
        with self._lock:
            return [self._widgets[k] for k in sorted(self._widgets)]

    def create_widget(self, name: str) -> Widget:
        with self._lock:
            widget = Widget(id=self._next_id, name=name, created_at=datetime.now(timezone.utc))
            self._widgets[widget.id] = widget
            self._next_id += 1
            return widget

    def update_widget_name(self, widget_id: int, name: str) -> Widget:
        with self._lock:
            existing = self._widgets.get(widget_id)
            if existing is None:
                raise WidgetNotFoundError(widget_id)
            widget = replace(existing, name=name)
            self._widgets[widget_id] = widget
            return widget

    def widget_name_first_letter_counts(self) -> Dict[str, int]:
        with self._lock:
            counts: Dict[str, int] = {}
            for widget in self._widgets.values():
                letter = _prefix(widget.name)
                counts[letter] = counts.get(letter, 0) + 1
        return dict(sorted(counts.items()))
