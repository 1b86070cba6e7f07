"""
schemas.py - Pydantic Request/Response Models
=================================================
JSON shapes for the widget endpoints. Timestamps are ISO 8601.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from widget_service.widgets.models import Widget


class NewWidgetRequest(BaseModel):
    """Body of POST /widgets. Unknown fields are ignored."""

    name: str


class WidgetResponse(BaseModel):
    """A widget as returned by every widget endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_widget(cls, widget: Widget) -> "WidgetResponse":
        return cls(id=widget.id, name=widget.name, created_at=widget.created_at)


class HealthResponse(BaseModel):
    status: str
    service: str
