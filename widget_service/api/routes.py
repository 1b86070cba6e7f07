"""
routes.py - Widget REST API Endpoints
==========================================
Endpoints:
    GET  /widgets/id/{id}             - Fetch one widget (404 if missing)
    PUT  /widgets/id/{id}?name=...    - Rename a widget (404 if missing)
    GET  /widgets/all                 - All widgets, creation order
    POST /widgets                     - Create a widget from {"name": ...}
    GET  /widgets/name-prefix-counts  - First-letter histogram of names
    GET  /health                      - Liveness check

Handlers are plain `def` functions, so FastAPI runs them in its threadpool and
blocking database I/O never stalls the event loop. Each handler runs exactly
one transaction through the injected Transactions runner.
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from widget_service.api.schemas import HealthResponse, NewWidgetRequest, WidgetResponse
from widget_service.db.transactions import Transactions
from widget_service.widgets.factory import DaoFactory

logger = logging.getLogger(__name__)

SERVICE_NAME = "widget-service"

router = APIRouter()


def get_transactions(request: Request) -> Transactions:
    """Transaction runner installed by create_app()."""
    return request.app.state.transactions


def get_dao_factory(request: Request) -> DaoFactory:
    """DAO factory installed by create_app()."""
    return request.app.state.dao_factory


@router.get("/widgets/id/{widget_id}", response_model=WidgetResponse)
def get_widget(
    widget_id: int,
    transactions: Transactions = Depends(get_transactions),
    dao_factory: DaoFactory = Depends(get_dao_factory),
):
    logger.debug("Loading widget %d", widget_id)
    widget = transactions.txn_with_dao(
        dao_factory.widget_dao, lambda dao: dao.get_widget(widget_id)
    )
    if widget is None:
        raise HTTPException(status_code=404, detail=f"Widget {widget_id} not found")
    return WidgetResponse.from_widget(widget)


@router.put("/widgets/id/{widget_id}", response_model=WidgetResponse)
def update_widget_name(
    widget_id: int,
    name: str = Query(..., description="New widget name."),
    transactions: Transactions = Depends(get_transactions),
    dao_factory: DaoFactory = Depends(get_dao_factory),
):
    # WidgetNotFoundError is mapped to 404 by the app-level handler
    widget = transactions.txn_with_dao(
        dao_factory.widget_dao, lambda dao: dao.update_widget_name(widget_id, name)
    )
    return WidgetResponse.from_widget(widget)


@router.get("/widgets/all", response_model=List[WidgetResponse])
def get_all_widgets(
    transactions: Transactions = Depends(get_transactions),
    dao_factory: DaoFactory = Depends(get_dao_factory),
):
    widgets = transactions.txn_with_dao(
        dao_factory.widget_dao, lambda dao: dao.get_all_widgets()
    )
    return [WidgetResponse.from_widget(w) for w in widgets]


@router.post("/widgets", response_model=WidgetResponse)
def create_widget(
    req: NewWidgetRequest,
    transactions: Transactions = Depends(get_transactions),
    dao_factory: DaoFactory = Depends(get_dao_factory),
):
    widget = transactions.txn_with_dao(
        dao_factory.widget_dao, lambda dao: dao.create_widget(req.name)
    )
    logger.info("Created widget %d", widget.id)
    return WidgetResponse.from_widget(widget)


@router.get("/widgets/name-prefix-counts", response_model=Dict[str, int])
def widget_name_prefix_counts(
    transactions: Transactions = Depends(get_transactions),
    dao_factory: DaoFactory = Depends(get_dao_factory),
):
    return transactions.txn_with_dao(
        dao_factory.widget_dao, lambda dao: dao.widget_name_first_letter_counts()
    )


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", service=SERVICE_NAME)
