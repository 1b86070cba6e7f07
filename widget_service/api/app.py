"""
app.py - FastAPI Application Factory
========================================
Builds the widget API around an injected transaction runner and DAO
factory. Production wiring (SQL) lives in actions/run_server.py; tests wire
MemoryTransactions and MemoryDaoFactory instead.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from widget_service.api.routes import router
from widget_service.db.transactions import Transactions
from widget_service.widgets.factory import DaoFactory
from widget_service.widgets.models import WidgetNotFoundError

logger = logging.getLogger(__name__)


def create_app(transactions: Transactions, dao_factory: DaoFactory) -> FastAPI:
    """
    Create the widget API.

    Args:
        transactions: Runner used by every handler to scope one unit of work.
        dao_factory: Builds the WidgetDao for each transaction.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Widget API starting")
        yield
        logger.info("Widget API shutting down")
        app.state.transactions.dispose()

    app = FastAPI(
        title="Widget Service",
        description="Create, rename and list widgets.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.transactions = transactions
    app.state.dao_factory = dao_factory

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s -> %d (%.1f ms)",
                request.method, request.url.path, status_code, elapsed_ms,
            )

    @app.exception_handler(WidgetNotFoundError)
    async def widget_not_found(request: Request, exc: WidgetNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.warning("Unhandled exception", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    app.include_router(router)
    return app
