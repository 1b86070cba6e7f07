"""
HTTP API for widgets.

FastAPI application factory, request/response schemas, and route handlers.
"""
