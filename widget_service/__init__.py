"""
widget_service: a small widget catalogue exposed over HTTP.

Configuration is resolved once from environment variables, then handed to
the database layer and the HTTP application.
"""
