"""
Widget domain model and persistence.

Defines the Widget record, the WidgetDao interface, and SQL and in-memory
implementations of it.
"""
