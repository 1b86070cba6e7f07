"""
Database access: table definitions, engine construction, and transactions.

Builds a SQLAlchemy engine from AppConfig and provides transaction runners
that hand DAOs a connection scoped to one unit of work.
"""
