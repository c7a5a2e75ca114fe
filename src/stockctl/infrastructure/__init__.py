"""Storage for the ledger: SQLite engine, keyed stores and identifier pools.

Built on SQLAlchemy Core. Nothing here imports from services, commands or
output.
"""
