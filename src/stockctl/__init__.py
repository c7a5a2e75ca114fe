"""stockctl — inventory ledger for warehouses and the stock they hold."""

__version__ = "0.1.0"
