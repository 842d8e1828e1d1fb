"""
Bank Ledger

An in-memory ledger of bank accounts with auditable balance history,
atomic transfers between accounts, and directory lookups by account
number or owner name. All amounts use Decimal.
"""

__version__ = "1.0.0"
