"""
Banking Ledger

Salted, iterated credential hashing and a per-user monetary ledger with
exact Decimal balances and an append-only transaction history.
"""

__version__ = "1.0.0"
