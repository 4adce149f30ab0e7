"""
KhaataKitab - Source Package

Bookkeeping for small businesses: record income and expenses, watch the
monthly cashflow trend, and get told early when spending runs ahead of
income.

DESIGN PRINCIPLES:
1. Analytics are pure functions of a ledger snapshot
2. The ledger store is injected, never global
3. Storage failures are loud, notification failures are quiet
4. Every ledger mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "KhaataKitab Team"
