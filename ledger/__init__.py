"""
Pocket Ledger - Source Package

An in-memory personal ledger engine: income and expense entries,
a running balance, category and monthly analytics, and fraud signals.

DESIGN PRINCIPLES:
1. One ledger per session, owned by the caller
2. Every mutation fully commits or leaves state untouched
3. Derived views are recomputed on read
4. Every user action is auditable
5. Rendering is someone else's job
"""

__version__ = "1.0.0"
__author__ = "Pocket Ledger Team"
