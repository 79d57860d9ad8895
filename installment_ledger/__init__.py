"""
Installment Ledger - Source Package

Bookkeeping core for an installment-sales intermediary: customers,
installment plans, payments, and a multi-safe cash ledger.

DESIGN PRINCIPLES:
1. Plan balances and the treasury must always agree
2. Treasury balances are recomputed, never stored
3. Rejected operations write nothing
4. Deleting history never rewrites the treasury
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Installment Ledger Team"
