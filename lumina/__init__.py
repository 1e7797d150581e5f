"""
Lumina Ledger - Source Package

A local personal finance ledger: record income and expense transactions,
derive monthly and all-time statistics, and move the whole ledger between
devices with a copy-pasted sync token.

DESIGN PRINCIPLES:
1. The transaction store is the only source of truth
2. Statistics are always derived, never stored
3. Every mutation is persisted immediately
4. A failed sync never touches existing data
"""

__version__ = "0.1.0"
__author__ = "Lumina Finance Team"
