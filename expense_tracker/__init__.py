"""
Expense Tracker - Source Package

A local-first personal finance tracker: log expenses, set monthly
budgets per category, and see where the money went.

DESIGN PRINCIPLES:
1. All state lives in a local key-value store
2. Derived numbers are recomputed from scratch, never cached
3. Stored lists are replaced, never mutated in place
4. Invalid input is blocked before it reaches storage
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
