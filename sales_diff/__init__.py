"""Sales ledger snapshot comparer.

Compares a baseline and an updated spreadsheet export of the sales ledger and
reports rows added, removed, and modified (tracked fields only).
"""

__version__ = "0.1.0"
