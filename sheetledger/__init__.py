"""
SheetLedger - Source Package

A shared household ledger that keeps all of its data in one Google
Sheets spreadsheet per ledger.

DESIGN PRINCIPLES:
1. The spreadsheet is the only store - no database, no cache
2. Every request authenticates and reads fresh
3. Fail visibly: missing input is 400, bad credentials 401, Sheets errors 500
4. Aggregation is pure and runs on already-fetched records
"""

__version__ = "1.0.0"
__author__ = "SheetLedger Team"
