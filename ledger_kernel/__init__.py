"""
Ledger Kernel

Read-side foundation for the financial statement engine:
- Chart of accounts, voucher and inventory records (SQLAlchemy ORM)
- Frozen DTOs and the LedgerRepository contract
- Posted-only movement aggregation over any date window
- Structured logging and typed exceptions
"""

__version__ = "0.1.0"
