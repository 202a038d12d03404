"""
BizLedger — cash-book summaries for small businesses.

Group income and expense records by week, month, quarter or year, carry the
running balance forward, and export the result.
"""

__version__ = "0.3.0"
__all__ = ["BizLedger"]

from bizledger.ledger import BizLedger  # noqa: E402
