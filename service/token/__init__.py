"""토큰 잔액 관리"""

from .token_ledger import InMemoryTokenLedger, TokenLedger

__all__ = [
    "InMemoryTokenLedger",
    "TokenLedger",
]
