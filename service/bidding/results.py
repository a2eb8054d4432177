"""입찰 서비스 응답 / 조회 결과"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models import AuctionKey


@dataclass(frozen=True)
class BidResult:
    """입찰 작업 결과"""
    success: bool
    reason: Optional[str] = None
    new_current_bid: Optional[int] = None

    @classmethod
    def ok(cls, new_current_bid: Optional[int] = None) -> "BidResult":
        return cls(success=True, new_current_bid=new_current_bid)

    @classmethod
    def fail(cls, reason: str) -> "BidResult":
        return cls(success=False, reason=reason)


@dataclass(frozen=True)
class UserBidSummary:
    """유저 입찰 히스토리 항목"""
    auction_key: AuctionKey
    amount: int
    group_total_amount: Optional[int]
    is_current_highest: bool
    is_active: bool
    is_group: bool
    timestamp: datetime


@dataclass(frozen=True)
class ReservationSummary:
    """확정된 예약"""
    auction_key: AuctionKey
    amount: int
