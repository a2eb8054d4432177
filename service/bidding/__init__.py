"""
입찰 서비스 모듈

1인실/그룹 입찰, 낙찰 취소와 차순위 제안, 히스토리 조회를 담당합니다.
"""
from service.bidding.bidding_service import BiddingService
from service.bidding.results import BidResult, ReservationSummary, UserBidSummary
from service.bidding.store import BiddingStore

__all__ = [
    "BiddingService",
    "BiddingStore",
    "BidResult",
    "ReservationSummary",
    "UserBidSummary",
]
