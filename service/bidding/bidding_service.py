"""
입찰 서비스

1인실 입찰, 그룹 입찰, 차순위 제안, 히스토리 조회를 하나의 인스턴스로 묶습니다.

- 인스턴스마다 자체 저장소를 소유 (전역 상태 없음, 테스트마다 새 인스턴스)
- 상태를 바꾸는 작업은 하나의 asyncio.Lock 아래에서 한 번에 하나씩 실행
- 비즈니스 규칙 위반은 예외 대신 BidResult 실패 응답으로 반환
"""
import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional

from config import BIDDING
from exceptions import BidForStudyError
from models import AuctionKey, BidEntry, PendingGroupBid, SecondChanceBid
from service.bidding.auction_ledger import RecentBids
from service.bidding.group_bid_engine import GroupBidEngine
from service.bidding.history_queries import HistoryQueries
from service.bidding.refunds import RefundProcessor
from service.bidding.results import BidResult, ReservationSummary, UserBidSummary
from service.bidding.second_chance_engine import SecondChanceEngine
from service.bidding.single_bid_engine import SingleBidEngine
from service.bidding.store import BiddingStore
from service.token.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now()


class BiddingService:
    """
    스터디룸 예약 입찰 서비스

    Example:
        >>> tokens = InMemoryTokenLedger()
        >>> tokens.register_user("alice")
        >>> service = BiddingService(tokens)
        >>> result = await service.place_single_bid(key, "alice", 50, now=now)
        >>> result.new_current_bid
        50
    """

    def __init__(self, tokens: TokenLedger, store: Optional[BiddingStore] = None):
        self._tokens = tokens
        self._store = store if store is not None else BiddingStore()

        self._lock = asyncio.Lock()
        """상태 변경 작업 직렬화용 Lock"""

        refunds = RefundProcessor(self._store, tokens)
        self._single = SingleBidEngine(self._store, tokens, refunds)
        self._second_chance = SecondChanceEngine(self._store, tokens)
        self._group = GroupBidEngine(self._store, tokens, refunds, self._second_chance)
        self._history = HistoryQueries(self._store)

        logger.info("BiddingService initialized")

    @property
    def store(self) -> BiddingStore:
        return self._store

    @property
    def tokens(self) -> TokenLedger:
        return self._tokens

    async def _run(self, action: str, operation: Callable[[], Optional[int]]) -> BidResult:
        """Lock 아래에서 작업 실행 후 결과 변환"""
        async with self._lock:
            try:
                new_current_bid = operation()
            except BidForStudyError as e:
                logger.info(f"{action} rejected: {e.message}")
                return BidResult.fail(e.message)
        return BidResult.ok(new_current_bid)

    # =========================================================================
    # 1인실 입찰
    # =========================================================================

    async def place_single_bid(
        self,
        key: AuctionKey,
        bidder_id: str,
        amount: int,
        now: Optional[datetime] = None
    ) -> BidResult:
        return await self._run(
            "place_single_bid",
            lambda: self._single.place_single_bid(key, bidder_id, amount, _now(now)),
        )

    # =========================================================================
    # 그룹 입찰
    # =========================================================================

    async def start_group_bid(
        self,
        key: AuctionKey,
        owner_id: str,
        amount: int,
        now: Optional[datetime] = None
    ) -> BidResult:
        def operation():
            self._group.start_group_bid(key, owner_id, amount, _now(now))

        return await self._run("start_group_bid", operation)

    async def join_group_bid(
        self,
        key: AuctionKey,
        join_code: str,
        user_id: str,
        amount: int
    ) -> BidResult:
        def operation():
            self._group.join_group_bid(key, join_code, user_id, amount)

        return await self._run("join_group_bid", operation)

    async def update_group_member_bid(
        self,
        key: AuctionKey,
        join_code: str,
        user_id: str,
        new_amount: int
    ) -> BidResult:
        def operation():
            self._group.update_group_member_bid(key, join_code, user_id, new_amount)

        return await self._run("update_group_member_bid", operation)

    async def cancel_group_bid(self, key: AuctionKey, join_code: str, requester_id: str) -> BidResult:
        return await self._run(
            "cancel_group_bid",
            lambda: self._group.cancel_group_bid(key, join_code, requester_id),
        )

    async def submit_group_bid(
        self,
        key: AuctionKey,
        join_code: str,
        requester_id: str,
        now: Optional[datetime] = None
    ) -> BidResult:
        return await self._run(
            "submit_group_bid",
            lambda: self._group.submit_group_bid(key, join_code, requester_id, _now(now)),
        )

    # =========================================================================
    # 낙찰 취소 / 차순위 제안
    # =========================================================================

    async def cancel_reservation_for_user(
        self,
        key: AuctionKey,
        user_id: str,
        amount: int,
        now: Optional[datetime] = None
    ) -> BidResult:
        return await self._run(
            "cancel_reservation_for_user",
            lambda: self._second_chance.cancel_reservation_for_user(key, user_id, amount, _now(now)),
        )

    async def cancel_group_reservation_for_owner(
        self,
        key: AuctionKey,
        owner_id: str,
        now: Optional[datetime] = None
    ) -> BidResult:
        return await self._run(
            "cancel_group_reservation_for_owner",
            lambda: self._second_chance.cancel_group_reservation_for_owner(key, owner_id, _now(now)),
        )

    async def submit_second_chance_bid(self, key: AuctionKey, user_id: str) -> BidResult:
        def operation():
            self._second_chance.submit_second_chance_bid(key, user_id)

        return await self._run("submit_second_chance_bid", operation)

    async def cancel_second_chance_bid(self, key: AuctionKey, user_id: str) -> BidResult:
        return await self._run(
            "cancel_second_chance_bid",
            lambda: self._second_chance.cancel_second_chance_bid(key, user_id),
        )

    # =========================================================================
    # 운영
    # =========================================================================

    def force_close_auction(self, key: AuctionKey) -> None:
        """운영/테스트용 즉시 마감"""
        self._store.ledger.force_close(key)

    # =========================================================================
    # 조회 (Query)
    # =========================================================================

    def current_bid(self, key: AuctionKey) -> int:
        return self._store.ledger.current_bid(key)

    def highest_entry(self, key: AuctionKey) -> Optional[BidEntry]:
        return self._store.ledger.highest_entry(key)

    def last_bids(self, key: AuctionKey, limit: int = BIDDING.RECENT_BIDS_LIMIT) -> RecentBids:
        return self._store.ledger.last_entries(key, limit)

    def is_auction_ended(self, key: AuctionKey, now: Optional[datetime] = None) -> bool:
        return self._store.ledger.is_ended(key, _now(now))

    def get_pending_group(self, key: AuctionKey, join_code: str) -> Optional[PendingGroupBid]:
        return self._group.get_pending_group(key, join_code)

    def pending_groups_for_user(self, user_id: str) -> List[PendingGroupBid]:
        return self._group.pending_groups_for_user(user_id)

    def second_chance_bids_for_user(self, user_id: str) -> List[SecondChanceBid]:
        return self._second_chance.second_chance_bids_for_user(user_id)

    def is_in_second_chance(self, key: AuctionKey) -> bool:
        return self._store.is_in_second_chance(key)

    def has_refused(self, key: AuctionKey, user_id: str) -> bool:
        return self._store.has_refused(key, user_id)

    def user_bid_history(
        self,
        user_id: str,
        limit: int = BIDDING.HISTORY_LIMIT,
        now: Optional[datetime] = None
    ) -> List[UserBidSummary]:
        return self._history.user_bid_history(user_id, _now(now), limit)

    def user_reservation_history(
        self,
        user_id: str,
        limit: int = BIDDING.HISTORY_LIMIT,
        now: Optional[datetime] = None
    ) -> List[ReservationSummary]:
        return self._history.user_reservation_history(user_id, _now(now), limit)
