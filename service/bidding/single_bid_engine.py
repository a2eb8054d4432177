"""
1인실 입찰 엔진

정원 1인 경매의 개인 입찰을 검증하고 기록합니다.
"""
import logging
from datetime import datetime

from config import BIDDING
from exceptions import (
    AuctionAlreadyEndedError,
    BidTooLowError,
    InsufficientTokensError,
    InvalidBidAmountError,
    RoomCapacityMismatchError,
)
from models import AuctionKey, Individual
from service.bidding.refunds import RefundProcessor
from service.bidding.store import BiddingStore
from service.token.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


class SingleBidEngine:
    """1인실 입찰"""

    def __init__(self, store: BiddingStore, tokens: TokenLedger, refunds: RefundProcessor):
        self._store = store
        self._tokens = tokens
        self._refunds = refunds

    def place_single_bid(
        self,
        key: AuctionKey,
        bidder_id: str,
        amount: int,
        now: datetime
    ) -> int:
        """
        1인실 입찰

        Args:
            key: 경매
            bidder_id: 입찰자 ID
            amount: 입찰 금액
            now: 현재 시각

        Returns:
            새 현재 입찰가

        Raises:
            RoomCapacityMismatchError: 1인실이 아님
            AuctionAlreadyEndedError: 입찰 마감
            InvalidBidAmountError: 0 이하 금액
            BidTooLowError: 현재가 이하
            InsufficientTokensError: 토큰 부족
            GroupDetailsNotFoundError: 기존 낙찰 그룹 스냅샷 없음
        """
        ledger = self._store.ledger

        # Guard: 검증 실패 시 상태 변경 없음
        if key.capacity != BIDDING.SINGLE_ROOM_CAPACITY:
            raise RoomCapacityMismatchError(key.capacity, "1인실이 아닙니다.")

        if ledger.is_ended(key, now):
            raise AuctionAlreadyEndedError()

        if amount <= 0:
            raise InvalidBidAmountError(amount)

        current_bid = ledger.current_bid(key)
        if amount <= current_bid:
            raise BidTooLowError(current_bid, amount)

        balance = self._tokens.get_balance(bidder_id)
        if balance < amount:
            raise InsufficientTokensError(bidder_id, amount, balance)

        refund_plan = self._refunds.plan_outbid_refund(key)

        # Mutation: 차순위 제안 철회 → 기존 낙찰 환불 → 신규 차감 → 기록
        if self._store.is_in_second_chance(key):
            withdrawn = self._store.withdraw_second_chance(key)
            logger.info(f"Withdrew {withdrawn} second chance offer(s) on {key} after new bid")

        self._refunds.apply(refund_plan)
        self._tokens.adjust_balance(bidder_id, -amount)
        ledger.append(key, Individual(bidder_id), amount, now)

        logger.info(f"User {bidder_id} bid {amount} tokens on {key}")

        return amount
