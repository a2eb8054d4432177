"""
입찰 / 예약 히스토리 조회

유저별 입찰 내역과 확정된 예약 목록을 계산합니다. 상태를 변경하지 않습니다.
"""
import logging
from datetime import datetime
from typing import List

from config import BIDDING
from models import Group, Individual
from service.bidding.results import ReservationSummary, UserBidSummary
from service.bidding.store import BiddingStore

logger = logging.getLogger(__name__)


class HistoryQueries:
    """히스토리 조회"""

    def __init__(self, store: BiddingStore):
        self._store = store

    def user_bid_history(
        self,
        user_id: str,
        now: datetime,
        limit: int = BIDDING.HISTORY_LIMIT
    ) -> List[UserBidSummary]:
        """
        유저 입찰 내역 (최신순)

        개인 입찰은 원장 기록에서, 그룹 입찰은 유저별 그룹 기여 기록에서 가져옵니다.

        Args:
            user_id: 유저 ID
            now: 현재 시각 (진행 중 여부 판단)
            limit: 최대 개수

        Returns:
            UserBidSummary 리스트
        """
        ledger = self._store.ledger
        bidder = Individual(user_id)
        summaries: List[UserBidSummary] = []

        for key in ledger.keys():
            is_active = not ledger.is_ended(key, now)
            current = ledger.current_bid(key)
            for entry in ledger.entries(key):
                if entry.bidder != bidder:
                    continue
                summaries.append(
                    UserBidSummary(
                        auction_key=key,
                        amount=entry.amount,
                        group_total_amount=None,
                        is_current_highest=is_active and entry.amount == current,
                        is_active=is_active,
                        is_group=False,
                        timestamp=entry.timestamp,
                    )
                )

        for record in self._store.user_group_history.get(user_id, []):
            key = record.auction_key
            is_active = not ledger.is_ended(key, now)
            summaries.append(
                UserBidSummary(
                    auction_key=key,
                    amount=record.user_amount,
                    group_total_amount=record.group_total,
                    is_current_highest=is_active and record.group_total == ledger.current_bid(key),
                    is_active=is_active,
                    is_group=True,
                    timestamp=record.timestamp,
                )
            )

        summaries.sort(key=lambda s: s.timestamp, reverse=True)
        return summaries[:limit]

    def user_reservation_history(
        self,
        user_id: str,
        now: datetime,
        limit: int = BIDDING.HISTORY_LIMIT
    ) -> List[ReservationSummary]:
        """
        유저 확정 예약 (예약일 내림차순)

        입찰이 마감되었고 차순위 제안이 진행 중이 아닌 경매에서
        낙찰 입찰이 본인 또는 본인이 속한 그룹인 경우입니다.
        """
        ledger = self._store.ledger
        results: List[ReservationSummary] = []

        for key in ledger.keys():
            if not ledger.is_ended(key, now):
                continue
            if self._store.is_in_second_chance(key):
                continue

            top = ledger.winning_entry(key)
            if top is None:
                continue

            if isinstance(top.bidder, Group):
                final_bid = self._store.find_final_group_bid(key, top.bidder, top.amount)
                if final_bid is None:
                    logger.warning(f"Missing group snapshot for {top.bidder.display_id} on {key}")
                    continue
                is_mine = any(m.user_id == user_id for m in final_bid.members)
            else:
                is_mine = top.bidder.user_id == user_id

            if is_mine:
                results.append(ReservationSummary(auction_key=key, amount=top.amount))

        results.sort(key=lambda r: r.auction_key.reservation_date, reverse=True)
        return results[:limit]
