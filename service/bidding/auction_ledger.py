"""
경매 원장

경매별 입찰 기록(추가 전용), 현재 최고가, 입찰 마감 시각을 관리합니다.
"""
import itertools
import logging
from datetime import datetime, time, timedelta
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set

from config import BIDDING
from models import AuctionKey, Bidder, BidEntry

logger = logging.getLogger(__name__)


class RecentBids:
    """
    최근 입찰 조회 결과

    순회할 때마다 원장에서 다시 계산하며 (타임스탬프 내림차순, limit개) 끝납니다.
    """

    def __init__(self, ledger: "AuctionLedger", key: AuctionKey, limit: int):
        self._ledger = ledger
        self._key = key
        self._limit = max(limit, 0)

    def __iter__(self) -> Iterator[BidEntry]:
        entries = sorted(
            self._ledger.entries(self._key),
            key=lambda e: (e.timestamp, e.entry_id),
            reverse=True,
        )
        return iter(entries[: self._limit])


class AuctionLedger:
    """
    경매별 입찰 원장

    - 입찰 기록은 추가만 가능 (낙찰 취소 시에만 제거)
    - 현재 최고가는 저장하지 않고 기록에서 계산
    - 환불된 기록을 따로 추적하여 같은 입찰이 두 번 환불되지 않도록 함
    """

    def __init__(self):
        self._entries: Dict[AuctionKey, List[BidEntry]] = {}
        """AuctionKey → 입찰 기록 목록"""

        self._refunded: Set[int] = set()
        """환불 완료된 entry_id"""

        self._force_closed: Set[AuctionKey] = set()
        """운영자가 강제 마감한 경매"""

        self._sequence = itertools.count(1)

    # =========================================================================
    # 마감 시각
    # =========================================================================

    @staticmethod
    def end_time(key: AuctionKey) -> datetime:
        """입찰 마감 시각 (예약일 7일 전 00:00)"""
        close_date = key.reservation_date - timedelta(days=BIDDING.BIDDING_CLOSES_DAYS_BEFORE)
        return datetime.combine(close_date, time.min)

    @staticmethod
    def cancel_deadline(key: AuctionKey) -> datetime:
        """낙찰 취소 기한 (예약일 1일 전 00:00, 이 시각 이전까지만 가능)"""
        deadline_date = key.reservation_date - timedelta(days=BIDDING.CANCEL_DEADLINE_DAYS_BEFORE)
        return datetime.combine(deadline_date, time.min)

    def is_ended(self, key: AuctionKey, now: datetime) -> bool:
        return now >= self.end_time(key) or key in self._force_closed

    def force_close(self, key: AuctionKey) -> None:
        """운영/테스트용 강제 마감 (되돌릴 수 없음)"""
        self._force_closed.add(key)
        logger.info(f"Auction force-closed: {key}")

    # =========================================================================
    # 조회
    # =========================================================================

    def keys(self) -> List[AuctionKey]:
        return list(self._entries.keys())

    def entries(self, key: AuctionKey) -> List[BidEntry]:
        return list(self._entries.get(key, ()))

    def has_bids(self, key: AuctionKey) -> bool:
        return key in self._entries

    def current_bid(self, key: AuctionKey) -> int:
        bids = self._entries.get(key)
        if not bids:
            return 0
        return max(e.amount for e in bids)

    def highest_entry(self, key: AuctionKey) -> Optional[BidEntry]:
        """최고 금액 입찰 (동액이면 나중에 추가된 기록)"""
        return self._top(self._entries.get(key, ()))

    def winning_entry(self, key: AuctionKey) -> Optional[BidEntry]:
        """토큰이 아직 묶여 있는 입찰 중 최고 금액 입찰"""
        return self._top(e for e in self._entries.get(key, ()) if self.is_in_force(e))

    def last_entries(self, key: AuctionKey, limit: int = BIDDING.RECENT_BIDS_LIMIT) -> RecentBids:
        return RecentBids(self, key, limit)

    def is_in_force(self, entry: BidEntry) -> bool:
        return entry.entry_id not in self._refunded

    @staticmethod
    def _top(entries: Iterable[BidEntry]) -> Optional[BidEntry]:
        return max(entries, key=lambda e: (e.amount, e.entry_id), default=None)

    # =========================================================================
    # 변경
    # =========================================================================

    def append(self, key: AuctionKey, bidder: Bidder, amount: int, now: datetime) -> BidEntry:
        entry = BidEntry(
            entry_id=next(self._sequence),
            bidder=bidder,
            amount=amount,
            timestamp=now,
        )
        self._entries.setdefault(key, []).append(entry)
        return entry

    def remove(self, key: AuctionKey, entry: BidEntry) -> None:
        self._entries[key].remove(entry)

    def remove_where(self, key: AuctionKey, predicate: Callable[[BidEntry], bool]) -> int:
        """조건에 맞는 기록 제거, 제거된 개수 반환"""
        bids = self._entries.get(key)
        if not bids:
            return 0
        kept = [e for e in bids if not predicate(e)]
        removed = len(bids) - len(kept)
        bids[:] = kept
        return removed

    def mark_refunded(self, entry: BidEntry) -> None:
        self._refunded.add(entry.entry_id)

    def restore(self, entry: BidEntry) -> None:
        """차순위 수락 시 다시 토큰이 묶인 상태로 되돌림"""
        self._refunded.discard(entry.entry_id)
