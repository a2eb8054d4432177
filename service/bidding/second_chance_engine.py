"""
차순위 제안 엔진

낙찰자가 확정된 예약을 취소하면 다음 순위 입찰자(또는 그룹)에게 같은 금액으로 예약을 제안합니다.
제안을 거절한 유저/그룹장은 해당 경매에서 다시 제안받지 않습니다.
"""
import logging
from datetime import datetime
from typing import List, Optional

from config import BIDDING
from exceptions import (
    CancellationDeadlinePassedError,
    GroupDetailsNotFoundError,
    InsufficientTokensError,
    NoBidsFoundError,
    NotCurrentWinnerError,
    RoomCapacityMismatchError,
    SecondChanceOfferNotFoundError,
)
from models import AuctionKey, BidEntry, Group, GroupMemberBid, Individual, PendingGroupBid, SecondChanceBid
from service.bidding.refunds import cancellation_refund
from service.bidding.store import BiddingStore
from service.token.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


class SecondChanceEngine:
    """낙찰 취소 및 차순위 제안"""

    def __init__(self, store: BiddingStore, tokens: TokenLedger):
        self._store = store
        self._tokens = tokens

    # =========================================================================
    # 1인실 낙찰 취소
    # =========================================================================

    def cancel_reservation_for_user(
        self,
        key: AuctionKey,
        user_id: str,
        amount: int,
        now: datetime
    ) -> None:
        """
        1인실 낙찰 취소

        Args:
            key: 경매
            user_id: 낙찰자 ID
            amount: 낙찰 금액 (현재 낙찰 입찰과 정확히 일치해야 함)
            now: 현재 시각

        Raises:
            RoomCapacityMismatchError: 1인실이 아님
            CancellationDeadlinePassedError: 예약일 하루 전 이후
            NoBidsFoundError: 입찰 기록 없음
            NotCurrentWinnerError: 현재 낙찰자가 아님
        """
        ledger = self._store.ledger

        if key.capacity != BIDDING.SINGLE_ROOM_CAPACITY:
            raise RoomCapacityMismatchError(
                key.capacity, "차순위 제안이 있는 취소는 1인실에서만 가능합니다."
            )

        self._check_cancel_deadline(key, now)

        if not ledger.has_bids(key):
            raise NoBidsFoundError()

        top = ledger.winning_entry(key)
        if top is None:
            raise NotCurrentWinnerError("낙찰된 입찰이 없습니다.")

        canceller = Individual(user_id)
        if top.bidder != canceller or top.amount != amount:
            raise NotCurrentWinnerError()

        # 50% 환불
        refund = cancellation_refund(amount)
        if refund > 0:
            self._tokens.adjust_balance(user_id, refund)

        # 취소자의 1인 입찰 기록 전부 제거
        ledger.remove_where(key, lambda e: e.bidder == canceller)
        self._store.second_chance_auctions.add(key)

        logger.info(f"User {user_id} cancelled reservation {key} (refund {refund} tokens)")

        if not self._offer_next_single(key):
            self._store.second_chance_auctions.discard(key)

    # =========================================================================
    # 그룹실 낙찰 취소
    # =========================================================================

    def cancel_group_reservation_for_owner(
        self,
        key: AuctionKey,
        owner_id: str,
        now: datetime
    ) -> None:
        """
        그룹실 낙찰 취소 (그룹장만 가능)

        Args:
            key: 경매
            owner_id: 낙찰 그룹의 그룹장 ID
            now: 현재 시각

        Raises:
            RoomCapacityMismatchError: 다인실이 아님
            CancellationDeadlinePassedError: 예약일 하루 전 이후
            NoBidsFoundError: 입찰 기록 없음
            NotCurrentWinnerError: 낙찰 그룹장이 아님
            GroupDetailsNotFoundError: 그룹 스냅샷 없음
        """
        ledger = self._store.ledger

        if key.capacity <= BIDDING.SINGLE_ROOM_CAPACITY:
            raise RoomCapacityMismatchError(
                key.capacity, "그룹 예약 취소는 다인실에서만 가능합니다."
            )

        self._check_cancel_deadline(key, now)

        if not ledger.has_bids(key):
            raise NoBidsFoundError()

        top = ledger.winning_entry(key)
        if top is None:
            raise NotCurrentWinnerError("낙찰된 입찰이 없습니다.")

        group = Group(owner_id)
        if top.bidder != group:
            raise NotCurrentWinnerError("이 예약의 현재 낙찰 그룹장이 아닙니다.")

        final_bid = self._store.find_final_group_bid(key, group, top.amount)
        if final_bid is None:
            logger.warning(f"Missing group snapshot for {group.display_id} on {key}")
            raise GroupDetailsNotFoundError(group.display_id)

        # 멤버별 기여분의 50% 환불
        for member in final_bid.members:
            refund = cancellation_refund(member.amount)
            if refund > 0:
                self._tokens.adjust_balance(member.user_id, refund)

        ledger.remove(key, top)
        self._store.forfeited_winners.add((key, group))
        self._store.second_chance_auctions.add(key)

        logger.info(f"Group {group.display_id} cancelled reservation {key}")

        if not self.offer_next_group_second_chance(key):
            self._store.second_chance_auctions.discard(key)

    def offer_next_group_second_chance(self, key: AuctionKey) -> bool:
        """
        다음 순위 그룹에 차순위 제안

        거절/취소 이력이 없는 그룹 중 최고 금액 그룹의 스냅샷으로
        차순위 그룹(is_second_chance=True)을 다시 구성합니다.

        Returns:
            제안 생성 여부
        """
        candidate = self._best_candidate(key, group=True)
        if candidate is None:
            return False

        group = candidate.bidder
        final_bid = self._store.find_final_group_bid(key, group, candidate.amount)
        if final_bid is None:
            logger.warning(f"Missing group snapshot for {group.display_id} on {key}")
            return False

        pending = PendingGroupBid(
            key=key,
            owner_id=group.owner_id,
            join_code=group.owner_id,
            capacity=key.capacity,
            members=[GroupMemberBid(m.user_id, m.amount) for m in final_bid.members],
            is_second_chance=True,
        )
        self._store.pending_groups[(key, group.owner_id)] = pending
        self._store.second_chance_auctions.add(key)

        logger.info(
            f"Offered second chance on {key} to group {group.display_id} "
            f"({candidate.amount} tokens)"
        )
        return True

    # =========================================================================
    # 1인실 제안 수락 / 거절
    # =========================================================================

    def submit_second_chance_bid(self, key: AuctionKey, user_id: str) -> int:
        """
        차순위 제안 수락

        Returns:
            지불한 토큰

        Raises:
            SecondChanceOfferNotFoundError: 제안 없음
            InsufficientTokensError: 토큰 부족
        """
        offer = self._store.second_chance_offers.get((key, user_id))
        if offer is None:
            raise SecondChanceOfferNotFoundError(user_id)

        balance = self._tokens.get_balance(user_id)
        if balance < offer.amount:
            raise InsufficientTokensError(user_id, offer.amount, balance)

        self._tokens.adjust_balance(user_id, -offer.amount)

        entry = self._offered_entry(offer)
        if entry is not None:
            self._store.ledger.restore(entry)

        del self._store.second_chance_offers[(key, user_id)]
        self._store.second_chance_auctions.discard(key)

        logger.info(f"User {user_id} accepted second chance on {key} ({offer.amount} tokens)")
        return offer.amount

    def cancel_second_chance_bid(self, key: AuctionKey, user_id: str) -> None:
        """
        차순위 제안 거절 후 다음 순위로 연쇄 제안

        Raises:
            SecondChanceOfferNotFoundError: 제안 없음
        """
        if (key, user_id) not in self._store.second_chance_offers:
            raise SecondChanceOfferNotFoundError(user_id)

        del self._store.second_chance_offers[(key, user_id)]
        self._store.refused_second_chances.add((key, user_id))

        logger.info(f"User {user_id} refused second chance on {key}")

        if not self._offer_next_single(key):
            self._store.second_chance_auctions.discard(key)

    def second_chance_bids_for_user(self, user_id: str) -> List[SecondChanceBid]:
        return [
            offer for (_, bidder_id), offer in self._store.second_chance_offers.items()
            if bidder_id == user_id
        ]

    # =========================================================================
    # 내부 헬퍼
    # =========================================================================

    def _check_cancel_deadline(self, key: AuctionKey, now: datetime) -> None:
        if now >= self._store.ledger.cancel_deadline(key):
            raise CancellationDeadlinePassedError()

    def _best_candidate(self, key: AuctionKey, group: bool) -> Optional[BidEntry]:
        """거절/취소 이력 없는 최고 금액 입찰"""
        best = None
        for entry in self._store.ledger.entries(key):
            bidder = entry.bidder
            if bidder.is_group != group:
                continue
            identity = bidder.owner_id if group else bidder.user_id
            if self._store.has_refused(key, identity):
                continue
            if (key, bidder) in self._store.forfeited_winners:
                continue
            if best is None or (entry.amount, entry.entry_id) > (best.amount, best.entry_id):
                best = entry
        return best

    def _offer_next_single(self, key: AuctionKey) -> bool:
        candidate = self._best_candidate(key, group=False)
        if candidate is None:
            return False

        bidder_id = candidate.bidder.user_id
        self._store.second_chance_offers[(key, bidder_id)] = SecondChanceBid(
            key=key,
            bidder_id=bidder_id,
            amount=candidate.amount,
        )
        self._store.second_chance_auctions.add(key)

        logger.info(f"Offered second chance on {key} to {bidder_id} ({candidate.amount} tokens)")
        return True

    def _offered_entry(self, offer: SecondChanceBid) -> Optional[BidEntry]:
        bidder = Individual(offer.bidder_id)
        matches = [
            e for e in self._store.ledger.entries(offer.key)
            if e.bidder == bidder and e.amount == offer.amount
        ]
        return max(matches, key=lambda e: e.entry_id, default=None)
