"""
환불 처리

상회 입찰 시 기존 낙찰자 전액 환불과 낙찰 취소 시 부분 환불 계산을 담당합니다.
환불 대상 계산(plan)은 상태를 바꾸지 않으므로 검증 단계에서 먼저 수행합니다.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from config import BIDDING
from exceptions import GroupDetailsNotFoundError
from models import AuctionKey, BidEntry, Group
from service.bidding.store import BiddingStore
from service.token.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


def cancellation_refund(amount: int) -> int:
    """낙찰 취소 환불액 (50%, 내림)"""
    return amount * BIDDING.CANCEL_REFUND_PERCENT // 100


@dataclass(frozen=True)
class RefundPlan:
    """환불 대상 입찰과 유저별 환불액"""

    entry: Optional[BidEntry]
    credits: Tuple[Tuple[str, int], ...] = ()


class RefundProcessor:
    """상회 입찰 환불"""

    def __init__(self, store: BiddingStore, tokens: TokenLedger):
        self._store = store
        self._tokens = tokens

    def plan_outbid_refund(self, key: AuctionKey) -> RefundPlan:
        """
        현재 낙찰 입찰의 환불 계획

        - 개인: 입찰 금액 전액
        - 그룹: 제출 스냅샷의 멤버별 기여분

        Raises:
            GroupDetailsNotFoundError: 그룹 스냅샷을 찾지 못한 경우
        """
        winner = self._store.ledger.winning_entry(key)
        if winner is None:
            return RefundPlan(entry=None)

        if isinstance(winner.bidder, Group):
            final_bid = self._store.find_final_group_bid(key, winner.bidder, winner.amount)
            if final_bid is None:
                logger.warning(
                    f"Missing group snapshot for {winner.bidder.display_id} "
                    f"({winner.amount} tokens) on {key}"
                )
                raise GroupDetailsNotFoundError(winner.bidder.display_id)
            credits = tuple((m.user_id, m.amount) for m in final_bid.members)
        else:
            credits = ((winner.bidder.user_id, winner.amount),)

        return RefundPlan(entry=winner, credits=credits)

    def apply(self, plan: RefundPlan) -> None:
        if plan.entry is None:
            return

        for user_id, amount in plan.credits:
            self._tokens.adjust_balance(user_id, amount)
        self._store.ledger.mark_refunded(plan.entry)

        logger.info(
            f"Refunded {plan.entry.amount} tokens to {plan.entry.bidder.display_id} "
            f"({len(plan.credits)} account(s))"
        )
