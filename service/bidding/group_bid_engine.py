"""
그룹 입찰 엔진

다인실 경매에서 여러 멤버가 금액을 모아 하나의 입찰로 제출합니다.

상태 흐름 (AuctionKey, 그룹장 ID 단위):
    start → 구성 중 ─ join / update ─┐
                 │ ←───────────────────┘
                 ├─ submit → 확정 (원장 기록 + 스냅샷)
                 └─ cancel → 삭제 (차순위 그룹이면 다음 그룹에 연쇄 제안)
"""
import logging
from datetime import datetime
from typing import List, Optional

from config import BIDDING
from exceptions import (
    AlreadyGroupMemberError,
    AuctionAlreadyEndedError,
    BidTooLowError,
    GroupAlreadyExistsError,
    GroupFullError,
    GroupNotFoundError,
    InsufficientTokensError,
    InvalidBidAmountError,
    InvalidGroupTotalError,
    NotGroupMemberError,
    NotGroupOwnerError,
    RoomCapacityMismatchError,
    SecondChanceGroupLockedError,
)
from models import (
    AuctionKey,
    FinalGroupBid,
    Group,
    GroupMemberBid,
    PendingGroupBid,
    UserGroupBidRecord,
)
from service.bidding.refunds import RefundProcessor
from service.bidding.second_chance_engine import SecondChanceEngine
from service.bidding.store import BiddingStore
from service.token.token_ledger import TokenLedger

logger = logging.getLogger(__name__)


class GroupBidEngine:
    """다인실 그룹 입찰"""

    def __init__(
        self,
        store: BiddingStore,
        tokens: TokenLedger,
        refunds: RefundProcessor,
        second_chance: SecondChanceEngine
    ):
        self._store = store
        self._tokens = tokens
        self._refunds = refunds
        self._second_chance = second_chance

    # =========================================================================
    # 구성 (Forming)
    # =========================================================================

    def start_group_bid(
        self,
        key: AuctionKey,
        owner_id: str,
        amount: int,
        now: datetime
    ) -> PendingGroupBid:
        """
        그룹 생성 (그룹장이 첫 멤버)

        참여 코드는 그룹장 ID와 같습니다. 그룹장 권한 확인과 참여 공유에
        같은 값을 쓰는 것은 의도된 설계입니다.

        Raises:
            RoomCapacityMismatchError: 1인실
            InvalidBidAmountError: 0 이하 금액
            AuctionAlreadyEndedError: 입찰 마감
            GroupAlreadyExistsError: 이미 만든 그룹 있음
            AlreadyGroupMemberError: 다른 그룹에 참여 중
        """
        if key.capacity <= BIDDING.SINGLE_ROOM_CAPACITY:
            raise RoomCapacityMismatchError(key.capacity, "그룹 입찰은 다인실에서만 가능합니다.")

        if amount <= 0:
            raise InvalidBidAmountError(amount)

        if self._store.ledger.is_ended(key, now):
            raise AuctionAlreadyEndedError()

        if (key, owner_id) in self._store.pending_groups:
            raise GroupAlreadyExistsError(owner_id)

        if self._store.pending_group_of_member(key, owner_id) is not None:
            raise AlreadyGroupMemberError(owner_id, "이미 이 예약의 다른 그룹에 참여 중입니다.")

        group = PendingGroupBid(
            key=key,
            owner_id=owner_id,
            join_code=owner_id,
            capacity=key.capacity,
            members=[GroupMemberBid(owner_id, amount)],
        )
        self._store.pending_groups[(key, owner_id)] = group

        logger.info(f"User {owner_id} started group bid on {key} with {amount} tokens")
        return group

    def join_group_bid(
        self,
        key: AuctionKey,
        join_code: str,
        user_id: str,
        amount: int
    ) -> PendingGroupBid:
        """
        그룹 참여

        Raises:
            InvalidBidAmountError: 0 이하 금액
            GroupNotFoundError: 그룹 없음
            SecondChanceGroupLockedError: 차순위 그룹
            AlreadyGroupMemberError: 이미 멤버 (금액 변경은 update 사용)
            GroupFullError: 정원 초과
        """
        if amount <= 0:
            raise InvalidBidAmountError(amount)

        group = self._get_group(key, join_code)

        if group.is_second_chance:
            raise SecondChanceGroupLockedError("차순위 그룹에는 참여할 수 없습니다.")

        if group.has_member(user_id):
            raise AlreadyGroupMemberError(user_id)

        if self._store.pending_group_of_member(key, user_id) is not None:
            raise AlreadyGroupMemberError(user_id, "이미 이 예약의 다른 그룹에 참여 중입니다.")

        if group.is_full:
            raise GroupFullError(group.capacity)

        group.members.append(GroupMemberBid(user_id, amount))

        logger.info(
            f"User {user_id} joined group {join_code} on {key} with {amount} tokens "
            f"({len(group.members)}/{group.capacity})"
        )
        return group

    def update_group_member_bid(
        self,
        key: AuctionKey,
        join_code: str,
        user_id: str,
        new_amount: int
    ) -> PendingGroupBid:
        """
        멤버 입찰 금액 변경

        Raises:
            InvalidBidAmountError: 0 이하 금액
            GroupNotFoundError: 그룹 없음
            SecondChanceGroupLockedError: 차순위 그룹
            NotGroupMemberError: 멤버 아님
        """
        if new_amount <= 0:
            raise InvalidBidAmountError(new_amount)

        group = self._get_group(key, join_code)

        if group.is_second_chance:
            raise SecondChanceGroupLockedError(
                "차순위 그룹의 입찰 금액은 변경할 수 없습니다. 제출하거나 취소하세요."
            )

        member = group.find_member(user_id)
        if member is None:
            raise NotGroupMemberError(user_id)

        member.amount = new_amount

        logger.info(f"User {user_id} changed bid in group {join_code} on {key} to {new_amount} tokens")
        return group

    def cancel_group_bid(self, key: AuctionKey, join_code: str, requester_id: str) -> None:
        """
        그룹 취소 (그룹장만)

        차순위 그룹을 취소하면 거절로 기록하고 다음 순위 그룹에 제안합니다.

        Raises:
            GroupNotFoundError: 그룹 없음
            NotGroupOwnerError: 그룹장 아님
        """
        group = self._get_group(key, join_code)

        if group.owner_id != requester_id:
            raise NotGroupOwnerError("취소")

        del self._store.pending_groups[(key, join_code)]

        logger.info(f"Group {join_code} on {key} cancelled by owner")

        if not group.is_second_chance:
            return

        self._store.refused_second_chances.add((key, group.owner_id))
        if not self._second_chance.offer_next_group_second_chance(key):
            self._store.second_chance_auctions.discard(key)

    # =========================================================================
    # 제출 (Finalize)
    # =========================================================================

    def submit_group_bid(
        self,
        key: AuctionKey,
        join_code: str,
        requester_id: str,
        now: datetime
    ) -> int:
        """
        그룹 입찰 제출

        Args:
            key: 경매
            join_code: 참여 코드 (그룹장 ID)
            requester_id: 요청자 ID
            now: 현재 시각

        Returns:
            새 현재 입찰가 (그룹 합계)

        Raises:
            GroupNotFoundError: 그룹 없음
            NotGroupOwnerError: 그룹장 아님
            AuctionAlreadyEndedError: 입찰 마감
            InvalidGroupTotalError: 합계 0 이하
            BidTooLowError: 합계가 현재가 이하 (일반 그룹)
            InsufficientTokensError: 멤버 토큰 부족
            GroupDetailsNotFoundError: 기존 낙찰 그룹 스냅샷 없음
        """
        group = self._get_group(key, join_code)
        ledger = self._store.ledger

        if group.owner_id != requester_id:
            raise NotGroupOwnerError("제출")

        if ledger.is_ended(key, now):
            raise AuctionAlreadyEndedError()

        total = group.total_amount
        if total <= 0:
            raise InvalidGroupTotalError(total)

        # 차순위 그룹은 기존 낙찰 금액 그대로 재확정
        if not group.is_second_chance:
            current_bid = ledger.current_bid(key)
            if total <= current_bid:
                raise BidTooLowError(current_bid, total)

        for member in group.members:
            balance = self._tokens.get_balance(member.user_id)
            if balance < member.amount:
                raise InsufficientTokensError(member.user_id, member.amount, balance)

        refund_plan = self._refunds.plan_outbid_refund(key)

        # Mutation: (일반 그룹) 차순위 제안 철회 → 기존 낙찰 환불 → 멤버 차감 → 기록 → 스냅샷 → 히스토리
        if not group.is_second_chance and self._store.is_in_second_chance(key):
            withdrawn = self._store.withdraw_second_chance(key)
            logger.info(f"Withdrew {withdrawn} second chance offer(s) on {key} after new group bid")

        self._refunds.apply(refund_plan)

        for member in group.members:
            self._tokens.adjust_balance(member.user_id, -member.amount)

        bidder = Group(group.owner_id)
        ledger.append(key, bidder, total, now)

        self._store.final_group_bids.append(
            FinalGroupBid(
                key=key,
                group=bidder,
                members=tuple(GroupMemberBid(m.user_id, m.amount) for m in group.members),
                total_amount=total,
            )
        )

        for member in group.members:
            self._store.push_group_record(
                member.user_id,
                UserGroupBidRecord(
                    auction_key=key,
                    user_amount=member.amount,
                    group_total=total,
                    timestamp=now,
                ),
            )

        del self._store.pending_groups[(key, join_code)]

        if group.is_second_chance:
            self._store.second_chance_auctions.discard(key)

        logger.info(
            f"Group {bidder.display_id} submitted {total} tokens on {key} "
            f"({len(group.members)} members)"
        )
        return total

    # =========================================================================
    # 조회 (Query)
    # =========================================================================

    def get_pending_group(self, key: AuctionKey, join_code: str) -> Optional[PendingGroupBid]:
        return self._store.pending_groups.get((key, join_code))

    def pending_groups_for_user(self, user_id: str) -> List[PendingGroupBid]:
        """유저가 멤버로 속한 구성 중 그룹"""
        return [
            group for group in self._store.pending_groups.values()
            if group.has_member(user_id)
        ]

    def _get_group(self, key: AuctionKey, join_code: str) -> PendingGroupBid:
        group = self._store.pending_groups.get((key, join_code))
        if group is None:
            raise GroupNotFoundError(join_code)
        return group
