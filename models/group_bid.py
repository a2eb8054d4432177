"""
그룹 입찰 모델

그룹 구성 중(PendingGroupBid)과 제출 확정(FinalGroupBid) 상태를 분리해서 관리합니다.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from models.auction import AuctionKey, Group


@dataclass
class GroupMemberBid:
    """그룹 멤버별 입찰 금액"""

    user_id: str
    amount: int


@dataclass
class PendingGroupBid:
    """
    구성 중인 그룹 입찰

    - (AuctionKey, 그룹장 ID) 당 하나만 존재
    - 참여 코드는 항상 그룹장 ID와 같음
    - 차순위 그룹(is_second_chance)은 멤버 구성과 금액이 고정됨
    """

    key: AuctionKey
    owner_id: str
    join_code: str
    capacity: int
    members: List[GroupMemberBid] = field(default_factory=list)
    is_second_chance: bool = False

    @property
    def total_amount(self) -> int:
        return sum(m.amount for m in self.members)

    @property
    def is_full(self) -> bool:
        return len(self.members) >= self.capacity

    def find_member(self, user_id: str) -> Optional[GroupMemberBid]:
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def has_member(self, user_id: str) -> bool:
        return self.find_member(user_id) is not None


@dataclass(frozen=True)
class FinalGroupBid:
    """
    제출 시점의 그룹 입찰 스냅샷

    환불 계산과 차순위 그룹 재구성에 사용됩니다.
    같은 그룹이 여러 번 제출할 수 있으므로 (그룹, 합계)로 구분합니다.
    """

    key: AuctionKey
    group: Group
    members: Tuple[GroupMemberBid, ...]
    total_amount: int

    @property
    def group_id(self) -> str:
        return self.group.display_id


@dataclass(frozen=True)
class UserGroupBidRecord:
    """유저별 그룹 입찰 기여 기록"""

    auction_key: AuctionKey
    user_amount: int
    group_total: int
    timestamp: datetime
