"""
입찰 상태 저장소

하나의 BiddingService 인스턴스가 소유하는 메모리 상태입니다.
모든 엔진이 같은 저장소를 참조합니다.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from config import BIDDING
from models import AuctionKey, Bidder, FinalGroupBid, Group, PendingGroupBid, SecondChanceBid, UserGroupBidRecord
from service.bidding.auction_ledger import AuctionLedger


@dataclass
class BiddingStore:
    """입찰 엔진 공유 상태"""

    ledger: AuctionLedger = field(default_factory=AuctionLedger)
    """경매별 입찰 원장"""

    pending_groups: Dict[Tuple[AuctionKey, str], PendingGroupBid] = field(default_factory=dict)
    """(AuctionKey, 그룹장 ID) → 구성 중인 그룹"""

    final_group_bids: List[FinalGroupBid] = field(default_factory=list)
    """제출된 그룹 입찰 스냅샷 (제출 순)"""

    user_group_history: Dict[str, List[UserGroupBidRecord]] = field(default_factory=dict)
    """user_id → 그룹 입찰 기록 (최신순)"""

    second_chance_offers: Dict[Tuple[AuctionKey, str], SecondChanceBid] = field(default_factory=dict)
    """(AuctionKey, 입찰자 ID) → 1인실 차순위 제안"""

    second_chance_auctions: Set[AuctionKey] = field(default_factory=set)
    """차순위 제안 진행 중인 경매"""

    refused_second_chances: Set[Tuple[AuctionKey, str]] = field(default_factory=set)
    """차순위 제안을 거절한 (경매, 유저/그룹장) - 영구 기록"""

    forfeited_winners: Set[Tuple[AuctionKey, Bidder]] = field(default_factory=set)
    """낙찰을 스스로 취소한 (경매, 입찰자)"""

    # =========================================================================
    # 조회 헬퍼
    # =========================================================================

    def find_final_group_bid(
        self,
        key: AuctionKey,
        group: Group,
        total_amount: int
    ) -> Optional[FinalGroupBid]:
        """(경매, 그룹, 합계)가 일치하는 가장 최근 스냅샷"""
        for final_bid in reversed(self.final_group_bids):
            if (
                final_bid.key == key
                and final_bid.group == group
                and final_bid.total_amount == total_amount
            ):
                return final_bid
        return None

    def pending_group_of_member(self, key: AuctionKey, user_id: str) -> Optional[PendingGroupBid]:
        """유저가 해당 경매에서 속한 구성 중 그룹"""
        for (group_key, _), group in self.pending_groups.items():
            if group_key == key and group.has_member(user_id):
                return group
        return None

    def is_in_second_chance(self, key: AuctionKey) -> bool:
        return key in self.second_chance_auctions

    def has_refused(self, key: AuctionKey, identity: str) -> bool:
        return (key, identity) in self.refused_second_chances

    def withdraw_second_chance(self, key: AuctionKey) -> int:
        """
        경매의 대기 중인 차순위 제안(1인 제안, 차순위 그룹)을 모두 철회하고 차순위 모드 해제

        Returns:
            철회된 제안 수
        """
        offer_keys = [k for k in self.second_chance_offers if k[0] == key]
        for offer_key in offer_keys:
            del self.second_chance_offers[offer_key]

        group_keys = [
            k for k, group in self.pending_groups.items()
            if k[0] == key and group.is_second_chance
        ]
        for group_key in group_keys:
            del self.pending_groups[group_key]

        self.second_chance_auctions.discard(key)
        return len(offer_keys) + len(group_keys)

    def push_group_record(self, user_id: str, record: UserGroupBidRecord) -> None:
        history = self.user_group_history.setdefault(user_id, [])
        history.insert(0, record)
        del history[BIDDING.GROUP_HISTORY_MAX:]
