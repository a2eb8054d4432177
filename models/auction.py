"""
경매 모델

경매 식별자(AuctionKey), 입찰자(Individual | Group), 입찰 기록(BidEntry)을 정의합니다.
모두 불변 값 객체이며 dict 키로 사용됩니다.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

GROUP_ID_PREFIX = "group:"


@dataclass(frozen=True)
class AuctionKey:
    """
    경매 식별자

    (방 번호, 정원, 시간대, 예약일) 조합이 하나의 경매입니다.
    첫 입찰 시점에 원장에 등장하며 별도로 생성하지 않습니다.
    """

    room_number: str
    """방 번호"""

    capacity: int
    """정원 (1이면 1인실, 2 이상이면 그룹실)"""

    time_range: str
    """시간대 라벨 (예: "10:00-12:00")"""

    reservation_date: date
    """예약일"""

    def __str__(self) -> str:
        return (
            f"Room {self.room_number} ({self.capacity}인) "
            f"{self.reservation_date.isoformat()} {self.time_range}"
        )


@dataclass(frozen=True)
class Individual:
    """개인 입찰자"""

    user_id: str

    @property
    def is_group(self) -> bool:
        return False

    @property
    def display_id(self) -> str:
        return self.user_id


@dataclass(frozen=True)
class Group:
    """그룹 입찰자 (그룹장 ID로 식별)"""

    owner_id: str

    @property
    def is_group(self) -> bool:
        return True

    @property
    def display_id(self) -> str:
        """표시용 그룹 ID (파싱하지 않음)"""
        return f"{GROUP_ID_PREFIX}{self.owner_id}"


Bidder = Union[Individual, Group]


@dataclass(frozen=True)
class BidEntry:
    """
    입찰 기록

    - 원장에 추가만 되고 수정되지 않음
    - 현재 최고가는 저장하지 않고 기록에서 계산
    """

    entry_id: int
    """원장 내 순번 (추가 순서)"""

    bidder: Bidder
    """입찰자"""

    amount: int
    """입찰 금액 (토큰)"""

    timestamp: datetime
    """입찰 시각"""

    def __str__(self) -> str:
        return f"Bid {self.entry_id}: {self.amount} tokens by {self.bidder.display_id}"
