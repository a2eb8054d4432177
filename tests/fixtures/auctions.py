"""
테스트용 경매 / 유저 픽스처 데이터
"""
from datetime import date, datetime
from typing import Iterable

from models import AuctionKey

# 기본 테스트 유저 (가입 보너스 100 토큰)
USER_IDS: tuple[str, ...] = (
    "alice", "bob", "carol", "dave", "erin", "frank", "grace", "heidi",
)
INITIAL_TOKENS = 100

# 예약일 2026-11-20
RESERVATION_DATE = date(2026, 11, 20)

# 입찰 진행 중 (마감: 2026-11-13 00:00)
BIDDING_OPEN_AT = datetime(2026, 11, 1, 10, 0)

# 입찰 마감 시각 정각
BIDDING_CLOSES_AT = datetime(2026, 11, 13, 0, 0)

# 입찰 마감 후, 취소 가능 기한(2026-11-19 00:00) 이전
AFTER_CLOSE = datetime(2026, 11, 15, 9, 0)

# 취소 가능 기한 정각
CANCEL_DEADLINE = datetime(2026, 11, 19, 0, 0)

SINGLE_ROOM = AuctionKey(
    room_number="101",
    capacity=1,
    time_range="10:00-12:00",
    reservation_date=RESERVATION_DATE,
)

GROUP_ROOM = AuctionKey(
    room_number="301",
    capacity=3,
    time_range="14:00-16:00",
    reservation_date=RESERVATION_DATE,
)

PAIR_ROOM = AuctionKey(
    room_number="201",
    capacity=2,
    time_range="14:00-16:00",
    reservation_date=RESERVATION_DATE,
)


def total_tokens(ledger, user_ids: Iterable[str] = USER_IDS) -> int:
    """유저 잔액 합계"""
    return sum(ledger.get_balance(uid) for uid in user_ids)
