"""
pytest 설정 및 공통 픽스처 정의
"""
import sys
from datetime import date
from pathlib import Path

import pytest

# 프로젝트 루트를 Python 경로에 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# pytest 설정
# =============================================================================


def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "scenario: end-to-end bidding scenarios"
    )


# =============================================================================
# 토큰 / 서비스 픽스처
# =============================================================================


@pytest.fixture
def token_ledger():
    """기본 유저가 가입된 메모리 토큰 원장"""
    from service.token import InMemoryTokenLedger
    from tests.fixtures.auctions import INITIAL_TOKENS, USER_IDS

    ledger = InMemoryTokenLedger(signup_bonus=INITIAL_TOKENS)
    for user_id in USER_IDS:
        ledger.register_user(user_id)
    return ledger


@pytest.fixture
def bidding_service(token_ledger):
    """테스트마다 새 입찰 서비스"""
    from service.bidding import BiddingService

    return BiddingService(token_ledger)


# =============================================================================
# 경매 픽스처
# =============================================================================


@pytest.fixture
def single_key():
    from tests.fixtures.auctions import SINGLE_ROOM
    return SINGLE_ROOM


@pytest.fixture
def group_key():
    from tests.fixtures.auctions import GROUP_ROOM
    return GROUP_ROOM


@pytest.fixture
def open_now():
    """입찰 진행 중 시각"""
    from tests.fixtures.auctions import BIDDING_OPEN_AT
    return BIDDING_OPEN_AT


@pytest.fixture
def key_factory():
    """테스트용 AuctionKey 생성 팩토리"""
    from models import AuctionKey
    from tests.fixtures.auctions import RESERVATION_DATE

    def _create_key(
        room_number: str = "101",
        capacity: int = 1,
        time_range: str = "10:00-12:00",
        reservation_date: date = RESERVATION_DATE,
    ) -> AuctionKey:
        return AuctionKey(
            room_number=room_number,
            capacity=capacity,
            time_range=time_range,
            reservation_date=reservation_date,
        )

    return _create_key
