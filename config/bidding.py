"""입찰 및 토큰 관련 설정 (경매 일정, 환불, 히스토리)"""
from dataclasses import dataclass


# =============================================================================
# 경매 일정 / 환불
# =============================================================================

@dataclass(frozen=True)
class BiddingConfig:
    """입찰 설정"""

    BIDDING_CLOSES_DAYS_BEFORE: int = 7
    """입찰 마감 시점 (예약일 7일 전 00:00)"""

    CANCEL_DEADLINE_DAYS_BEFORE: int = 1
    """예약 취소 가능 기한 (예약일 1일 전 00:00 이전)"""

    CANCEL_REFUND_PERCENT: int = 50
    """낙찰 취소 시 환불 비율 (50%, 내림)"""

    SINGLE_ROOM_CAPACITY: int = 1
    """1인실 정원"""

    RECENT_BIDS_LIMIT: int = 5
    """경매별 최근 입찰 조회 개수"""

    HISTORY_LIMIT: int = 10
    """입찰/예약 히스토리 기본 조회 개수"""

    GROUP_HISTORY_MAX: int = 10
    """유저별 그룹 입찰 기록 보관 개수 (최신순)"""


BIDDING = BiddingConfig()


# =============================================================================
# 토큰
# =============================================================================

@dataclass(frozen=True)
class TokenConfig:
    """토큰 지급 설정"""

    SIGNUP_BONUS: int = 100
    """가입 시 지급 토큰"""

    EXAM_BONUS: int = 10
    """시험 일정 등록 시 지급 토큰"""

    EXAM_BONUS_WINDOW_MONTHS: int = 1
    """시험일 허용 범위 (오늘부터 달력 기준 1개월 이내)"""


TOKEN = TokenConfig()
