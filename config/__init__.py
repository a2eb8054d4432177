"""
BidForStudy 설정 상수

모든 매직 넘버와 입찰 규칙 관련 상수를 여기서 관리합니다.
각 도메인별 설정은 config/ 하위 모듈에 정의되어 있습니다.
"""
from config.bidding import BiddingConfig, BIDDING, TokenConfig, TOKEN

__all__ = [
    # bidding
    "BiddingConfig", "BIDDING",
    # token
    "TokenConfig", "TOKEN",
]
