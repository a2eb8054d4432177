"""
BidForStudy 실행 구성

환경 설정을 읽고 로깅과 입찰 서비스 인스턴스를 준비합니다.
"""
import logging
from typing import Optional

from config.settings import Settings, load_settings
from service.bidding import BiddingService
from service.token import InMemoryTokenLedger, TokenLedger


def configure_logging(settings: Settings) -> None:
    # 로그 기본 설정
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


def create_bidding_service(
    settings: Optional[Settings] = None,
    token_ledger: Optional[TokenLedger] = None
) -> BiddingService:
    """
    입찰 서비스 생성

    Args:
        settings: 실행 설정 (없으면 환경변수에서 로드)
        token_ledger: 토큰 원장 (없으면 메모리 원장 생성)

    Returns:
        새 BiddingService
    """
    if settings is None:
        settings = load_settings()

    if token_ledger is None:
        token_ledger = InMemoryTokenLedger(signup_bonus=settings.signup_bonus)

    logging.info(f"Creating bidding service (log level {settings.log_level})")
    return BiddingService(token_ledger)
