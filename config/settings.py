"""
런타임 환경 설정

.env 파일과 환경변수에서 실행 설정을 읽어옵니다.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from config.bidding import TOKEN
from exceptions import InvalidSettingError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """실행 설정"""

    log_level: str = "INFO"
    """로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL)"""

    signup_bonus: int = TOKEN.SIGNUP_BONUS
    """가입 시 지급 토큰"""


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidSettingError(name, raw)
    if value < 0:
        raise InvalidSettingError(name, raw)
    return value


def load_settings() -> Settings:
    """
    환경변수에서 설정 로드

    Returns:
        Settings

    Raises:
        InvalidSettingError: 값이 올바르지 않을 때
    """
    load_dotenv()

    log_level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    if log_level not in _LOG_LEVELS:
        raise InvalidSettingError("LOG_LEVEL", log_level)

    return Settings(
        log_level=log_level,
        signup_bonus=_read_int("SIGNUP_BONUS", TOKEN.SIGNUP_BONUS),
    )
