"""
토큰 원장

입찰 엔진이 사용하는 유일한 외부 계약(잔액 조회, 증감)과
프로세스 내 메모리 구현을 제공합니다.
"""
import logging
from datetime import date
from typing import Dict, Protocol

from dateutil.relativedelta import relativedelta

from config import TOKEN
from exceptions import InsufficientTokensError, InvalidExamDateError

logger = logging.getLogger(__name__)


class TokenLedger(Protocol):
    """입찰 엔진이 요구하는 토큰 원장 계약"""

    def get_balance(self, user_id: str) -> int:
        """현재 토큰 잔액 (모르는 유저는 0)"""
        ...

    def adjust_balance(self, user_id: str, delta: int) -> None:
        """잔액에 delta를 더함 (음수면 차감)"""
        ...


class InMemoryTokenLedger:
    """
    메모리 토큰 원장

    Responsibilities:
    - 유저별 잔액 보관
    - 가입 보너스 / 시험 보너스 지급
    - 잔액이 음수가 되는 차감 거부

    메서드는 await 없이 끝나므로 이벤트 루프 안에서는 원자적으로 실행됩니다.
    """

    def __init__(self, signup_bonus: int = TOKEN.SIGNUP_BONUS):
        self._balances: Dict[str, int] = {}
        """user_id → 잔액"""

        self._signup_bonus = signup_bonus

    @staticmethod
    def _normalize(user_id: str) -> str:
        return user_id.strip()

    def register_user(self, user_id: str) -> bool:
        """
        유저 등록 및 가입 보너스 지급

        Args:
            user_id: 유저 ID

        Returns:
            새로 등록되었으면 True (빈 ID, 중복 등록이면 False)
        """
        uid = self._normalize(user_id)
        if not uid or uid in self._balances:
            return False

        self._balances[uid] = self._signup_bonus
        logger.info(f"Registered user {uid} with {self._signup_bonus} tokens")
        return True

    def is_registered(self, user_id: str) -> bool:
        return self._normalize(user_id) in self._balances

    def get_balance(self, user_id: str) -> int:
        return self._balances.get(self._normalize(user_id), 0)

    def adjust_balance(self, user_id: str, delta: int) -> None:
        """
        잔액 증감

        Args:
            user_id: 유저 ID
            delta: 증감량

        Raises:
            InsufficientTokensError: 차감 후 잔액이 음수가 되는 경우
        """
        uid = self._normalize(user_id)
        current = self._balances.get(uid, 0)
        if current + delta < 0:
            raise InsufficientTokensError(uid, -delta, current)

        self._balances[uid] = current + delta
        logger.debug(f"Adjusted tokens for {uid}: {delta:+d} (now {current + delta})")

    def add_exam_bonus(self, user_id: str, exam_date: date, today: date) -> int:
        """
        시험 일정 보너스 지급

        Args:
            user_id: 유저 ID
            exam_date: 시험일
            today: 오늘 날짜

        Returns:
            지급 후 잔액

        Raises:
            InvalidExamDateError: 시험일이 오늘 ~ 허용 범위 밖
        """
        latest = today + relativedelta(months=TOKEN.EXAM_BONUS_WINDOW_MONTHS)
        if exam_date < today or exam_date > latest:
            raise InvalidExamDateError(TOKEN.EXAM_BONUS_WINDOW_MONTHS)

        self.adjust_balance(user_id, TOKEN.EXAM_BONUS)
        logger.info(f"Granted exam bonus {TOKEN.EXAM_BONUS} tokens to {user_id} for {exam_date}")
        return self.get_balance(user_id)
