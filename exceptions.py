"""
BidForStudy 커스텀 예외 클래스 정의

모든 예외는 BidForStudyError를 상속받아 일관된 에러 처리를 제공합니다.
엔진 내부에서 발생한 예외는 서비스 경계에서 BidResult 실패 응답으로 변환됩니다.
"""


class BidForStudyError(Exception):
    """BidForStudy 기본 예외 클래스"""

    def __init__(self, message: str = "알 수 없는 오류가 발생했습니다"):
        self.message = message
        super().__init__(self.message)


# =============================================================================
# 경매 관련 예외
# =============================================================================


class AuctionError(BidForStudyError):
    """경매 관련 기본 예외"""
    pass


class AuctionAlreadyEndedError(AuctionError):
    """입찰 마감된 경매"""

    def __init__(self):
        super().__init__("이 예약의 입찰이 마감되었습니다.")


class InvalidBidAmountError(AuctionError):
    """0 이하의 입찰 금액"""

    def __init__(self, amount: int):
        self.amount = amount
        super().__init__("입찰 금액은 0보다 커야 합니다.")


class BidTooLowError(AuctionError):
    """현재 입찰가 이하의 입찰"""

    def __init__(self, current_bid: int, bid_amount: int):
        self.current_bid = current_bid
        self.bid_amount = bid_amount
        super().__init__(f"입찰 금액은 현재 입찰가({current_bid} 토큰)보다 높아야 합니다.")


class RoomCapacityMismatchError(AuctionError):
    """작업과 맞지 않는 방 인원"""

    def __init__(self, capacity: int, message: str):
        self.capacity = capacity
        super().__init__(message)


class NoBidsFoundError(AuctionError):
    """입찰 기록 없음"""

    def __init__(self):
        super().__init__("이 예약에 대한 입찰 기록이 없습니다.")


# =============================================================================
# 그룹 입찰 관련 예외
# =============================================================================


class GroupBidError(BidForStudyError):
    """그룹 입찰 관련 기본 예외"""
    pass


class GroupNotFoundError(GroupBidError):
    """대기 중인 그룹을 찾을 수 없음"""

    def __init__(self, join_code: str):
        self.join_code = join_code
        super().__init__("그룹을 찾을 수 없습니다.")


class GroupAlreadyExistsError(GroupBidError):
    """같은 예약에 이미 만든 그룹이 있음"""

    def __init__(self, owner_id: str):
        self.owner_id = owner_id
        super().__init__("이미 이 방과 시간에 그룹을 만들었습니다.")


class GroupFullError(GroupBidError):
    """그룹 정원 초과"""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"그룹이 가득 찼습니다. (정원 {capacity}명)")


class AlreadyGroupMemberError(GroupBidError):
    """이미 그룹에 속해 있음"""

    def __init__(self, user_id: str, message: str = "이미 이 그룹에 참여 중입니다. 입찰 금액 변경을 이용하세요."):
        self.user_id = user_id
        super().__init__(message)


class NotGroupMemberError(GroupBidError):
    """그룹 멤버가 아님"""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("이 그룹의 멤버가 아닙니다.")


class NotGroupOwnerError(GroupBidError):
    """그룹장만 가능한 작업"""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"그룹장만 그룹 입찰을 {action}할 수 있습니다.")


class SecondChanceGroupLockedError(GroupBidError):
    """차순위 그룹은 구성 변경 불가"""

    def __init__(self, message: str = "차순위 그룹은 제출하거나 취소만 할 수 있습니다."):
        super().__init__(message)


class InvalidGroupTotalError(GroupBidError):
    """그룹 합계가 0 이하"""

    def __init__(self, total: int):
        self.total = total
        super().__init__("그룹 입찰 합계는 0보다 커야 합니다.")


class GroupDetailsNotFoundError(GroupBidError):
    """확정된 그룹 입찰 스냅샷 없음"""

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__("이 예약의 그룹 정보를 찾을 수 없습니다.")


# =============================================================================
# 차순위 제안 관련 예외
# =============================================================================


class SecondChanceError(BidForStudyError):
    """차순위 제안 관련 기본 예외"""
    pass


class SecondChanceOfferNotFoundError(SecondChanceError):
    """대기 중인 제안 없음"""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("대기 중인 제안이 없습니다.")


# =============================================================================
# 예약 취소 관련 예외
# =============================================================================


class ReservationError(BidForStudyError):
    """예약 관련 기본 예외"""
    pass


class CancellationDeadlinePassedError(ReservationError):
    """취소 가능 기한 경과"""

    def __init__(self):
        super().__init__("예약일 최소 하루 전까지만 취소할 수 있습니다.")


class NotCurrentWinnerError(ReservationError):
    """현재 낙찰자가 아님"""

    def __init__(self, message: str = "이 예약의 현재 낙찰자가 아닙니다."):
        super().__init__(message)


# =============================================================================
# 토큰 관련 예외
# =============================================================================


class InsufficientResourceError(BidForStudyError):
    """자원 부족"""

    def __init__(self, resource_name: str, required: int, current: int):
        self.resource_name = resource_name
        self.required = required
        self.current = current
        super().__init__(
            f"{resource_name}이(가) 부족합니다. (필요: {required}, 보유: {current})"
        )


class InsufficientTokensError(InsufficientResourceError):
    """토큰 부족"""

    def __init__(self, user_id: str, required: int, current: int):
        self.user_id = user_id
        super().__init__("토큰", required, current)


class TokenGrantError(BidForStudyError):
    """토큰 지급 관련 기본 예외"""
    pass


class InvalidExamDateError(TokenGrantError):
    """시험 보너스 날짜가 허용 범위를 벗어남"""

    def __init__(self, window_months: int):
        self.window_months = window_months
        super().__init__(f"시험일은 오늘부터 {window_months}개월 이내여야 합니다.")


# =============================================================================
# 설정 관련 예외
# =============================================================================


class InvalidSettingError(BidForStudyError):
    """잘못된 환경 설정 값"""

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value
        super().__init__(f"환경변수 {name}의 값이 올바르지 않습니다: {value!r}")
