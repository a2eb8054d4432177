"""차순위 제안 모델"""
from dataclasses import dataclass

from models.auction import AuctionKey


@dataclass(frozen=True)
class SecondChanceBid:
    """
    1인실 차순위 제안

    낙찰자가 취소한 뒤 다음 순위 입찰자에게 원래 입찰 금액으로 제안합니다.
    (AuctionKey, 입찰자) 당 하나만 유효합니다.
    """

    key: AuctionKey
    bidder_id: str
    amount: int
