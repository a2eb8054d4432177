"""입찰 도메인 모델"""
from models.auction import GROUP_ID_PREFIX, AuctionKey, Bidder, BidEntry, Group, Individual
from models.group_bid import FinalGroupBid, GroupMemberBid, PendingGroupBid, UserGroupBidRecord
from models.second_chance import SecondChanceBid

__all__ = [
    "GROUP_ID_PREFIX",
    "AuctionKey",
    "Bidder",
    "BidEntry",
    "Group",
    "Individual",
    "FinalGroupBid",
    "GroupMemberBid",
    "PendingGroupBid",
    "UserGroupBidRecord",
    "SecondChanceBid",
]
