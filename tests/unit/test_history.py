"""
입찰 / 예약 히스토리 조회 테스트
"""
from datetime import date, timedelta

import pytest

from tests.fixtures.auctions import AFTER_CLOSE


class TestUserBidHistory:
    """유저 입찰 내역"""

    @pytest.mark.asyncio
    async def test_single_bids_newest_first(self, bidding_service, single_key, open_now):
        await bidding_service.place_single_bid(single_key, "alice", 30, now=open_now)
        await bidding_service.place_single_bid(single_key, "bob", 50, now=open_now + timedelta(minutes=1))
        await bidding_service.place_single_bid(single_key, "alice", 60, now=open_now + timedelta(minutes=2))

        history = bidding_service.user_bid_history("alice", now=open_now + timedelta(minutes=3))

        assert [h.amount for h in history] == [60, 30]
        assert [h.is_current_highest for h in history] == [True, False]
        assert all(h.is_active and not h.is_group for h in history)
        assert history[0].group_total_amount is None

    @pytest.mark.asyncio
    async def test_ended_auction_is_inactive(self, bidding_service, single_key, open_now):
        await bidding_service.place_single_bid(single_key, "alice", 30, now=open_now)

        (summary,) = bidding_service.user_bid_history("alice", now=AFTER_CLOSE)

        assert summary.is_active is False
        assert summary.is_current_highest is False

    @pytest.mark.asyncio
    async def test_includes_group_contributions(self, bidding_service, single_key, group_key, open_now):
        await bidding_service.place_single_bid(single_key, "bob", 10, now=open_now)
        await bidding_service.start_group_bid(group_key, "alice", 20, now=open_now)
        await bidding_service.join_group_bid(group_key, "alice", "bob", 15)
        await bidding_service.submit_group_bid(group_key, "alice", "alice", now=open_now + timedelta(minutes=5))

        history = bidding_service.user_bid_history("bob", now=open_now + timedelta(minutes=10))

        assert [h.is_group for h in history] == [True, False]
        group_summary = history[0]
        assert group_summary.auction_key == group_key
        assert group_summary.amount == 15
        assert group_summary.group_total_amount == 35
        assert group_summary.is_current_highest is True

    @pytest.mark.asyncio
    async def test_outbid_group_is_not_highest(self, bidding_service, group_key, open_now):
        await bidding_service.start_group_bid(group_key, "alice", 20, now=open_now)
        await bidding_service.submit_group_bid(group_key, "alice", "alice", now=open_now)
        await bidding_service.start_group_bid(group_key, "dave", 30, now=open_now)
        await bidding_service.submit_group_bid(group_key, "dave", "dave", now=open_now)

        (summary,) = bidding_service.user_bid_history("alice", now=open_now)

        assert summary.is_current_highest is False

    @pytest.mark.asyncio
    async def test_limit(self, bidding_service, single_key, open_now):
        for minute, amount in enumerate(range(10, 80, 10)):
            await bidding_service.place_single_bid(
                single_key, "alice", amount, now=open_now + timedelta(minutes=minute)
            )

        history = bidding_service.user_bid_history("alice", limit=3, now=open_now)

        assert [h.amount for h in history] == [70, 60, 50]

    def test_unknown_user_has_empty_history(self, bidding_service, open_now):
        assert bidding_service.user_bid_history("nobody", now=open_now) == []


class TestUserReservationHistory:
    """확정 예약 목록"""

    @pytest.mark.asyncio
    async def test_open_auction_is_not_reserved(self, bidding_service, single_key, open_now):
        await bidding_service.place_single_bid(single_key, "alice", 30, now=open_now)

        assert bidding_service.user_reservation_history("alice", now=open_now) == []

    @pytest.mark.asyncio
    async def test_single_and_group_wins_by_date(self, bidding_service, key_factory, open_now):
        early = key_factory(room_number="101", capacity=1, reservation_date=date(2026, 11, 18))
        late = key_factory(room_number="301", capacity=3, reservation_date=date(2026, 11, 20))
        await bidding_service.place_single_bid(early, "alice", 30, now=open_now)
        await bidding_service.start_group_bid(late, "bob", 20, now=open_now)
        await bidding_service.join_group_bid(late, "bob", "alice", 25)
        await bidding_service.submit_group_bid(late, "bob", "bob", now=open_now)

        reservations = bidding_service.user_reservation_history("alice", now=AFTER_CLOSE)

        assert [(r.auction_key, r.amount) for r in reservations] == [(late, 45), (early, 30)]
        assert [r.auction_key for r in bidding_service.user_reservation_history("bob", now=AFTER_CLOSE)] == [late]

    @pytest.mark.asyncio
    async def test_loser_has_no_reservation(self, bidding_service, single_key, open_now):
        await bidding_service.place_single_bid(single_key, "alice", 30, now=open_now)
        await bidding_service.place_single_bid(single_key, "bob", 40, now=open_now)

        assert bidding_service.user_reservation_history("alice", now=AFTER_CLOSE) == []

    @pytest.mark.asyncio
    async def test_force_closed_auction_counts_as_ended(self, bidding_service, single_key, open_now):
        await bidding_service.place_single_bid(single_key, "alice", 30, now=open_now)

        bidding_service.force_close_auction(single_key)

        assert bidding_service.is_auction_ended(single_key, now=open_now) is True
        assert len(bidding_service.user_reservation_history("alice", now=open_now)) == 1

    @pytest.mark.asyncio
    async def test_pending_offer_hides_reservation(self, bidding_service, single_key, open_now):
        await bidding_service.place_single_bid(single_key, "alice", 30, now=open_now)
        await bidding_service.place_single_bid(single_key, "bob", 40, now=open_now)
        await bidding_service.cancel_reservation_for_user(single_key, "bob", 40, now=AFTER_CLOSE)

        assert bidding_service.is_in_second_chance(single_key) is True
        assert bidding_service.user_reservation_history("alice", now=AFTER_CLOSE) == []
        assert bidding_service.user_reservation_history("bob", now=AFTER_CLOSE) == []
