import pytest

from bggxml.models import CollectionItemStats, WishlistPriority


def test_wishlist_priority_orders_by_strength_of_wish():
    assert WishlistPriority.DONT_BUY_THIS < WishlistPriority.MUST_HAVE
    assert sorted(WishlistPriority, reverse=True)[0] is WishlistPriority.MUST_HAVE
    assert max(WishlistPriority.LIKE_TO_HAVE, WishlistPriority.LOVE_TO_HAVE) is WishlistPriority.LOVE_TO_HAVE


@pytest.mark.parametrize(
    "wire, priority",
    [
        (1, WishlistPriority.MUST_HAVE),
        (2, WishlistPriority.LOVE_TO_HAVE),
        (3, WishlistPriority.LIKE_TO_HAVE),
        (4, WishlistPriority.THINKING_ABOUT_IT),
        (5, WishlistPriority.DONT_BUY_THIS),
    ],
)
def test_wishlist_priority_wire_numbers(wire, priority):
    assert WishlistPriority.from_wire(wire) is priority
    assert priority.wire_value == wire


def test_unknown_wishlist_priority():
    with pytest.raises(ValueError):
        WishlistPriority.from_wire(0)


class TestPlayerCounts:
    stats = CollectionItemStats(min_players=2, max_players=4)

    def test_single_count(self):
        assert self.stats.supports_player_count(3)
        assert not self.stats.supports_player_count(5)

    @pytest.mark.parametrize(
        "min_count, max_count, expected",
        [
            (1, 2, True),
            (3, 6, True),
            (1, 8, True),
            (3, 3, True),
            (5, 6, False),
            (1, 1, False),
        ],
    )
    def test_range_overlap(self, min_count, max_count, expected):
        assert self.stats.overlaps_player_counts(min_count, max_count) is expected

    def test_unknown_player_range(self):
        assert not CollectionItemStats().overlaps_player_counts(1, 10)
