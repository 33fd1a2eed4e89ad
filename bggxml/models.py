# bggxml/models.py
"""
Immutable value objects decoded from BGG XML API2 responses.

Every model is a frozen dataclass and every sequence is a tuple, so decoding
the same document twice yields equal objects. Games are referenced only by
their integer BGG ID; no model owns another.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional, Tuple
import enum


class ItemType(enum.Enum):
    """The BGG subtype of an item."""

    BOARD_GAME = "boardgame"
    BOARD_GAME_EXPANSION = "boardgameexpansion"
    BOARD_GAME_ACCESSORY = "boardgameaccessory"
    # Only seen in search results when no type filter is sent.
    RPG_ITEM = "rpgitem"
    VIDEO_GAME = "videogame"


class NameType(enum.Enum):
    PRIMARY = "primary"
    ALTERNATE = "alternate"


class WishlistPriority(enum.IntEnum):
    """
    Wishlist priorities, ordered so that a stronger wish compares greater:
    ``DONT_BUY_THIS < THINKING_ABOUT_IT < ... < MUST_HAVE``.

    BGG numbers them the other way round (1 is "must have"); use
    ``from_wire`` and ``wire_value`` to convert.
    """

    DONT_BUY_THIS = 1
    THINKING_ABOUT_IT = 2
    LIKE_TO_HAVE = 3
    LOVE_TO_HAVE = 4
    MUST_HAVE = 5

    @classmethod
    def from_wire(cls, value: int) -> "WishlistPriority":
        try:
            return _PRIORITY_FROM_WIRE[value]
        except KeyError:
            raise ValueError(f"{value!r} is not a BGG wishlist priority") from None

    @property
    def wire_value(self) -> int:
        return _PRIORITY_TO_WIRE[self]


_PRIORITY_TO_WIRE = {
    WishlistPriority.MUST_HAVE: 1,
    WishlistPriority.LOVE_TO_HAVE: 2,
    WishlistPriority.LIKE_TO_HAVE: 3,
    WishlistPriority.THINKING_ABOUT_IT: 4,
    WishlistPriority.DONT_BUY_THIS: 5,
}
_PRIORITY_FROM_WIRE = {wire: priority for priority, wire in _PRIORITY_TO_WIRE.items()}


@dataclass(frozen=True)
class Rank:
    """Represents a single rank for a game, e.g. its overall or strategy game rank."""

    type: str
    id: int
    name: str
    friendly_name: str
    value: Optional[int]  # None when BGG says "Not Ranked"
    bayes_average: Optional[float]


@dataclass(frozen=True)
class CollectionItemStatus:
    """
    The user's relationship to a game. The flags are independent: a game can
    be owned and for trade, or on the wishlist and pre-ordered.
    """

    own: bool = False
    previously_owned: bool = False
    for_trade: bool = False
    want_in_trade: bool = False
    want_to_play: bool = False
    want_to_buy: bool = False
    wishlist: bool = False
    pre_ordered: bool = False
    wishlist_priority: Optional[WishlistPriority] = None
    last_modified: Optional[datetime] = None


@dataclass(frozen=True)
class CollectionItemStats:
    """Game stats included with a collection item. Brief collections only carry some of them."""

    min_players: Optional[int] = None
    max_players: Optional[int] = None
    min_playtime: Optional[int] = None
    max_playtime: Optional[int] = None
    playing_time: Optional[int] = None
    owned_by: Optional[int] = None
    users_rated: Optional[int] = None
    average: Optional[float] = None
    bayes_average: Optional[float] = None
    stddev: Optional[float] = None
    ranks: Tuple[Rank, ...] = ()

    def supports_player_count(self, player_count: int) -> bool:
        if self.min_players is None or self.max_players is None:
            return False
        return self.min_players <= player_count <= self.max_players

    def overlaps_player_counts(self, min_count: int, max_count: int) -> bool:
        """True if any count in ``min_count..max_count`` (inclusive) is playable."""
        if self.min_players is None or self.max_players is None:
            return False
        return min_count <= self.max_players and max_count >= self.min_players


@dataclass(frozen=True)
class CollectionItem:
    """One board game entry in a user's collection."""

    id: int
    collection_id: Optional[int]
    item_type: ItemType
    name: str
    status: CollectionItemStatus
    year_published: Optional[int] = None
    image: Optional[str] = None
    thumbnail: Optional[str] = None
    number_of_plays: int = 0
    rating: Optional[float] = None
    comment: Optional[str] = None
    stats: Optional[CollectionItemStats] = None


@dataclass(frozen=True)
class Collection:
    """A user's collection, in the order BGG returned it."""

    username: str
    items: Tuple[CollectionItem, ...] = ()

    def __iter__(self) -> Iterator[CollectionItem]:
        return iter(self.items)

    def __len__(self):
        return len(self.items)


@dataclass(frozen=True)
class GameLink:
    """A game or expansion that belongs to a family."""

    id: int
    name: str


@dataclass(frozen=True)
class GameFamily:
    """A named grouping of related games, such as every Carcassonne release."""

    id: int
    name: str
    alternate_names: Tuple[str, ...] = ()
    image: Optional[str] = None
    thumbnail: Optional[str] = None
    description: Optional[str] = None
    games: Tuple[GameLink, ...] = ()

    @property
    def game_ids(self) -> Tuple[int, ...]:
        return tuple(game.id for game in self.games)


@dataclass(frozen=True)
class SearchMatch:
    id: int
    item_type: ItemType
    name: str
    name_type: NameType = NameType.PRIMARY
    year_published: Optional[int] = None


@dataclass(frozen=True)
class SearchResults:
    """The matches for a search, and whether exact matching was requested."""

    query: str
    exact: bool
    matches: Tuple[SearchMatch, ...] = ()

    def __iter__(self) -> Iterator[SearchMatch]:
        return iter(self.matches)

    def __len__(self):
        return len(self.matches)


@dataclass(frozen=True)
class HotListEntry:
    """A trending game. Ranks run from 1 to 10."""

    rank: int
    id: int
    name: str
    thumbnail: Optional[str] = None
    year_published: Optional[int] = None
