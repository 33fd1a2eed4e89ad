# bggxml/queries.py
"""Query parameter builders for each endpoint. Parameters keep their insertion order."""
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, List, Optional, Tuple

from .models import ItemType, WishlistPriority

QueryParams = List[Tuple[str, str]]

# (attribute, BGG parameter) for the boolean collection filters, in the order they are sent.
_COLLECTION_FLAGS = [
    ("own", "own"),
    ("previously_owned", "prevowned"),
    ("for_trade", "trade"),
    ("want_in_trade", "want"),
    ("want_to_play", "wanttoplay"),
    ("want_to_buy", "wanttobuy"),
    ("pre_ordered", "preordered"),
    ("wishlist", "wishlist"),
]

_COLLECTION_USER_FLAGS = [
    ("rated", "rated"),
    ("played", "played"),
    ("commented", "comment"),
    ("has_parts", "hasparts"),
    ("want_parts", "wantparts"),
]

_COLLECTION_NUMBERS = [
    ("min_rating", "minrating"),
    ("max_rating", "rating"),
    ("min_bgg_rating", "minbggrating"),
    ("max_bgg_rating", "bggrating"),
    ("min_plays", "minplays"),
    ("max_plays", "maxplays"),
]


def _flag(value: bool) -> str:
    return "1" if value else "0"


@dataclass(frozen=True)
class CollectionFilters:
    """
    Optional filters for a collection request. ``None`` leaves the server default.

    ``stats`` is the exception: BGG includes stats for some subtype filters and
    not others, so it is always requested unless explicitly turned off.
    """

    item_type: Optional[ItemType] = None
    exclude_item_type: Optional[ItemType] = None
    own: Optional[bool] = None
    previously_owned: Optional[bool] = None
    for_trade: Optional[bool] = None
    want_in_trade: Optional[bool] = None
    want_to_play: Optional[bool] = None
    want_to_buy: Optional[bool] = None
    pre_ordered: Optional[bool] = None
    wishlist: Optional[bool] = None
    wishlist_priority: Optional[WishlistPriority] = None
    modified_since: Optional[date] = None
    stats: Optional[bool] = None
    rated: Optional[bool] = None
    played: Optional[bool] = None
    commented: Optional[bool] = None
    has_parts: Optional[bool] = None
    want_parts: Optional[bool] = None
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None
    min_bgg_rating: Optional[float] = None
    max_bgg_rating: Optional[float] = None
    min_plays: Optional[int] = None
    max_plays: Optional[int] = None
    show_private: Optional[bool] = None
    collection_id: Optional[int] = None

    def with_stats(self) -> "CollectionFilters":
        return replace(self, stats=True)

    def to_params(self, username: str, brief: bool = False) -> QueryParams:
        params: QueryParams = [("username", username), ("brief", _flag(brief))]

        if self.item_type is not None:
            params.append(("subtype", self.item_type.value))
        if self.exclude_item_type is not None:
            params.append(("excludesubtype", self.exclude_item_type.value))

        for attr, key in _COLLECTION_FLAGS:
            value = getattr(self, attr)
            if value is not None:
                params.append((key, _flag(value)))

        if self.wishlist_priority is not None:
            params.append(("wishlistpriority", str(self.wishlist_priority.wire_value)))
        if self.modified_since is not None:
            params.append(("modifiedsince", self.modified_since.strftime("%y-%m-%d")))

        params.append(("stats", _flag(self.stats is not False)))

        for attr, key in _COLLECTION_USER_FLAGS:
            value = getattr(self, attr)
            if value is not None:
                params.append((key, _flag(value)))

        for attr, key in _COLLECTION_NUMBERS:
            value = getattr(self, attr)
            if value is not None:
                params.append((key, str(value)))

        if self.show_private is not None:
            params.append(("showprivate", _flag(self.show_private)))
        if self.collection_id is not None:
            params.append(("collid", str(self.collection_id)))
        return params


def family_params(family_ids: Iterable[int]) -> QueryParams:
    # The endpoint also serves RPG and video game families; only board game families are exposed.
    return [
        ("type", "boardgamefamily"),
        ("id", ",".join(str(family_id) for family_id in family_ids)),
    ]


def search_params(query: str, exact: bool = False, item_type: Optional[ItemType] = None) -> QueryParams:
    params: QueryParams = [("query", query)]
    if exact:
        params.append(("exact", "1"))
    if item_type is not None:
        params.append(("type", item_type.value))
    return params
