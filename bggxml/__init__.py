"""An asyncio client for the BoardGameGeek (BGG) XML API2 with typed, immutable results."""

from .client import BGGClient
from .exceptions import (
    BGGAPIError,
    BGGCancelledError,
    BGGDecodeError,
    BGGException,
    BGGHTTPError,
    BGGNetworkError,
    BGGParseError,
    BGGTimeoutError,
    InvalidCollectionItemTypeError,
    InvalidNumberError,
    MissingFieldError,
    UnexpectedValueError,
    UnknownUsernameError,
)
from .models import (
    Collection,
    CollectionItem,
    CollectionItemStats,
    CollectionItemStatus,
    GameFamily,
    GameLink,
    HotListEntry,
    ItemType,
    NameType,
    Rank,
    SearchMatch,
    SearchResults,
    WishlistPriority,
)
from .polling import RetryPolicy
from .queries import CollectionFilters
from .text import EntityMode

__all__ = [
    "BGGClient",
    "CollectionFilters",
    "EntityMode",
    "RetryPolicy",
    "Collection",
    "CollectionItem",
    "CollectionItemStats",
    "CollectionItemStatus",
    "GameFamily",
    "GameLink",
    "HotListEntry",
    "ItemType",
    "NameType",
    "Rank",
    "SearchMatch",
    "SearchResults",
    "WishlistPriority",
    "BGGException",
    "BGGAPIError",
    "BGGCancelledError",
    "BGGDecodeError",
    "BGGHTTPError",
    "BGGNetworkError",
    "BGGParseError",
    "BGGTimeoutError",
    "InvalidCollectionItemTypeError",
    "InvalidNumberError",
    "MissingFieldError",
    "UnexpectedValueError",
    "UnknownUsernameError",
]
