# bggxml/decoders.py
"""
Decoders that turn parsed BGG documents into models.

Each endpoint gets its own ``ResponseDecoder`` subclass so that per-endpoint
quirks stay local. Decoders are pure: they hold only their configuration, never
touch the network, and raise a ``BGGDecodeError`` subclass on schema mismatches.
Unknown elements and attributes are ignored.
"""
from datetime import datetime
from typing import Callable, List, Optional, Tuple, TypeVar
import logging

from .document import XmlDocument, XmlNode
from .exceptions import InvalidNumberError, MissingFieldError, UnexpectedValueError
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
from .text import EntityMode, fix_text

log = logging.getLogger(__name__)

T = TypeVar("T")

HOT_LIST_SIZE = 10
LAST_MODIFIED_FORMAT = "%Y-%m-%d %H:%M:%S"
NOT_RANKED = "Not Ranked"


def _number(raw: str, field: str, type_conv: Callable[[str], T]) -> T:
    try:
        return type_conv(raw.strip())
    except (ValueError, TypeError) as e:
        raise InvalidNumberError(field, raw) from e


def _required_attr(node: XmlNode, name: str) -> str:
    value = node.attr(name)
    if value is None or not value.strip():
        raise MissingFieldError(name, node.tag)
    return value


def _optional_number(raw: Optional[str], field: str, type_conv: Callable[[str], T]) -> Optional[T]:
    if raw is None or not raw.strip():
        return None
    return _number(raw, field, type_conv)


def _child_text(node: XmlNode, tag: str) -> Optional[str]:
    child = node.child(tag)
    if child is None or not child.text():
        return None
    return child.text()


def _child_value(node: XmlNode, tag: str) -> Optional[str]:
    """Reads the ``<tag value="..."/>`` pattern BGG uses for most scalar fields."""
    child = node.child(tag)
    return child.attr("value") if child is not None else None


def _enum_value(enum_cls, raw: str, field: str):
    try:
        return enum_cls(raw)
    except ValueError as e:
        raise UnexpectedValueError(field, raw) from e


def _flag(node: XmlNode, name: str) -> bool:
    raw = node.attr(name)
    if raw is None:
        return False
    if raw == "1":
        return True
    if raw == "0":
        return False
    raise UnexpectedValueError(name, raw)


def _rank_value(raw: Optional[str], field: str) -> Optional[int]:
    if raw is None or raw == NOT_RANKED:
        return None
    return _number(raw, field, int)


def _rank_average(raw: Optional[str], field: str) -> Optional[float]:
    if raw is None or raw == NOT_RANKED:
        return None
    return _optional_number(raw, field, float)


class ResponseDecoder:
    """Base class for the per-endpoint decoders."""

    root_tag = "items"

    def __init__(self, entity_mode: EntityMode = EntityMode.CORRECTED):
        self.entity_mode = entity_mode

    def text(self, value: Optional[str]) -> Optional[str]:
        return fix_text(value, self.entity_mode)

    def decode(self, document: XmlDocument):
        raise NotImplementedError

    def decode_bytes(self, content: bytes):
        """Parses a raw response body and decodes it."""
        return self.decode(XmlDocument.parse(content, self.root_tag))


class CollectionDecoder(ResponseDecoder):
    """Decodes ``/collection`` responses, brief or full."""

    def __init__(self, username: str, entity_mode: EntityMode = EntityMode.CORRECTED):
        super().__init__(entity_mode)
        self.username = username

    def decode(self, document: XmlDocument) -> Collection:
        items = tuple(self.decode_item(item_el) for item_el in document.root.children("item"))
        log.debug(f"Decoded {len(items)} collection items for '{self.username}'")
        return Collection(username=self.username, items=items)

    def decode_item(self, item_el: XmlNode) -> CollectionItem:
        game_id = _number(_required_attr(item_el, "objectid"), "objectid", int)
        item_type = _enum_value(ItemType, _required_attr(item_el, "subtype"), "subtype")

        name = _child_text(item_el, "name")
        if name is None:
            raise MissingFieldError("name", item_el.tag)

        status_el = item_el.child("status")
        if status_el is None:
            raise MissingFieldError("status", item_el.tag)

        stats_el = item_el.child("stats")
        stats = self.decode_stats(stats_el) if stats_el is not None else None

        rating = None
        rating_el = stats_el.child("rating") if stats_el is not None else None
        if rating_el is not None:
            rating_val = rating_el.attr("value")
            # BGG writes "N/A" when the user has not rated the game
            if rating_val not in (None, "", "N/A"):
                rating = _number(rating_val, "rating", float)

        return CollectionItem(
            id=game_id,
            collection_id=_optional_number(item_el.attr("collid"), "collid", int),
            item_type=item_type,
            name=self.text(name),
            status=self.decode_status(status_el),
            year_published=_optional_number(_child_text(item_el, "yearpublished"), "yearpublished", int),
            image=_child_text(item_el, "image"),
            thumbnail=_child_text(item_el, "thumbnail"),
            number_of_plays=_optional_number(_child_text(item_el, "numplays"), "numplays", int) or 0,
            rating=rating,
            comment=self.text(_child_text(item_el, "comment")),
            stats=stats,
        )

    def decode_status(self, status_el: XmlNode) -> CollectionItemStatus:
        priority = None
        priority_raw = status_el.attr("wishlistpriority")
        if priority_raw:
            try:
                priority = WishlistPriority.from_wire(_number(priority_raw, "wishlistpriority", int))
            except ValueError as e:
                raise UnexpectedValueError("wishlistpriority", priority_raw) from e

        last_modified = None
        last_modified_raw = status_el.attr("lastmodified")
        if last_modified_raw:
            try:
                last_modified = datetime.strptime(last_modified_raw, LAST_MODIFIED_FORMAT)
            except ValueError as e:
                raise UnexpectedValueError("lastmodified", last_modified_raw) from e

        return CollectionItemStatus(
            own=_flag(status_el, "own"),
            previously_owned=_flag(status_el, "prevowned"),
            for_trade=_flag(status_el, "fortrade"),
            want_in_trade=_flag(status_el, "want"),
            want_to_play=_flag(status_el, "wanttoplay"),
            want_to_buy=_flag(status_el, "wanttobuy"),
            wishlist=_flag(status_el, "wishlist"),
            pre_ordered=_flag(status_el, "preordered"),
            wishlist_priority=priority,
            last_modified=last_modified,
        )

    def decode_stats(self, stats_el: XmlNode) -> CollectionItemStats:
        def _attr_int(name):
            return _optional_number(stats_el.attr(name), name, int)

        users_rated = average = bayes_average = stddev = None
        ranks: Tuple[Rank, ...] = ()
        rating_el = stats_el.child("rating")
        if rating_el is not None:
            users_rated = _optional_number(_child_value(rating_el, "usersrated"), "usersrated", int)
            average = _optional_number(_child_value(rating_el, "average"), "average", float)
            bayes_average = _optional_number(_child_value(rating_el, "bayesaverage"), "bayesaverage", float)
            stddev = _optional_number(_child_value(rating_el, "stddev"), "stddev", float)
            ranks_el = rating_el.child("ranks")
            if ranks_el is not None:
                ranks = tuple(self.decode_rank(rank_el) for rank_el in ranks_el.children("rank"))

        return CollectionItemStats(
            min_players=_attr_int("minplayers"),
            max_players=_attr_int("maxplayers"),
            min_playtime=_attr_int("minplaytime"),
            max_playtime=_attr_int("maxplaytime"),
            playing_time=_attr_int("playingtime"),
            owned_by=_attr_int("numowned"),
            users_rated=users_rated,
            average=average,
            bayes_average=bayes_average,
            stddev=stddev,
            ranks=ranks,
        )

    def decode_rank(self, rank_el: XmlNode) -> Rank:
        return Rank(
            type=_required_attr(rank_el, "type"),
            id=_number(_required_attr(rank_el, "id"), "id", int),
            name=_required_attr(rank_el, "name"),
            friendly_name=rank_el.attr("friendlyname", ""),
            value=_rank_value(rank_el.attr("value"), "value"),
            bayes_average=_rank_average(rank_el.attr("bayesaverage"), "bayesaverage"),
        )


class GameFamilyDecoder(ResponseDecoder):
    """Decodes ``/family`` responses."""

    family_link_type = "boardgamefamily"

    def decode(self, document: XmlDocument) -> List[GameFamily]:
        return [self.decode_family(item_el) for item_el in document.root.children("item")]

    def decode_family(self, item_el: XmlNode) -> GameFamily:
        raw_id = _required_attr(item_el, "id")
        family_id = _number(raw_id, "id", int)
        if family_id <= 0:
            raise UnexpectedValueError("id", raw_id)

        name = None
        alternate_names = []
        for name_el in item_el.children("name"):
            value = name_el.attr("value")
            if not value:
                continue
            if name_el.attr("type") == NameType.ALTERNATE.value:
                alternate_names.append(self.text(value))
            elif name is None:
                name = self.text(value)
        if name is None:
            raise MissingFieldError("name", item_el.tag)

        games = []
        for link_el in item_el.children("link"):
            if link_el.attr("type") != self.family_link_type:
                log.debug(f"Skipping link of type '{link_el.attr('type')}' in family {family_id}")
                continue
            games.append(
                GameLink(
                    id=_number(_required_attr(link_el, "id"), "id", int),
                    name=self.text(_required_attr(link_el, "value")),
                )
            )

        return GameFamily(
            id=family_id,
            name=name,
            alternate_names=tuple(alternate_names),
            image=_child_text(item_el, "image"),
            thumbnail=_child_text(item_el, "thumbnail"),
            description=self.text(_child_text(item_el, "description")),
            games=tuple(games),
        )


class SearchDecoder(ResponseDecoder):
    """
    Decodes ``/search`` responses.

    With ``exact`` set, only matches whose name equals the query (case-sensitive)
    are kept. BGG's own exact flag also matches alternate names and ignores case,
    so this filter is what makes the guarantee hold.
    """

    def __init__(self, query: str, exact: bool = False, entity_mode: EntityMode = EntityMode.CORRECTED):
        super().__init__(entity_mode)
        self.query = query
        self.exact = exact

    def decode(self, document: XmlDocument) -> SearchResults:
        matches = [self.decode_match(item_el) for item_el in document.root.children("item")]
        if self.exact:
            matches = [match for match in matches if match.name == self.query]
        return SearchResults(query=self.query, exact=self.exact, matches=tuple(matches))

    def decode_match(self, item_el: XmlNode) -> SearchMatch:
        name_el = item_el.child("name")
        if name_el is None:
            raise MissingFieldError("name", item_el.tag)

        return SearchMatch(
            id=_number(_required_attr(item_el, "id"), "id", int),
            item_type=_enum_value(ItemType, _required_attr(item_el, "type"), "type"),
            name=self.text(_required_attr(name_el, "value")),
            name_type=_enum_value(NameType, name_el.attr("type", NameType.PRIMARY.value), "type"),
            year_published=_optional_number(_child_value(item_el, "yearpublished"), "yearpublished", int),
        )


class HotListDecoder(ResponseDecoder):
    """Decodes ``/hot`` responses into at most ``HOT_LIST_SIZE`` entries sorted by rank."""

    def decode(self, document: XmlDocument) -> List[HotListEntry]:
        entries = sorted(
            (self.decode_entry(item_el) for item_el in document.root.children("item")),
            key=lambda entry: entry.rank,
        )[:HOT_LIST_SIZE]

        for expected_rank, entry in enumerate(entries, start=1):
            if entry.rank != expected_rank:
                raise UnexpectedValueError("rank", str(entry.rank))
        return entries

    def decode_entry(self, item_el: XmlNode) -> HotListEntry:
        name = _child_value(item_el, "name")
        if not name:
            raise MissingFieldError("name", item_el.tag)

        return HotListEntry(
            rank=_number(_required_attr(item_el, "rank"), "rank", int),
            id=_number(_required_attr(item_el, "id"), "id", int),
            name=self.text(name),
            thumbnail=_child_value(item_el, "thumbnail") or None,
            year_published=_optional_number(_child_value(item_el, "yearpublished"), "yearpublished", int),
        )
