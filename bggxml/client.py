# bggxml/client.py
from typing import Awaitable, Iterable, List, Optional, TypeVar
import asyncio
import logging

from .decoders import CollectionDecoder, GameFamilyDecoder, HotListDecoder, SearchDecoder
from .exceptions import BGGCancelledError
from .models import Collection, GameFamily, HotListEntry, ItemType, SearchResults
from .polling import RequestPoller, RetryPolicy
from .queries import CollectionFilters, family_params, search_params
from .text import EntityMode
from .transport import RequestsTransport

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_API_URL = "https://boardgamegeek.com/xmlapi2"


class BGGClient:
    """
    The main entry point for interacting with the BGG XML API2.

    Every method is a coroutine that issues its own request(s) and returns
    freshly decoded, immutable models. The client holds nothing but its
    configuration and transport, so concurrent calls do not interact.
    """

    def __init__(
        self,
        api_token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        max_attempts: int = 10,
        initial_backoff: float = 2.0,
        backoff_factor: float = 2.0,
        max_backoff: float = 60.0,
        entity_mode: EntityMode = EntityMode.CORRECTED,
        request_timeout: Optional[float] = 30.0,
        transport=None,
    ):
        """
        Initializes the BGGClient.

        Args:
            api_token (str, optional): The BGG API token, sent as a bearer token.
            api_url (str): Base URL of the XML API2.
            max_attempts (int): Max number of requests while BGG answers 202 (collection only).
            initial_backoff (float): The initial delay in seconds before the first retry.
            backoff_factor (float): The factor by which the retry delay increases.
            max_backoff (float): Upper bound in seconds for a single retry delay.
            entity_mode (EntityMode): Whether double-encoded text is repaired or returned verbatim.
            request_timeout (float, optional): Per-request socket timeout for the default transport.
            transport: Object with a ``get(base_url, path, params)`` coroutine. Defaults to
                a ``RequestsTransport``.
        """
        self.api_url = api_url.rstrip("/")
        self.retry_policy = RetryPolicy(
            max_attempts=max_attempts,
            initial_backoff=initial_backoff,
            backoff_factor=backoff_factor,
            max_backoff=max_backoff,
        )
        self.entity_mode = entity_mode
        self.transport = transport or RequestsTransport(api_token=api_token, request_timeout=request_timeout)

    async def __aenter__(self) -> "BGGClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def _poller(self) -> RequestPoller:
        return RequestPoller(self.transport, self.api_url, self.retry_policy)

    async def _with_timeout(self, call: Awaitable[T], timeout: Optional[float]) -> T:
        if timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout)
        except asyncio.TimeoutError as e:
            raise BGGCancelledError(f"Request abandoned after the caller's {timeout}s timeout") from e

    async def _get_collection(self, username: str, filters: CollectionFilters, brief: bool) -> Collection:
        log.debug(f"Fetching collection for user '{username}'")
        body = await self._poller().fetch("collection", filters.to_params(username, brief=brief), poll=True)
        return CollectionDecoder(username, self.entity_mode).decode_bytes(body)

    async def get_collection(
        self,
        username: str,
        filters: Optional[CollectionFilters] = None,
        brief: bool = False,
        timeout: Optional[float] = None,
    ) -> Collection:
        """
        Retrieves a user's collection, polling while BGG prepares it.

        Args:
            username (str): The BGG username.
            filters (CollectionFilters, optional): Filters; unset fields use the server default.
            brief (bool): Request the brief form (name, status and a subset of stats).
            timeout (float, optional): Overall deadline in seconds, including retry waits.

        Returns:
            Collection: The items in the order BGG returned them. May be empty.

        Raises:
            BGGTimeoutError: BGG was still processing after every allowed attempt.
            UnknownUsernameError: BGG does not know the username.
        """
        if not username:
            raise ValueError("username must not be empty")
        return await self._with_timeout(
            self._get_collection(username, filters or CollectionFilters(), brief), timeout
        )

    async def get_owned(self, username: str, timeout: Optional[float] = None) -> Collection:
        """The games the user currently owns."""
        return await self.get_collection(username, CollectionFilters(own=True), timeout=timeout)

    async def get_wishlist(self, username: str, timeout: Optional[float] = None) -> Collection:
        """The games on the user's wishlist."""
        return await self.get_collection(username, CollectionFilters(wishlist=True), timeout=timeout)

    async def get_collection_for_player_count(
        self,
        username: str,
        player_count: int,
        filters: Optional[CollectionFilters] = None,
        timeout: Optional[float] = None,
    ) -> Collection:
        """Collection items whose player range includes ``player_count``. Stats are always requested."""
        filters = (filters or CollectionFilters()).with_stats()
        collection = await self.get_collection(username, filters, timeout=timeout)
        items = tuple(
            item for item in collection if item.stats is not None and item.stats.supports_player_count(player_count)
        )
        return Collection(username=collection.username, items=items)

    async def get_collection_for_player_counts(
        self,
        username: str,
        min_count: int,
        max_count: int,
        filters: Optional[CollectionFilters] = None,
        timeout: Optional[float] = None,
    ) -> Collection:
        """
        Collection items playable with at least one count in ``min_count..max_count``.

        A game for 1-4 players matches the range 3-6, but a game for 5-8 players
        does not match 1-4. Stats are always requested.
        """
        if min_count > max_count:
            raise ValueError(f"min_count ({min_count}) must not exceed max_count ({max_count})")
        filters = (filters or CollectionFilters()).with_stats()
        collection = await self.get_collection(username, filters, timeout=timeout)
        items = tuple(
            item
            for item in collection
            if item.stats is not None and item.stats.overlaps_player_counts(min_count, max_count)
        )
        return Collection(username=collection.username, items=items)

    async def _get_game_families(self, family_ids: List[int]) -> List[GameFamily]:
        body = await self._poller().fetch("family", family_params(family_ids))
        families = {family.id: family for family in GameFamilyDecoder(self.entity_mode).decode_bytes(body)}

        missing = [family_id for family_id in family_ids if family_id not in families]
        if missing:
            log.debug(f"BGG returned no family for ids {missing}")
        return [families[family_id] for family_id in family_ids if family_id in families]

    async def get_game_families(self, ids: Iterable[int], timeout: Optional[float] = None) -> List[GameFamily]:
        """
        Retrieves several game families in a single request.

        Args:
            ids: Family IDs. Duplicates are dropped.
            timeout (float, optional): Overall deadline in seconds.

        Returns:
            The families in the order their IDs were given. IDs BGG does not know are omitted.
        """
        family_ids = list(dict.fromkeys(ids))
        for family_id in family_ids:
            if not isinstance(family_id, int) or family_id <= 0:
                raise ValueError(f"Family IDs must be positive integers, got {family_id!r}")
        if not family_ids:
            return []
        return await self._with_timeout(self._get_game_families(family_ids), timeout)

    async def get_game_family(self, family_id: int, timeout: Optional[float] = None) -> Optional[GameFamily]:
        families = await self.get_game_families([family_id], timeout=timeout)
        return families[0] if families else None

    async def _search(self, query: str, exact: bool, item_type: Optional[ItemType]) -> SearchResults:
        body = await self._poller().fetch("search", search_params(query, exact=exact, item_type=item_type))
        return SearchDecoder(query, exact=exact, entity_mode=self.entity_mode).decode_bytes(body)

    async def search(
        self,
        query: str,
        exact: bool = False,
        item_type: Optional[ItemType] = None,
        timeout: Optional[float] = None,
    ) -> SearchResults:
        """
        Searches for games by name.

        Args:
            query (str): The search query.
            exact (bool): Only return matches whose name is exactly ``query`` (case-sensitive).
            item_type (ItemType, optional): Restrict results to one item type.
            timeout (float, optional): Overall deadline in seconds.
        """
        if not query:
            raise ValueError("query must not be empty")
        return await self._with_timeout(self._search(query, exact, item_type), timeout)

    async def _get_hot_list(self) -> List[HotListEntry]:
        body = await self._poller().fetch("hot", [])
        return HotListDecoder(self.entity_mode).decode_bytes(body)

    async def get_hot_list(self, timeout: Optional[float] = None) -> List[HotListEntry]:
        """The currently trending games, at most 10, sorted by rank."""
        return await self._with_timeout(self._get_hot_list(), timeout)
