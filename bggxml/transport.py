# bggxml/transport.py
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple
import asyncio
import logging
import threading

import requests

from .exceptions import BGGNetworkError

log = logging.getLogger(__name__)

USER_AGENT = "bggxml (+https://boardgamegeek.com/wiki/page/BGG_XML_API2)"


class TransportResponse(NamedTuple):
    status_code: int
    headers: Mapping[str, str]
    content: bytes


class RequestsTransport:
    """
    Issues GET requests with ``requests``.

    ``requests`` is blocking, so each call runs on a worker thread and is
    awaited from the event loop. Every worker thread gets its own
    ``requests.Session``; concurrent calls never share a connection pool,
    cookies or headers. Anything a transport needs to provide is covered by
    ``get``; tests and callers can pass any object with the same coroutine
    method to ``BGGClient(transport=...)``.
    """

    def __init__(self, api_token: Optional[str] = None, request_timeout: Optional[float] = 30.0,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self.headers: Dict[str, str] = {"User-Agent": USER_AGENT}
        if api_token:
            self.headers["Authorization"] = f"Bearer {api_token}"
        self.request_timeout = request_timeout
        self.session_factory = session_factory
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """The session owned by the calling thread, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self.session_factory()
            session.headers.update(self.headers)
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
            log.debug(f"Opened a session for thread {threading.current_thread().name}")
        return session

    def _get(self, url: str, params: Sequence[Tuple[str, str]], timeout: Optional[float]) -> TransportResponse:
        try:
            response = self.session.get(url, params=list(params), timeout=timeout)
        except requests.exceptions.RequestException as e:
            raise BGGNetworkError(f"Network error at {url}: {e}") from e
        return TransportResponse(response.status_code, response.headers, response.content)

    async def get(self, base_url: str, path: str, params: Sequence[Tuple[str, str]],
                  timeout: Optional[float] = None) -> TransportResponse:
        url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        log.debug(f"GET {url} params={list(params)}")
        return await asyncio.to_thread(self._get, url, params, timeout or self.request_timeout)

    def close(self):
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()
