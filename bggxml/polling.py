# bggxml/polling.py
"""
The request/retry state machine.

BGG answers some requests (notably ``/collection``) with HTTP 202 and a
``<message>`` body while it builds the result in the background. The poller
re-issues such requests with exponential backoff until real data arrives or
the attempt budget runs out::

    PENDING -> ISSUED -> SUCCESS
                      -> RETRYABLE -> ISSUED ...
                      -> FAILED
"""
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple
import asyncio
import enum
import logging
import re

from .exceptions import BGGHTTPError, BGGTimeoutError

log = logging.getLogger(__name__)

# "Your request for this collection has been accepted and will be processed..."
_PROCESSING_MARKER = re.compile(rb"^\s*(<\?xml[^>]*\?>\s*)?<message[\s>]")


class PollState(enum.Enum):
    PENDING = "pending"
    ISSUED = "issued"
    SUCCESS = "success"
    RETRYABLE = "retryable"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounds for the async-poll protocol.

    Args:
        max_attempts (int): Total number of requests issued before giving up.
        initial_backoff (float): Delay in seconds before the first retry.
        backoff_factor (float): Multiplier applied to the delay after each retry.
        max_backoff (float): Upper bound for any single delay, including Retry-After hints.
    """

    max_attempts: int = 10
    initial_backoff: float = 2.0
    backoff_factor: float = 2.0
    max_backoff: float = 60.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_backoff < 0 or self.max_backoff < 0:
            raise ValueError("backoff delays must not be negative")

    def delay_for(self, attempt: int, retry_after: Optional[str] = None) -> float:
        """Delay before re-issuing after the given (1-based) attempt."""
        if retry_after is not None and retry_after.strip().isdigit():
            return min(self.max_backoff, float(retry_after))
        return min(self.max_backoff, self.initial_backoff * self.backoff_factor ** (attempt - 1))


def is_still_processing(status_code: int, content: bytes) -> bool:
    return status_code == 202 or (200 <= status_code < 300 and bool(_PROCESSING_MARKER.match(content)))


class RequestPoller:
    """Runs one request through the state machine. Holds no state between calls."""

    def __init__(self, transport, base_url: str, policy: RetryPolicy):
        self.transport = transport
        self.base_url = base_url
        self.policy = policy

    def classify(self, status_code: int, content: bytes, poll: bool) -> PollState:
        if poll and is_still_processing(status_code, content):
            return PollState.RETRYABLE
        if 200 <= status_code < 300 and status_code != 202:
            return PollState.SUCCESS
        return PollState.FAILED

    async def fetch(self, path: str, params: Sequence[Tuple[str, str]], poll: bool = False) -> bytes:
        """
        Issues a GET request and returns the body of the first real answer.

        Args:
            path (str): Endpoint path below the base URL, e.g. "collection".
            params: Ordered query parameters.
            poll (bool): Whether the endpoint uses the async-poll protocol.

        Raises:
            BGGHTTPError: For any status the state machine does not accept.
            BGGTimeoutError: If BGG is still processing after ``max_attempts`` requests.
            BGGNetworkError: Propagated unchanged from the transport.
        """
        url = f"{self.base_url}/{path}"
        attempts = self.policy.max_attempts if poll else 1
        log.debug(f"{url}: {PollState.PENDING.value}")

        for attempt in range(1, attempts + 1):
            state = PollState.ISSUED
            log.debug(f"{url}: {state.value} (attempt {attempt}/{attempts})")
            response = await self.transport.get(self.base_url, path, params)

            state = self.classify(response.status_code, response.content, poll)
            log.debug(f"{url}: {state.value} with HTTP {response.status_code}")

            if state is PollState.SUCCESS:
                return response.content
            if state is PollState.FAILED:
                raise BGGHTTPError(response.status_code, url)

            if attempt == attempts:
                break
            delay = self.policy.delay_for(attempt, _retry_after(response.headers))
            log.warning(
                f"BGG is still processing {url}. Retrying in {delay}s... (Attempt {attempt}/{attempts})"
            )
            await asyncio.sleep(delay)

        raise BGGTimeoutError(attempts, url)


def _retry_after(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    if not headers:
        return None
    for name, value in headers.items():
        if name.lower() == "retry-after":
            return value
    return None
