"""
Resilient JSON fetch engine for Reddit's public endpoints.

HttpClient performs a GET bounded by a fixed timeout, classifies non-2xx
responses into ErrorKind values and retries transient failures (429, 5xx,
transport and parse errors) with exponential backoff. A single retry
counter is shared by all retriable paths.
"""

import asyncio
import os
from typing import Any, Awaitable, Callable, NamedTuple, Optional

import httpx

from reddit_mcp.reddit.exceptions import ErrorKind, UpstreamError
from reddit_mcp.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_RETRIES = 2
DEFAULT_BASE_DELAY_SECONDS = 0.35


class JsonResponse(NamedTuple):
    """Parsed body and response headers of a successful fetch."""

    data: Any
    headers: httpx.Headers


class _RetriableStatus(Exception):
    """Internal signal for a 429/5xx response that may be retried."""

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"HTTP {status}")


class HttpClient:
    """
    GET-only JSON client with retry and typed error classification.

    Configuration is fixed at construction; the client holds no other
    state, so one instance can serve concurrent calls.

    Attributes:
        user_agent: Value of the User-Agent header sent with every request
        timeout: Per-attempt timeout in seconds
        retries: Number of retries after the first attempt
        base_delay: Backoff base in seconds; retry n waits base_delay * 2**n

    Example:
        >>> http = HttpClient(retries=1)
        >>> response = await http.fetch_json("https://www.reddit.com/r/python/hot.json")
        >>> response.data["data"]["children"][0]["kind"]
        't3'
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retries: int = DEFAULT_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize HttpClient.

        Args:
            user_agent: User-Agent header (default: REDDIT_USER_AGENT env var,
                then a browser-like string)
            timeout: Per-attempt timeout in seconds (default: 10)
            retries: Retry budget shared by status and exception paths (default: 2)
            base_delay: Backoff base in seconds (default: 0.35)
            transport: Optional httpx transport, used by tests
            sleep: Coroutine used for backoff waits, used by tests
        """
        self.user_agent = (
            user_agent or os.getenv("REDDIT_USER_AGENT") or DEFAULT_USER_AGENT
        )
        self.timeout = timeout
        self.retries = retries
        self.base_delay = base_delay
        self._transport = transport
        self._sleep = sleep

    async def fetch_json(self, url: str) -> JsonResponse:
        """
        Fetch ``url`` and return its parsed JSON body and headers.

        Args:
            url: Absolute URL to GET

        Returns:
            JsonResponse with the decoded body and response headers

        Raises:
            UpstreamError: NOT_FOUND/FORBIDDEN/UPSTREAM_BLOCKED immediately;
                RATE_LIMITED/UPSTREAM_ERROR/NETWORK_ERROR once the retry
                budget is spent
        """
        attempt = 0

        while attempt <= self.retries:
            try:
                return await self._attempt(url)

            except UpstreamError:
                raise

            except _RetriableStatus as exc:
                if attempt < self.retries:
                    await self._backoff(url, attempt, reason=f"status_{exc.status}")
                    attempt += 1
                    continue

                logger.warning(
                    "upstream_retries_exhausted",
                    url=url,
                    status=exc.status,
                    attempts=attempt + 1,
                )
                if exc.status == 429:
                    raise UpstreamError(
                        "Rate limited by Reddit",
                        ErrorKind.RATE_LIMITED,
                        status=429,
                        retriable=True,
                    ) from exc
                raise UpstreamError(
                    "Upstream server error",
                    ErrorKind.UPSTREAM_ERROR,
                    status=exc.status,
                    retriable=True,
                ) from exc

            except Exception as exc:
                if attempt < self.retries:
                    await self._backoff(url, attempt, reason=type(exc).__name__)
                    attempt += 1
                    continue

                logger.warning(
                    "upstream_retries_exhausted",
                    url=url,
                    error=str(exc),
                    error_type=type(exc).__name__,
                    attempts=attempt + 1,
                )
                raise UpstreamError(
                    str(exc) or "Network failure",
                    ErrorKind.NETWORK_ERROR,
                    retriable=True,
                ) from exc

        raise UpstreamError(
            "Retry budget exhausted", ErrorKind.UPSTREAM_ERROR, retriable=True
        )

    async def _attempt(self, url: str) -> JsonResponse:
        """Run a single request and classify its outcome."""
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
        ) as client:
            try:
                response = await asyncio.wait_for(
                    client.get(url, headers=headers), timeout=self.timeout
                )
            except asyncio.TimeoutError as exc:
                raise httpx.TimeoutException(
                    f"Request timed out after {self.timeout}s"
                ) from exc

        status = response.status_code

        if response.is_success:
            logger.debug("upstream_request_succeeded", url=url, status=status)
            return JsonResponse(data=response.json(), headers=response.headers)

        if status == 404:
            raise UpstreamError(
                "Resource not found", ErrorKind.NOT_FOUND, status=404
            )

        if status == 403:
            raise UpstreamError(
                "Upstream forbidden", ErrorKind.FORBIDDEN, status=403
            )

        if status == 429 or 500 <= status < 600:
            raise _RetriableStatus(status)

        raise UpstreamError(
            f"Unexpected upstream status: {status}",
            ErrorKind.UPSTREAM_BLOCKED,
            status=status,
        )

    async def _backoff(self, url: str, attempt: int, reason: str) -> None:
        delay = self.base_delay * (2 ** attempt)
        logger.warning(
            "upstream_retry_scheduled",
            url=url,
            attempt=attempt,
            delay_seconds=delay,
            reason=reason,
        )
        await self._sleep(delay)
