"""
Backend Client Module

This module talks to the forwarding module (Dispatcher or Collector) whose
counters and configuration the dashboard displays. It offers the two call
shapes the dashboard needs:

* awaited calls (``stats``, ``get_config``, ``reload_config``), whose
  completion the caller observes before continuing, and
* dispatched calls (``dispatch``), which are scheduled on the event loop and
  never awaited by the caller.

Failed calls are logged and reported as ``None``/``False``; they never raise.

Classes:
    BackendClient: aiohttp client for the module's stats and config endpoints
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Optional, Set

import aiohttp

logger = logging.getLogger(__name__)


class BackendClient:
    """
    Client for the forwarding module's remote endpoints.

    All endpoints live under ``base_url`` and are invoked as POST requests
    with a JSON body, the transport the module exposes for its dashboard.

    Attributes:
        base_url (str): Base URL of the module endpoints, ending with a slash
        timeout (float): Total per-request timeout in seconds
        last_error (Optional[str]): Description of the most recent failed call
        failures (int): Number of failed calls since creation
    """

    STATS = "stats"
    GET_CONFIG = "getConfig"
    SAVE_CONFIG = "saveConfig"
    RELOAD_CONFIG = "reloadConfig"

    def __init__(self, base_url: str, timeout: float = 5.0,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Args:
            base_url: Base URL of the module endpoints
            timeout: Total per-request timeout in seconds
            session: Optional externally owned session; when omitted the
                     client creates (and later closes) its own
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.last_error: Optional[str] = None
        self.failures = 0
        self._session = session
        self._owns_session = session is None
        self._pending: Set[asyncio.Task] = set()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self._session

    async def _post(self, endpoint: str, payload: Any = None, expect_json: bool = True) -> Any:
        url = self.base_url + endpoint
        async with self._get_session().post(url, json=payload) as response:
            response.raise_for_status()
            if not expect_json:
                await response.read()
                return None
            return await response.json(content_type=None)

    async def _call(self, endpoint: str, payload: Any = None, expect_json: bool = True) -> Any:
        """
        Invoke an endpoint. Transport, HTTP status and decoding failures are
        logged, recorded in ``last_error`` and reported as ``_FAILED``.
        """
        try:
            result = await self._post(endpoint, payload, expect_json)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self.failures += 1
            self.last_error = f"{endpoint}: {e.__class__.__name__}: {e}".rstrip(": ")
            logger.warning(f"Call to {self.base_url}{endpoint} failed: {self.last_error}")
            return _FAILED
        self.last_error = None
        return result

    async def stats(self) -> Optional[Dict[str, float]]:
        """
        Fetch one sample of the module's counters.

        Returns:
            Optional[Dict[str, float]]: Counter name to value, or None on failure
        """
        result = await self._call(self.STATS)
        if result is _FAILED:
            return None
        if not isinstance(result, dict):
            self._reject(self.STATS, result)
            return None
        return result

    async def get_config(self) -> Optional[Dict[str, Any]]:
        """
        Fetch the module's current configuration.

        Returns:
            Optional[Dict[str, Any]]: Field name to value, or None on failure
        """
        result = await self._call(self.GET_CONFIG)
        if result is _FAILED:
            return None
        if not isinstance(result, dict):
            self._reject(self.GET_CONFIG, result)
            return None
        return result

    async def save_config(self, state: Dict[str, Any]) -> None:
        """Send the whole configuration; the response carries nothing of interest."""
        await self._call(self.SAVE_CONFIG, state, expect_json=False)

    async def reload_config(self) -> bool:
        """
        Ask the module to reload its configuration from its own storage.

        Returns:
            bool: True once the module acknowledged the reload, False on failure
        """
        result = await self._call(self.RELOAD_CONFIG, expect_json=False)
        return result is not _FAILED

    def dispatch(self, call: Awaitable[Any]) -> asyncio.Task:
        """
        Schedule a call without waiting for it (fire-and-forget).

        The task is kept referenced until it finishes so it cannot be garbage
        collected mid-flight, and so :meth:`close` can let it complete.
        """
        task = asyncio.ensure_future(call)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def close(self) -> None:
        """Wait for dispatched calls and close the session if we own it."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _reject(self, endpoint: str, payload: Any) -> None:
        self.failures += 1
        self.last_error = f"{endpoint}: unexpected payload {type(payload).__name__}"
        logger.warning(f"Call to {self.base_url}{endpoint} returned {self.last_error}")


# Sentinel distinguishing a failed call from a successful call returning null
_FAILED = object()
