"""Polling of the VPS stats endpoint into the dashboard state."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx

from .models import StatsSnapshot

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Could not connect to Bill"


class StatsFetchError(Exception):
    """The stats endpoint could not be reached or returned bad data."""


@dataclass
class DashboardState:
    """Latest snapshot plus fetch bookkeeping.

    Only the poller writes to this. Every write carries the sequence
    number of the request that produced it, and results from requests
    older than the last applied one are dropped, so a slow response can
    never overwrite a newer one.
    """

    snapshot: StatsSnapshot | None = None
    last_fetch: datetime | None = None
    fetch_error: str | None = None
    applied_seq: int = 0

    def apply_snapshot(self, seq: int, snapshot: StatsSnapshot, fetched_at: datetime) -> bool:
        """Replace the snapshot and clear the error. Returns False if stale."""
        if seq < self.applied_seq:
            return False
        self.applied_seq = seq
        self.snapshot = snapshot
        self.last_fetch = fetched_at
        self.fetch_error = None
        return True

    def apply_error(self, seq: int, message: str) -> bool:
        """Record a failed fetch, keeping the previous snapshot. Returns False if stale."""
        if seq < self.applied_seq:
            return False
        self.applied_seq = seq
        self.fetch_error = message
        return True


class StatsPoller:
    """Fetches stats snapshots on a fixed interval.

    ``refresh()`` always starts a request; ``tick()`` is what the timer
    calls and skips when a request is still in flight, so a slow network
    cannot pile up concurrent requests.
    """

    def __init__(
        self,
        url: str,
        state: DashboardState,
        interval: float = 5.0,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the poller.

        Args:
            url: Full URL of the stats endpoint.
            state: State object to write results into.
            interval: Seconds between timer ticks.
            timeout: Per-request timeout in seconds.
            client: HTTP client to use. One is created if not given.
        """
        self.url = url
        self.state = state
        self.interval = interval
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._next_seq = 0
        self._in_flight = 0
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> bool:
        return self._in_flight > 0

    async def fetch_snapshot(self) -> StatsSnapshot:
        """Fetch and parse one snapshot.

        Raises:
            StatsFetchError: On network errors, non-200 responses or
                malformed payloads.
        """
        try:
            response = await self._client.get(self.url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            raise StatsFetchError(f"Request to {self.url} failed: {e!r}") from e

        if response.status_code != 200:
            raise StatsFetchError(f"Stats endpoint returned {response.status_code}")

        try:
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return StatsSnapshot.from_dict(data)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise StatsFetchError(f"Malformed stats payload: {e}") from e

    async def refresh(self) -> bool:
        """Fetch a snapshot now and apply it unless a newer result landed first.

        Returns:
            True if the fetch succeeded and was applied.
        """
        self._next_seq += 1
        seq = self._next_seq
        self._in_flight += 1
        try:
            snapshot = await self.fetch_snapshot()
        except StatsFetchError as e:
            logger.warning(f"Stats fetch #{seq} failed: {e}")
            if not self.state.apply_error(seq, FETCH_ERROR_MESSAGE):
                logger.debug(f"Discarded stale failure of fetch #{seq}")
            return False
        finally:
            self._in_flight -= 1

        applied = self.state.apply_snapshot(seq, snapshot, datetime.now(timezone.utc))
        if not applied:
            logger.debug(
                f"Discarded stale snapshot from fetch #{seq} "
                f"(already applied #{self.state.applied_seq})"
            )
        return applied

    async def tick(self) -> bool:
        """Timer callback: refresh unless a request is still running."""
        if self.in_flight:
            logger.debug("Skipping stats poll, previous request still in flight")
            return False
        try:
            return await self.refresh()
        except Exception:
            logger.exception("Unexpected error while polling stats")
            return False

    async def run(self) -> None:
        """Poll forever: once immediately, then every ``interval`` seconds."""
        logger.info(f"Polling {self.url} every {self.interval}s")
        while True:
            task = asyncio.create_task(self.tick())
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            await asyncio.sleep(self.interval)

    async def aclose(self) -> None:
        """Cancel pending ticks and close the HTTP client if we own it."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._owns_client:
            await self._client.aclose()
