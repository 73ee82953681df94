"""
Periodic incident refresh from the NT Road Report feed
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol

from saferoute.planning.algorithms.routing.types import Incident
from .repository import InMemoryIncidentRepository

logger = logging.getLogger(__name__)


class IncidentFeed(Protocol):
    async def fetch_incidents(self) -> List[Incident]:
        ...


class IncidentRefresher:
    """Replaces the repository snapshot on a fixed interval."""

    def __init__(
        self,
        feed: IncidentFeed,
        repository: InMemoryIncidentRepository,
        interval_s: float = 300,
    ) -> None:
        self._feed = feed
        self._repository = repository
        self._interval_s = interval_s
        self._task: Optional[asyncio.Task] = None

    async def refresh_once(self) -> int:
        """
        Fetch and replace. An empty fetch keeps the previous snapshot,
        since the feed client reports failures as an empty list.
        """
        incidents = await self._feed.fetch_incidents()
        if not incidents:
            logger.warning("incident feed returned nothing, keeping previous snapshot")
            return 0
        return self._repository.replace_all(incidents)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            try:
                count = await self.refresh_once()
                logger.info(f"refreshed {count} incidents")
            except Exception as e:
                logger.error(f"incident refresh failed: {e}", exc_info=True)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
