# sana/services/location.py
import asyncio
import logging
from typing import AsyncIterator, Optional

from ..schemas.common import Coordinate

logger = logging.getLogger(__name__)


class LocationNotAuthorized(Exception):
    pass


class LocationSource:
    """Channel of device positions, gated by a granted/denied authorization."""

    def __init__(self, granted: bool = False):
        self._granted = granted
        self._queue: "asyncio.Queue[Coordinate]" = asyncio.Queue()
        self.last: Optional[Coordinate] = None

    @property
    def granted(self) -> bool:
        return self._granted

    def set_authorization(self, granted: bool) -> None:
        if granted != self._granted:
            logger.info("Location authorization %s", "granted" if granted else "denied")
        self._granted = granted

    def publish(self, coordinate: Coordinate) -> None:
        if not self._granted:
            raise LocationNotAuthorized("location authorization has not been granted")
        self.last = coordinate
        self._queue.put_nowait(coordinate)

    async def positions(self) -> AsyncIterator[Coordinate]:
        while True:
            yield await self._queue.get()
