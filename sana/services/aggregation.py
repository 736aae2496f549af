# sana/services/aggregation.py
import asyncio
import logging
from typing import Any, Dict, List, Optional, Set

from ..schemas.common import AggregationSnapshot, Coordinate, FetchResult, MetricKind
from ..utils.http import TransportError
from .decoder import DecodeError, decode_reading
from .location import LocationSource
from .quality_client import QualityClient

logger = logging.getLogger(__name__)

SUBSCRIBER_QUEUE_SIZE = 16


class AggregationState:
    """
    Observable snapshot of the three metric slots for the latest fetch cycle.

    Snapshots are immutable and replaced wholesale on the event loop, so a
    reader always sees one consistent slot per metric. Every mutation bumps
    ``version`` and wakes pollers and subscribers.
    """

    def __init__(self):
        self._snapshot = AggregationSnapshot()
        self._changed = asyncio.Event()
        self._subscribers: Set["asyncio.Queue[AggregationSnapshot]"] = set()

    @property
    def snapshot(self) -> AggregationSnapshot:
        return self._snapshot

    @property
    def cycle(self) -> int:
        return self._snapshot.cycle

    def begin_cycle(self, coordinate: Coordinate) -> int:
        snap = self._snapshot
        cycle = snap.cycle + 1
        # fresh snapshot: all slots pending
        self._publish(AggregationSnapshot(cycle=cycle, version=snap.version + 1, coordinate=coordinate))
        return cycle

    def apply(self, cycle: int, kind: MetricKind, result: FetchResult) -> bool:
        snap = self._snapshot
        if cycle != snap.cycle:
            return False
        self._publish(snap.model_copy(update={kind.value: result, "version": snap.version + 1}))
        return True

    def _publish(self, snap: AggregationSnapshot) -> None:
        self._snapshot = snap
        event, self._changed = self._changed, asyncio.Event()
        event.set()
        for queue in list(self._subscribers):
            if queue.full():
                # slow subscriber: drop the oldest snapshot, the newest always lands
                queue.get_nowait()
            queue.put_nowait(snap)

    async def wait_for_change(self, since: int, timeout: Optional[float] = None) -> AggregationSnapshot:
        while self._snapshot.version <= since:
            try:
                await asyncio.wait_for(self._changed.wait(), timeout)
            except asyncio.TimeoutError:
                break
        return self._snapshot

    def subscribe(self, maxsize: int = SUBSCRIBER_QUEUE_SIZE) -> "asyncio.Queue[AggregationSnapshot]":
        """Queue of published snapshots, bounded to ``maxsize`` (oldest dropped first).

        Call ``unsubscribe`` when done listening.
        """
        queue: "asyncio.Queue[AggregationSnapshot]" = asyncio.Queue(maxsize=maxsize)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: "asyncio.Queue[AggregationSnapshot]") -> None:
        self._subscribers.discard(queue)


class Aggregator:
    """Turns coordinates into fetch cycles and settles each metric into its slot."""

    def __init__(self, client: QualityClient, state: Optional[AggregationState] = None, cancel_superseded: bool = True):
        self.client = client
        self.state = state or AggregationState()
        self.cancel_superseded = cancel_superseded
        self._fetches: Dict[MetricKind, "asyncio.Task[Any]"] = {}
        self._settles: List["asyncio.Task[None]"] = []

    def on_coordinate(self, coordinate: Coordinate) -> int:
        if self.cancel_superseded:
            for task in self._fetches.values():
                if not task.done():
                    task.cancel()
        cycle = self.state.begin_cycle(coordinate)
        logger.info("Fetch cycle %d at (%.4f, %.4f)", cycle, coordinate.latitude, coordinate.longitude)
        self._fetches = self.client.fetch_all(coordinate)
        self._settles = [
            asyncio.create_task(self._settle(cycle, kind, task), name=f"settle-{kind.value}-{cycle}")
            for kind, task in self._fetches.items()
        ]
        return cycle

    def refresh(self) -> Optional[int]:
        coordinate = self.state.snapshot.coordinate
        if coordinate is None:
            return None
        return self.on_coordinate(coordinate)

    async def _settle(self, cycle: int, kind: MetricKind, fetch: "asyncio.Task[Any]") -> None:
        await asyncio.wait({fetch})
        if fetch.cancelled():
            logger.debug("%s fetch for cycle %d cancelled", kind.value, cycle)
            return
        try:
            result = FetchResult.ready(decode_reading(kind, fetch.result()))
        except TransportError as e:
            logger.warning("%s fetch failed (cycle %d): %s", kind.value, cycle, e)
            result = FetchResult.failed(f"transport error: {e}")
        except DecodeError as e:
            logger.warning("%s payload rejected (cycle %d): %s", kind.value, cycle, e)
            result = FetchResult.failed(f"decode error: {e}")
        except Exception as e:
            logger.exception("Unexpected error settling %s (cycle %d)", kind.value, cycle)
            result = FetchResult.failed(f"unexpected error: {e}")

        if not self.state.apply(cycle, kind, result):
            logger.info("Discarded stale %s result from cycle %d (current %d)", kind.value, cycle, self.state.cycle)

    async def drain(self) -> None:
        """Wait until every slot of the current cycle has settled."""
        while True:
            settles = self._settles
            await asyncio.gather(*settles, return_exceptions=True)
            if settles is self._settles:
                return

    async def follow(self, source: LocationSource) -> None:
        async for coordinate in source.positions():
            self.on_coordinate(coordinate)

    async def aclose(self) -> None:
        for task in [*self._fetches.values(), *self._settles]:
            task.cancel()
        await asyncio.gather(*self._fetches.values(), *self._settles, return_exceptions=True)
        await self.client.aclose()
