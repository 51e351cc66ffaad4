# backend/courtbook/services/live_sync.py
"""
Live sync: push refreshed reservation snapshots to subscribers of a date.

Change feeds carry only "date X changed" notifications. Subscribers re-read
the full reservation set of the date from the store on every notification,
so consumers always hold a complete snapshot, never a diff.

Two feeds with the same interface:
- RedisChangeFeed: Redis Pub/Sub, channel reservations:day:{date}
- LocalChangeFeed: in-process fan-out (single worker, tests)

Publishing is fire-and-forget: failures are logged, not raised. Records are
already durable when a change is published and every refresh re-reads them.
"""

import asyncio
import inspect
import json
import logging
import time
from collections import defaultdict
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass
from datetime import date
from typing import AsyncIterator, Awaitable, Callable

from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from ..schemas.reservations import ReservationRead
from .reservations.errors import PersistenceFailure
from .reservations.store import ReservationStore

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "reservations:day"
EVENT_TYPE = "reservations.changed"


def day_channel(day: date) -> str:
    return f"{CHANNEL_PREFIX}:{day.isoformat()}"


def _change_event(day: date, reason: str) -> dict:
    return {
        "type": EVENT_TYPE,
        "date": day.isoformat(),
        "reason": reason,
        "ts": int(time.time()),
    }


# ── Change feeds ─────────────────────────────────────────────────────────


class RedisChangeFeed:
    """Change notifications over Redis Pub/Sub."""

    kind = "redis"

    def __init__(self, redis: AsyncRedis):
        self.redis = redis

    async def publish(self, day: date, reason: str) -> int:
        """
        Notify subscribers of `day`.

        Returns:
            Number of subscribers reached (0 on failure)
        """
        channel = day_channel(day)
        try:
            receivers = await self.redis.publish(channel, json.dumps(_change_event(day, reason)))
            logger.debug(f"Change published: {reason} → {channel} ({receivers} subscribers)")
            return receivers
        except Exception as e:
            logger.error(f"Failed to publish change to {channel}: {e}")
            return 0

    @asynccontextmanager
    async def listen(self, day: date) -> AsyncIterator[AsyncIterator[dict]]:
        """
        Subscribe to `day`. Yields an async iterator of change events.

        The channel is subscribed before the context body runs, so a change
        published after entering is never missed.
        """
        channel = day_channel(day)
        pubsub = self.redis.pubsub()
        try:
            try:
                await pubsub.subscribe(channel)
            except RedisError as e:
                logger.error(f"Failed to subscribe to {channel}: {e}")
                raise PersistenceFailure("Live updates are unavailable. Please try again.") from e
            logger.info(f"Subscribed to channel: {channel}")
            yield self._events(pubsub)
        finally:
            try:
                await pubsub.unsubscribe(channel)
            except RedisError as e:
                logger.warning(f"Failed to unsubscribe from {channel}: {e}")
            await pubsub.aclose()
            logger.info(f"Unsubscribed from channel: {channel}")

    @staticmethod
    async def _events(pubsub) -> AsyncIterator[dict]:
        try:
            async for message in RedisChangeFeed._messages(pubsub):
                yield message
        except RedisError as e:
            logger.error(f"Change feed connection lost: {e}")
            raise PersistenceFailure("Live updates were interrupted. Please reconnect.") from e

    @staticmethod
    async def _messages(pubsub) -> AsyncIterator[dict]:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            data = message["data"]
            if isinstance(data, bytes):
                data = data.decode()
            try:
                yield json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON in change event: {data!r}")


class LocalChangeFeed:
    """
    In-process change notifications (one event loop, one worker).

    Each listener holds at most one pending event: consumers re-read the
    whole day anyway, so further changes collapse into the queued one.
    """

    kind = "local"

    def __init__(self):
        self._listeners: dict[str, set[asyncio.Queue]] = defaultdict(set)

    async def publish(self, day: date, reason: str) -> int:
        channel = day_channel(day)
        queues = list(self._listeners.get(channel, ()))
        event = _change_event(day, reason)
        for queue in queues:
            with suppress(asyncio.QueueFull):
                queue.put_nowait(event)
        return len(queues)

    @asynccontextmanager
    async def listen(self, day: date) -> AsyncIterator[AsyncIterator[dict]]:
        channel = day_channel(day)
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._listeners[channel].add(queue)
        try:
            yield self._drain(queue)
        finally:
            listeners = self._listeners.get(channel)
            if listeners is not None:
                listeners.discard(queue)
                if not listeners:
                    del self._listeners[channel]

    @staticmethod
    async def _drain(queue: asyncio.Queue) -> AsyncIterator[dict]:
        while True:
            yield await queue.get()

    def listener_count(self, day: date) -> int:
        return len(self._listeners.get(day_channel(day), ()))


# ── Snapshots & subscriptions ────────────────────────────────────────────


@dataclass(frozen=True)
class DaySnapshot:
    """Full reservation set of a date as of one refresh."""
    date: date
    reservations: tuple[ReservationRead, ...]
    version: int


OnChange = Callable[[DaySnapshot], Awaitable[None] | None]


class Subscription:
    """Handle returned by LiveSyncAdapter.subscribe()."""

    def __init__(self, day: date, task: asyncio.Task):
        self.date = day
        self._task = task

    @property
    def active(self) -> bool:
        return not self._task.done()

    async def unsubscribe(self) -> None:
        if self._task.done():
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task


class LiveSyncAdapter:
    """Turns change notifications into full snapshots for one date."""

    def __init__(self, store: ReservationStore, feed: RedisChangeFeed | LocalChangeFeed):
        self.store = store
        self.feed = feed

    async def snapshot(self, day: date, version: int = 0) -> DaySnapshot:
        reservations = await asyncio.to_thread(self.store.for_date, day)
        return DaySnapshot(date=day, reservations=tuple(reservations), version=version)

    async def stream(self, day: date) -> AsyncIterator[DaySnapshot]:
        """
        Initial snapshot, then one fresh snapshot per change of `day`.

        A failed refresh is logged and skipped; the next change retries.
        The initial read is not skipped: its failure propagates.
        """
        async with self.feed.listen(day) as events:
            version = 1
            yield await self.snapshot(day, version)

            async for event in events:
                try:
                    snap = await self.snapshot(day, version + 1)
                except PersistenceFailure:
                    logger.warning(f"Snapshot refresh failed for {day} after {event.get('reason')}")
                    continue
                version = snap.version
                yield snap

    async def subscribe(self, day: date, on_change: OnChange) -> Subscription:
        """
        Deliver the current snapshot of `day` to on_change, then every refresh.

        Returns once the initial snapshot has been delivered. A failure of
        that first delivery is raised here; later on_change failures are
        logged and the subscription keeps running.
        """
        ready = asyncio.Event()

        async def _deliver(snap: DaySnapshot) -> None:
            result = on_change(snap)
            if inspect.isawaitable(result):
                await result

        async def _run() -> None:
            try:
                async for snap in self.stream(day):
                    if not ready.is_set():
                        await _deliver(snap)
                        ready.set()
                        continue
                    try:
                        await _deliver(snap)
                    except Exception:
                        logger.exception(f"on_change failed for {day} snapshot v{snap.version}")
            finally:
                ready.set()

        task = asyncio.create_task(_run(), name=f"live-sync:{day.isoformat()}")
        task.add_done_callback(_log_task_failure)
        await ready.wait()

        if task.done() and not task.cancelled():
            # Initial delivery failed
            task.result()

        return Subscription(day, task)


def _log_task_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Live sync subscription {task.get_name()} stopped: {exc!r}")


class DayWatch:
    """
    Follows one date at a time.

    Switching dates unsubscribes the previous date first, so on_change never
    sees snapshots of a date the caller has left.
    """

    def __init__(self, adapter: LiveSyncAdapter, on_change: OnChange):
        self._adapter = adapter
        self._on_change = on_change
        self._subscription: Subscription | None = None

    @property
    def date(self) -> date | None:
        return self._subscription.date if self._subscription else None

    async def show(self, day: date) -> None:
        if self._subscription is not None and self._subscription.date == day and self._subscription.active:
            return
        await self.close()
        self._subscription = await self._adapter.subscribe(day, self._on_change)

    async def close(self) -> None:
        if self._subscription is not None:
            await self._subscription.unsubscribe()
            self._subscription = None
