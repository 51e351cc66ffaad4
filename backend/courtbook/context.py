# backend/courtbook/context.py
"""
Application context: every long-lived service, built once and injected.

Nothing here is a module-level singleton; tests build their own context
against an in-memory database and the in-process change feed.
"""

import logging
from dataclasses import dataclass

from redis.asyncio import Redis as AsyncRedis
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from .config import Settings
from .database import create_db_engine, create_session_factory, init_schema
from .services.live_sync import LiveSyncAdapter, LocalChangeFeed, RedisChangeFeed
from .services.reservations import CancellationService, ReservationEngine, ReservationStore
from .services.roles import RoleStore
from .services.slots import CourtConfig

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    court: CourtConfig
    db_engine: Engine
    session_factory: sessionmaker
    reservations: ReservationStore
    roles: RoleStore
    feed: RedisChangeFeed | LocalChangeFeed
    live_sync: LiveSyncAdapter
    engine: ReservationEngine
    cancellation: CancellationService
    redis: AsyncRedis | None = None

    async def aclose(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
        self.db_engine.dispose()
        logger.info("Application context closed")


def build_context(settings: Settings, *, redis: AsyncRedis | None = None) -> AppContext:
    """
    Wire stores, feed and services from settings.

    Args:
        settings: Application settings
        redis: Ready client to use instead of connecting to settings.redis_url
    """
    court = CourtConfig.from_settings(settings)

    db_engine = create_db_engine(settings.resolved_database_url)
    if settings.auto_create_schema:
        init_schema(db_engine)
    session_factory = create_session_factory(db_engine)

    if redis is None and settings.redis_url:
        redis = AsyncRedis.from_url(settings.redis_url)

    if redis is not None:
        feed = RedisChangeFeed(redis)
    else:
        feed = LocalChangeFeed()

    reservations = ReservationStore(session_factory)
    logger.info(
        f"Context ready: court {court.open_hour:02d}:00-{court.close_hour:02d}:00, "
        f"{court.slots_per_day} slots, {feed.kind} change feed"
    )

    return AppContext(
        settings=settings,
        court=court,
        db_engine=db_engine,
        session_factory=session_factory,
        reservations=reservations,
        roles=RoleStore(session_factory),
        feed=feed,
        live_sync=LiveSyncAdapter(reservations, feed),
        engine=ReservationEngine(reservations, feed, court),
        cancellation=CancellationService(reservations, feed),
        redis=redis,
    )
