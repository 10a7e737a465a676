"""Engine, connection accessor and request-scoped repository factory."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from foodie.core.config import Settings, settings
from foodie.db.pool import ConnectionAccessor
from foodie.services.codec import TimestampCodec
from foodie.services.repository import PlacesRepository


def build_engine(config: Settings) -> Engine:
    """Create the process-wide engine with a bounded QueuePool."""
    url = make_url(str(config.database_url))
    if url.get_backend_name() == "sqlite":
        # SQLite pools don't take sizing arguments.
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=config.db_pool_size,
        max_overflow=0,
        pool_timeout=config.db_checkout_timeout,
        pool_pre_ping=True,
    )


engine = build_engine(settings)
accessor = ConnectionAccessor(
    engine,
    retry_limit=settings.db_retry_limit,
    retry_delay=settings.db_retry_delay_sec,
    acquire_timeout=settings.db_pool_timeout,
)
timestamp_codec = TimestampCodec.from_name(settings.timestamp_format)


def get_repository() -> PlacesRepository:
    """FastAPI dependency returning a repository bound to the shared pool."""
    return PlacesRepository(accessor, timestamp_codec)
