"""Pooled connection acquisition with a fixed retry budget."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

from foodie.core.errors import AcquisitionCancelled, PoolExhausted

logger = logging.getLogger(__name__)

RETRY_LIMIT = 5
RETRY_DELAY_SEC = 3.0
ACQUIRE_TIMEOUT_SEC = 15.0

# Checkout timeouts and unreachable-database errors are worth another attempt.
TRANSIENT_ERRORS = (PoolTimeoutError, OperationalError)


class ConnectionAccessor:
    """Hands out pooled connections, retrying transient failures.

    Every attempt is a plain ``engine.connect()``; between failed attempts the
    accessor sleeps ``retry_delay`` seconds. After ``retry_limit`` failed
    attempts :class:`PoolExhausted` is raised. No jitter, no exponential growth.

    All attempts share one deadline, ``acquire_timeout`` seconds after the
    first. No new attempt starts once it has passed and backoff sleeps are cut
    short at it, so the wait is bounded by ``acquire_timeout`` plus a single
    pool checkout timeout regardless of how long each checkout blocks.

    If ``cancel_event`` is set while sleeping, :class:`AcquisitionCancelled`
    is raised immediately instead of finishing the budget.
    """

    def __init__(
        self,
        engine: Engine,
        retry_limit: int = RETRY_LIMIT,
        retry_delay: float = RETRY_DELAY_SEC,
        cancel_event: threading.Event | None = None,
        acquire_timeout: float = ACQUIRE_TIMEOUT_SEC,
    ) -> None:
        if retry_limit < 1:
            raise ValueError("retry_limit must be at least 1")
        self.engine = engine
        self.retry_limit = retry_limit
        self.retry_delay = retry_delay
        self.cancel_event = cancel_event
        self.acquire_timeout = acquire_timeout

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def with_cancellation(self, cancel_event: threading.Event) -> "ConnectionAccessor":
        """Return an accessor on the same engine that honours ``cancel_event``."""
        return ConnectionAccessor(
            self.engine,
            retry_limit=self.retry_limit,
            retry_delay=self.retry_delay,
            cancel_event=cancel_event,
            acquire_timeout=self.acquire_timeout,
        )

    def _backoff(self, delay: float) -> None:
        if self.cancel_event is None:
            time.sleep(delay)
            return
        if self.cancel_event.wait(delay):
            raise AcquisitionCancelled("Connection acquisition cancelled by caller")

    def connect(self) -> Connection:
        """Check a connection out of the pool or raise PoolExhausted."""
        deadline = time.monotonic() + self.acquire_timeout
        last_error: BaseException | None = None
        attempts = 0
        while attempts < self.retry_limit:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise AcquisitionCancelled("Connection acquisition cancelled by caller")
            attempts += 1
            try:
                return self.engine.connect()
            except TRANSIENT_ERRORS as exc:
                last_error = exc
                if attempts == self.retry_limit:
                    break
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(
                        "Connection acquisition deadline of %ss passed after %d attempts",
                        self.acquire_timeout,
                        attempts,
                    )
                    break
                logger.warning(
                    "Failed to retrieve database connection (attempt %d/%d) due to: %s, retrying in %ss",
                    attempts,
                    self.retry_limit,
                    exc,
                    self.retry_delay,
                )
                self._backoff(min(self.retry_delay, remaining))

        logger.error(
            "Failed to retrieve a valid connection from the pool after %d attempts: %s",
            attempts,
            last_error,
        )
        raise PoolExhausted(attempts, last_error)

    @contextmanager
    def acquire(self) -> Iterator[Connection]:
        """Yield a pooled connection and return it to the pool afterwards."""
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()
