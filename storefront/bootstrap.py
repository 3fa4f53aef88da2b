import asyncio
import enum
import logging
import threading
from typing import Any, Awaitable, Callable, Optional

from sqlalchemy import func, insert, select

from storefront.database import Base, StoreHandle
from storefront.models.product import Product
from storefront.retry import RetryExhaustedError, RetryPolicy, retry_with_timeout
from storefront.seed import SAMPLE_PRODUCTS

logger = logging.getLogger(__name__)


class AttemptCancelledError(Exception):
    """Exception raised inside a worker whose attempt was abandoned; rolls it back."""
    pass


class InitState(str, enum.Enum):
    """Lifecycle of the startup database initialization."""
    PENDING = "pending"
    NO_CONNECTION = "no_connection"
    ATTEMPTING = "attempting"
    READY = "ready"
    EXHAUSTED = "exhausted"


class DatabaseInitializer:
    """
    Brings the store to a usable state at startup, or decides to run degraded.

    STATE MACHINE:
    ==============
    PENDING -> NO_CONNECTION                 no connection string configured
    PENDING -> ATTEMPTING(1..n) -> READY     schema ensured, catalog seeded if empty
    PENDING -> ATTEMPTING(1..n) -> EXHAUSTED every attempt failed or timed out

    NO_CONNECTION, READY and EXHAUSTED are terminal. Only READY marks the
    store handle as available. Store failures never escape ``run()``: the HTTP
    surface must stay reachable for health reporting even without a database.

    Each attempt runs in a worker thread and performs, in one transaction:
    1. CREATE TABLE IF NOT EXISTS products
    2. SELECT COUNT(*) FROM products
    3. One INSERT per sample product, only when the count is exactly 0

    A timed out attempt is rolled back and its worker joined before the next
    attempt starts or the state settles, so two attempts never seed at once.
    """

    def __init__(
        self,
        store: StoreHandle,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.store = store
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.state = InitState.PENDING
        self.attempts = 0
        self.seeded = False
        self.last_error: Optional[BaseException] = None

    async def run(self) -> InitState:
        """
        Run the initialization once.

        Returns:
            The terminal state reached
        """
        if not self.store.configured:
            logger.warning("Database pool not available, running in fallback mode")
            self.state = InitState.NO_CONNECTION
            self.store.mark_unavailable()
            return self.state

        try:
            self.seeded = await retry_with_timeout(
                self._attempt,
                self.policy,
                sleep=self.sleep,
                on_failure=self._log_failure,
            )
        except RetryExhaustedError as e:
            self.last_error = e.last_error
            self.state = InitState.EXHAUSTED
            self.store.mark_unavailable()
            logger.warning(
                "Database initialization failed after all retries, "
                "application will run in fallback mode"
            )
            return self.state

        self.state = InitState.READY
        self.store.mark_ready()
        logger.info("Database initialization completed")
        return self.state

    async def _attempt(self) -> bool:
        self.attempts += 1
        self.state = InitState.ATTEMPTING
        logger.info(
            f"Initializing database... (attempt {self.attempts}/{self.policy.max_attempts})"
        )
        return await self._run_attempt()

    async def _run_attempt(self) -> bool:
        """
        Run ``_prepare_store`` in a worker thread.

        When the attempt is cancelled (timeout), the worker is told to roll
        back and is awaited before the cancellation propagates, so no later
        attempt can overlap with it. A worker that committed before noticing
        the cancellation is reported as a success.
        """
        cancelled = threading.Event()
        worker = asyncio.ensure_future(asyncio.to_thread(self._prepare_store, cancelled))

        try:
            return await asyncio.shield(worker)
        except asyncio.CancelledError:
            cancelled.set()
            try:
                seeded = await worker
            except AttemptCancelledError:
                logger.info(f"Attempt {self.attempts} rolled back")
                raise asyncio.CancelledError()
            except Exception as e:
                logger.error(f"Attempt {self.attempts} failed while cancelling: {e}")
                raise asyncio.CancelledError()
            logger.info(f"Attempt {self.attempts} committed before it could be cancelled")
            return seeded

    def _prepare_store(self, cancelled: threading.Event) -> bool:
        """Ensure the schema exists and seed it if empty. Returns True if rows were inserted."""
        with self.store.engine.begin() as conn:
            Base.metadata.create_all(bind=conn, checkfirst=True)

            count = conn.execute(select(func.count()).select_from(Product)).scalar_one()
            if count != 0:
                logger.info(f"Products table already holds {count} rows, skipping seed")
                return False

            for product in SAMPLE_PRODUCTS:
                if cancelled.is_set():
                    raise AttemptCancelledError("Attempt cancelled before seeding completed")
                conn.execute(insert(Product).values(**product))

            # Leaving the block commits; an exception here rolls the seed back
            if cancelled.is_set():
                raise AttemptCancelledError("Attempt cancelled before commit")

        logger.info("Sample products inserted successfully")
        return True

    def _log_failure(self, attempt: int, error: BaseException) -> None:
        self.last_error = error
        logger.error(
            f"Error initializing database (attempt {attempt}/{self.policy.max_attempts}): {error}"
        )
