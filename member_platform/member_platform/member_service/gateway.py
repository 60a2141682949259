"""
User Store Gateway - readiness-gated access to the member store.
"""
from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, defer, sessionmaker
from typing import Optional
import asyncio
import logging

from .connection import ConnectionMonitor, StoreEvent, StoreEventType
from .db import build_engine, init_db
from .errors import DuplicateEmailError, StoreUnavailableError
from .models import User

logger = logging.getLogger(__name__)


class UserStoreGateway:
    """
    Owns the store engine, its background reconnect loop and the user
    operations built on top of it.

    The loop retries at a fixed delay with no backoff growth. Unless
    ``max_attempts`` is set it never gives up.
    """

    def __init__(
        self,
        engine: Engine,
        reconnect_delay: float = 5.0,
        max_attempts: Optional[int] = None,
        attempt_timeout: float = 30.0,
        monitor: Optional[ConnectionMonitor] = None,
    ):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, autoflush=False)
        self.monitor = monitor or ConnectionMonitor()
        self.reconnect_delay = reconnect_delay
        self.max_attempts = max_attempts
        self.attempt_timeout = attempt_timeout

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._events: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None

        event.listen(engine, "handle_error", self._on_engine_error)

    @classmethod
    def from_settings(cls, settings) -> "UserStoreGateway":
        return cls(
            build_engine(settings),
            reconnect_delay=settings.DB_RECONNECT_DELAY_SECONDS,
            max_attempts=settings.DB_RECONNECT_MAX_ATTEMPTS,
            attempt_timeout=settings.DB_SERVER_SELECTION_TIMEOUT_SECONDS,
        )

    # ---------------- Connection lifecycle ----------------

    async def start(self) -> None:
        """Launch the reconnect loop on the running event loop."""
        self._loop = asyncio.get_running_loop()
        self._events = asyncio.Queue()
        self._task = asyncio.create_task(self._reconnect_loop(), name="member-store-reconnect")

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._loop = None
        self.engine.dispose()
        self.monitor.mark_disconnected()
        logger.info("Member store gateway stopped")

    def notify(self, store_event: StoreEvent) -> None:
        """Hand a lifecycle event to the reconnect loop. Safe from any thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._events.put_nowait, store_event)

    def _on_engine_error(self, context) -> None:
        # The pool recovers from stale connections found by pre-ping on its own
        if getattr(context, "is_pre_ping", False):
            return
        if context.is_disconnect:
            self.notify(StoreEvent(StoreEventType.DISCONNECTED, context.original_exception))
        elif isinstance(context.sqlalchemy_exception, OperationalError):
            self.notify(StoreEvent(StoreEventType.ERROR, context.original_exception))

    async def _reconnect_loop(self) -> None:
        while True:
            self.monitor.mark_connecting()
            logger.info("Attempting to connect to the member store (attempt %s)...", self.monitor.attempts)
            outcome = await self._attempt_connection()

            if outcome.type is StoreEventType.CONNECTED:
                self._drain_events()
                self.monitor.mark_connected()
                logger.info("Connected to the member store")

                lost = await self._wait_for_loss()
                self.monitor.mark_disconnected(lost.error)
                logger.warning(
                    "Member store %s: %s. Attempting to reconnect...",
                    lost.type.value, lost.error
                )
                continue

            self.monitor.mark_disconnected(outcome.error)
            logger.error(
                "Member store connection error: %s: %s",
                type(outcome.error).__name__, outcome.error
            )
            if self.max_attempts is not None and self.monitor.attempts >= self.max_attempts:
                logger.error("Giving up on the member store after %s attempts", self.monitor.attempts)
                return

            logger.info("Retrying connection in %s seconds...", self.reconnect_delay)
            await asyncio.sleep(self.reconnect_delay)

    async def _attempt_connection(self) -> StoreEvent:
        try:
            await asyncio.wait_for(asyncio.to_thread(self._ping), timeout=self.attempt_timeout)
        except Exception as e:
            return StoreEvent(StoreEventType.ERROR, e)
        return StoreEvent(StoreEventType.CONNECTED)

    def _ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        init_db(self.engine)

    async def _wait_for_loss(self) -> StoreEvent:
        while True:
            store_event = await self._events.get()
            if store_event.type is not StoreEventType.CONNECTED:
                return store_event

    def _drain_events(self) -> None:
        # Errors raised while we were still connecting are already handled
        while not self._events.empty():
            self._events.get_nowait()

    # ---------------- User operations ----------------

    def ensure_ready(self) -> None:
        if not self.monitor.is_ready:
            raise StoreUnavailableError(self.monitor.state)

    def find_by_email(self, db: Session, email: str) -> Optional[User]:
        self.ensure_ready()
        return db.query(User).filter(User.email == email).first()

    def find_by_id(self, db: Session, user_id: str, exclude_password: bool = False) -> Optional[User]:
        self.ensure_ready()
        query = db.query(User)
        if exclude_password:
            query = query.options(defer(User.password))
        return query.filter(User.id == user_id).first()

    def insert(self, db: Session, user: User) -> User:
        self.ensure_ready()
        db.add(user)
        return self._commit(db, user)

    def save(self, db: Session, user: User) -> User:
        self.ensure_ready()
        db.add(user)
        return self._commit(db, user)

    def _commit(self, db: Session, user: User) -> User:
        email = user.email
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DuplicateEmailError(email) from e
        except SQLAlchemyError:
            db.rollback()
            raise
        db.refresh(user)
        return user
