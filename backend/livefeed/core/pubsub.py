# livefeed/core/pubsub.py
"""
PubSub (Publish-Subscribe) module for WebSocket fan-out of new posts.
Keeps the set of live observer connections and pushes every newly committed
post to all of them in commit order.
"""
import json
import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Protocol

logger = logging.getLogger("uvicorn.error")

NEW_ENTRY_EVENT = "newEntry"


class Connection(Protocol):
    """Anything that can push a text frame to one client (a Starlette WebSocket)."""

    async def send_text(self, data: str) -> None: ...


class Observer:
    """
    One registered connection plus its outbound buffer.

    The hub only ever enqueues (never awaits the network), so a slow client
    cannot stall the publisher. ``pump()`` drains the buffer onto the connection.
    """

    def __init__(self, hub: "BroadcastHub", connection: Connection, queue_size: int):
        self.hub = hub
        self.connection = connection
        self.queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
        self.closed = False
        self.dropped = asyncio.Event()  # set once the hub lets go of this observer

    def _close(self) -> None:
        self.closed = True
        self.dropped.set()

    def offer(self, message: str) -> bool:
        """Enqueue without blocking; False means the buffer is full."""
        if self.closed:
            return False
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    async def pump(self) -> None:
        """
        Deliver buffered messages until the connection breaks or the task is cancelled.
        A failed send unregisters the observer.
        """
        while not self.closed:
            message = await self.queue.get()
            if self.closed:
                return
            try:
                await self.connection.send_text(message)
            except Exception as e:
                logger.warning("[pubsub] delivery failed, dropping observer: %r", e)
                self.hub.unregister(self.connection)
                return


class BroadcastHub:
    """
    Live set of observer connections with at-most-once fan-out.

    - register / unregister / publish are serialized by one lock; they must be
      called from the event loop thread (asyncio.Queue is not thread-safe)
    - observers registered after a publish never see that entry (no replay)
    - unregister is idempotent
    - an observer whose buffer is full is dropped instead of blocking others;
      its ``dropped`` event fires so the transport can be closed

    Data structure:
    - _observers: Dict[connection, Observer], insertion ordered
    """

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._observers: Dict[Any, Observer] = {}
        self._lock = threading.Lock()

    # -------- register / unregister (no accept, only bookkeeping) --------
    def register(self, connection: Connection) -> Observer:
        with self._lock:
            observer = self._observers.get(connection)
            if observer is None:
                observer = Observer(self, connection, self._queue_size)
                self._observers[connection] = observer
        return observer

    def unregister(self, connection: Connection) -> None:
        with self._lock:
            observer = self._observers.pop(connection, None)
        if observer is not None:
            observer._close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    def __contains__(self, connection: object) -> bool:
        with self._lock:
            return connection in self._observers

    @asynccontextmanager
    async def session(self, connection: Connection) -> AsyncIterator[Observer]:
        """Register for the lifetime of the block; always unregisters on exit."""
        observer = self.register(connection)
        try:
            yield observer
        finally:
            self.unregister(connection)

    # -------- publish --------
    def publish(self, entry: dict) -> int:
        """
        Enqueue a ``newEntry`` event for every currently registered observer.

        Returns the number of observers the event was queued for. Never raises
        on behalf of an observer; full or closed observers are unregistered.
        """
        msg = json.dumps({"type": NEW_ENTRY_EVENT, "data": entry}, default=str)
        delivered = 0
        dropped = []
        with self._lock:
            for conn, observer in self._observers.items():
                if observer.offer(msg):
                    delivered += 1
                else:
                    dropped.append(conn)
            for conn in dropped:
                gone = self._observers.pop(conn, None)
                if gone is not None:
                    gone._close()
        if dropped:
            logger.warning("[pubsub] dropped %d observer(s) with full buffers", len(dropped))
        return delivered
