# src/utils/live_sync.py
"""
Realtime change feed for the letters table.

Supabase Realtime needs the async client, while Streamlit scripts are
synchronous, so the subscription lives on its own daemon thread with a private
event loop. Every insert/update/delete bumps `version`; the admin view polls it
and re-fetches the whole table when it moved. No payload is applied locally.
"""

from __future__ import annotations

import asyncio
import atexit
import contextlib
import logging
import threading
import time
from typing import Any, Awaitable, Callable, Optional

from supabase import acreate_client

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str], Awaitable[Any]]


class ChangeFeed:
    """
    Background subscription to row changes on one table.

    With `idle_timeout` set, the owner must call `touch()` at least that often.
    A feed nobody touches (its browser session ended without leaving the view)
    tears itself down from a watchdog on its own loop.
    """

    def __init__(
        self,
        url: str,
        key: str,
        table: str,
        *,
        schema: str = "public",
        client_factory: ClientFactory = acreate_client,
        stop_timeout: float = 5.0,
        idle_timeout: Optional[float] = None,
        watchdog_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.url = url
        self.key = key
        self.table = table
        self.schema = schema
        self._client_factory = client_factory
        self._stop_timeout = stop_timeout
        self._idle_timeout = idle_timeout
        self._watchdog_interval = watchdog_interval
        self._clock = clock

        self._lock = threading.Lock()
        self._version = 0
        self._last_touch = clock()
        self._ready = threading.Event()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._client: Any = None
        self._channel: Any = None
        self.error: Optional[str] = None
        self.abandoned = False

    # ---------- state ----------
    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def subscribed(self) -> bool:
        return self._channel is not None

    def _on_change(self, payload: Any = None) -> None:
        with self._lock:
            self._version += 1
        logger.debug("change on %s (version %s)", self.table, self._version)

    def touch(self) -> None:
        """Heartbeat from the view that owns this feed."""
        with self._lock:
            self._last_touch = self._clock()

    def idle_for(self) -> float:
        with self._lock:
            return self._clock() - self._last_touch

    # ---------- lifecycle ----------
    def start(self, wait: float = 5.0) -> "ChangeFeed":
        if self.running:
            return self
        self.error = None
        self.abandoned = False
        self.touch()
        self._ready.clear()
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run, name=f"live-{self.table}", daemon=True
        )
        self._thread.start()
        atexit.register(self.stop)
        self._ready.wait(timeout=wait)
        return self

    def _run(self) -> None:
        loop = self._loop
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._subscribe())
        except Exception as e:
            self.error = f"{e.__class__.__name__}: {e}"
            logger.warning("live updates unavailable for %s: %s", self.table, self.error)
            self._ready.set()
            loop.close()
            return
        watchdog = None
        if self._idle_timeout is not None:
            watchdog = loop.create_task(self._watchdog())
        # signal only once the loop is actually running, so stop() can reach it
        loop.call_soon(self._ready.set)
        try:
            loop.run_forever()
        finally:
            if watchdog is not None and not watchdog.done():
                watchdog.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    loop.run_until_complete(watchdog)
            loop.close()
        if self.abandoned:
            with contextlib.suppress(Exception):
                atexit.unregister(self.stop)

    async def _watchdog(self) -> None:
        while True:
            await asyncio.sleep(self._watchdog_interval)
            if self.idle_for() > self._idle_timeout:
                break
        logger.info("no heartbeat for %s in %.0fs, closing change feed", self.table, self._idle_timeout)
        self.abandoned = True
        try:
            await self._unsubscribe()
        except Exception:
            logger.warning("could not remove channel for %s", self.table, exc_info=True)
        asyncio.get_running_loop().stop()

    async def _subscribe(self) -> None:
        self._client = await self._client_factory(self.url, self.key)
        channel = self._client.channel(f"{self.table}-changes")
        channel.on_postgres_changes(
            "*", schema=self.schema, table=self.table, callback=self._on_change
        )
        await channel.subscribe()
        self._channel = channel
        logger.info("subscribed to changes on %s.%s", self.schema, self.table)

    async def _unsubscribe(self) -> None:
        channel, client = self._channel, self._client
        self._channel = None
        self._client = None
        if client is not None and channel is not None:
            await client.remove_channel(channel)

    def stop(self) -> None:
        """Remove the channel and stop the loop thread. Safe to call twice."""
        with contextlib.suppress(Exception):
            atexit.unregister(self.stop)
        loop, thread = self._loop, self._thread
        if loop is None or thread is None:
            return
        if thread.is_alive() and loop.is_running():
            if self._channel is not None:
                fut = asyncio.run_coroutine_threadsafe(self._unsubscribe(), loop)
                try:
                    fut.result(timeout=self._stop_timeout)
                except Exception:
                    logger.warning("could not remove channel for %s", self.table, exc_info=True)
            loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=self._stop_timeout)
        self._channel = None
        self._client = None
        self._loop = None
        self._thread = None
        logger.info("stopped change feed for %s", self.table)
