import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from starrocks_connector.common.settings import Settings

from .stream_load import StreamLoadClient

log = logging.getLogger("starrocks_connector.load")

CACHE_EXPIRE_SECONDS = 30 * 60


@dataclass
class _Entry:
    client: Any
    written_at: float


class CachedStreamLoadClient:
    """
    Process-wide stream load clients keyed by ``Settings``.

    At most one client lives per key. An entry expires ``ttl_seconds`` after
    it was written and is then dropped on the next access; the client is not
    closed.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_EXPIRE_SECONDS,
        factory: Callable[[Settings], Any] = StreamLoadClient,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl_seconds
        self.factory = factory
        self.clock = clock
        self._entries: dict[Settings, _Entry] = {}
        self._lock = threading.Lock()

    def _sweep(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if now - e.written_at >= self.ttl]
        for key in expired:
            log.debug(f"Evict stream load client for {key}")
            del self._entries[key]

    def get_or_create(self, cfg: Settings) -> Any:
        with self._lock:
            now = self.clock()
            self._sweep(now)
            entry = self._entries.get(cfg)
            if entry is None:
                log.info(f"Create stream load client for {cfg}")
                entry = _Entry(client=self.factory(cfg), written_at=now)
                self._entries[cfg] = entry
            return entry.client

    def __len__(self) -> int:
        with self._lock:
            self._sweep(self.clock())
            return len(self._entries)


cached_clients = CachedStreamLoadClient()
