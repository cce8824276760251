"""Short-lived, single-use state tokens for OAuth redirects.

The in-memory store works for single-instance deployments. Multi-instance
deployments swap in a shared backend implementing HandshakeStore.
"""

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from .config import STATE_EXPIRATION_SECONDS


@dataclass(frozen=True)
class StateEntry:
    shop: str
    created_at: float


class HandshakeStore(ABC):
    """Token -> shop store with a fixed expiration window."""

    @abstractmethod
    def put(self, token: str, shop: str) -> None:
        pass

    @abstractmethod
    def peek(self, token: str) -> str | None:
        """Return the shop for a fresh token without consuming it."""
        pass

    @abstractmethod
    def take(self, token: str) -> str | None:
        """Atomically consume a fresh token. At most one caller wins."""
        pass

    @abstractmethod
    def delete(self, token: str) -> None:
        pass

    def store_state(self, token: str, shop: str) -> None:
        """Store a token before redirecting out."""
        self.put(token, shop)

    def retrieve_state(self, token: str) -> str | None:
        """Consume a token on callback. None if unknown or expired."""
        return self.take(token)


class InMemoryHandshakeStore(HandshakeStore):
    def __init__(
        self,
        expiration_seconds: float = STATE_EXPIRATION_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.expiration_seconds = expiration_seconds
        self._clock = clock
        self._entries: dict[str, StateEntry] = {}
        self._lock = threading.Lock()

    def _expired(self, entry: StateEntry, now: float) -> bool:
        return now - entry.created_at > self.expiration_seconds

    def put(self, token: str, shop: str) -> None:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            self._entries[token] = StateEntry(shop=shop, created_at=now)

    def peek(self, token: str) -> str | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            if self._expired(entry, now):
                del self._entries[token]
                return None
            return entry.shop

    def take(self, token: str) -> str | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.pop(token, None)
        if entry is None or self._expired(entry, now):
            return None
        return entry.shop

    def delete(self, token: str) -> None:
        with self._lock:
            self._entries.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, v in self._entries.items() if self._expired(v, now)]
        for key in expired:
            del self._entries[key]
