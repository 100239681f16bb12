"""
In-memory cache of AR-scaled GLB payloads.

Entries are keyed by the normalised source URL and the requested maximum
dimension, since the scale factor depends on both. Entries live for one
hour. Expiry is checked lazily on read, and a sweep of expired entries
runs whenever the cache grows past a size threshold. Nothing survives a
process restart.
"""
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlsplit, urlunsplit

from ar_glb.models.scaling import ScalingResult

CACHE_TTL_SECONDS = 60 * 60
SWEEP_THRESHOLD = 50

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_source_url(url: str) -> str:
    """Lower-case scheme and host, drop default port and fragment."""
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    netloc = host
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{parts.port}"
    if parts.username:
        credentials = parts.username
        if parts.password:
            credentials += f":{parts.password}"
        netloc = f"{credentials}@{netloc}"
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, ""))


@dataclass(frozen=True)
class CacheKey:
    """Identifies one scaled variant of a source asset.

    Attributes:
        source_url: Normalised URL of the original GLB.
        max_dimension: Maximum allowed dimension in meters.
        scale_override: Explicit scale factor, if the caller supplied one.
        force_scale: Whether scaling was forced for in-bounds models.
    """

    source_url: str
    max_dimension: float
    scale_override: float | None = None
    force_scale: bool = False

    @classmethod
    def for_request(
        cls,
        source_url: str,
        max_dimension: float,
        scale_override: float | None = None,
        force_scale: bool = False,
    ) -> "CacheKey":
        return cls(
            source_url=normalize_source_url(source_url),
            max_dimension=float(max_dimension),
            scale_override=scale_override,
            force_scale=force_scale,
        )

    def __str__(self) -> str:
        label = f"{self.source_url}:{self.max_dimension:g}"
        if self.scale_override is not None:
            label += f":scale={self.scale_override:g}"
        if self.force_scale:
            label += ":force"
        return label


@dataclass(frozen=True)
class CacheEntry:
    payload: bytes
    result: ScalingResult
    created_at: float


class ScalingCache(ABC):
    """Storage for scaled payloads. Swap in a shared store when running
    more than one instance."""

    @abstractmethod
    def get(self, key: CacheKey) -> CacheEntry | None: ...

    @abstractmethod
    def put(self, key: CacheKey, payload: bytes, result: ScalingResult) -> CacheEntry: ...

    @abstractmethod
    def sweep_expired(self) -> int: ...


class InMemoryScalingCache(ScalingCache):
    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        sweep_threshold: int = SWEEP_THRESHOLD,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.sweep_threshold = sweep_threshold
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at >= self.ttl_seconds

    def get(self, key: CacheKey) -> CacheEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._expired(entry, self._clock()):
                return None
            return entry

    def put(self, key: CacheKey, payload: bytes, result: ScalingResult) -> CacheEntry:
        with self._lock:
            if len(self._entries) > self.sweep_threshold:
                self._sweep_locked()
            entry = CacheEntry(payload=payload, result=result, created_at=self._clock())
            self._entries[key] = entry
            return entry

    def sweep_expired(self) -> int:
        with self._lock:
            return self._sweep_locked()

    def _sweep_locked(self) -> int:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if self._expired(e, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> list[CacheKey]:
        with self._lock:
            return list(self._entries)
