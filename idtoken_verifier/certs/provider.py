"""
Signing key set providers.

Two providers share the CertsProvider interface:

- StaticCertsProvider serves a key set loaded once from a file or bytes.
- CachedURLCertsProvider fetches the key set from a URL and caches it until
  the instant named by the response's ``Expires`` header. During the refresh
  lead time before that instant the cached set is still served while a single
  background refresh runs; past it, callers block on one shared refresh.
"""

import os
import threading
import time
from abc import ABC, abstractmethod
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Optional, Tuple, Union

import httpx
from pydantic import ValidationError

from idtoken_shared.config import GOOGLE_CERTS_URL
from idtoken_shared.errors import KeySetUnavailable
from idtoken_shared.logging import get_logger
from idtoken_shared.metrics import MetricsCollector
from .models import KeySet


DEFAULT_REFRESH_LEAD_TIME = 3600.0
DEFAULT_FETCH_TIMEOUT = 10.0


class CertsProvider(ABC):
    """Supplies the currently trusted signing key set."""

    @abstractmethod
    def fetch(self) -> KeySet:
        """Return the current key set or raise KeySetUnavailable."""


class StaticCertsProvider(CertsProvider):
    """Key set fixed at construction or loaded from a snapshot."""

    def __init__(self, key_set: Optional[KeySet] = None):
        self._key_set = key_set
        self.logger = get_logger("idtoken.certs.static")

    def fetch(self) -> KeySet:
        if self._key_set is None:
            raise KeySetUnavailable("No key set has been loaded")
        return self._key_set

    def load_from_source(self, source: Union[str, os.PathLike, bytes]) -> KeySet:
        """Load a key set document from a file path or from raw bytes.

        The previously loaded set is kept when loading fails.
        """
        origin = "<bytes>" if isinstance(source, bytes) else os.fspath(source)
        try:
            if isinstance(source, bytes):
                document = source
            else:
                with open(source, "rb") as handle:
                    document = handle.read()
            key_set = KeySet.from_json(document)
        except (OSError, ValidationError) as e:
            self.logger.error("Failed to load key set", source=origin, error=str(e))
            raise KeySetUnavailable(
                f"Could not load key set from {origin}",
                details={"source": origin}
            ) from e

        self._key_set = key_set
        self.logger.info("Key set loaded", source=origin, keys_count=len(key_set.keys))
        return key_set


class _InflightFetch:
    """Outcome of one fetch, shared by every caller waiting on it."""

    def __init__(self):
        self.done = threading.Event()
        self.key_set: Optional[KeySet] = None
        self.error: Optional[KeySetUnavailable] = None

    def result(self, timeout: Optional[float] = None) -> KeySet:
        if not self.done.wait(timeout):
            raise KeySetUnavailable(
                "Timed out waiting for key set fetch",
                details={"timeout": timeout}
            )
        if self.key_set is not None:
            return self.key_set
        if self.error is not None:
            raise KeySetUnavailable(self.error.message, details=self.error.details) from self.error
        raise KeySetUnavailable("Key set fetch ended without a result")


class CachedURLCertsProvider(CertsProvider):
    """Key set fetched from a URL, cached until the response expires.

    ``fetch`` never performs network I/O while the cached set is fresh. In the
    soft-expired window (``refresh_lead_time`` seconds before expiry) it returns
    the cached set and starts a background refresh unless one is already
    running. Once expired, the cached set is dropped and the caller blocks on a
    refresh; concurrent callers share that single refresh and its outcome.

    Every completed fetch bumps a generation counter. A caller that inspected
    the cache before a fetch completed joins that fetch's outcome instead of
    starting another one.
    """

    def __init__(
        self,
        url: str = GOOGLE_CERTS_URL,
        refresh_lead_time: float = DEFAULT_REFRESH_LEAD_TIME,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        *,
        client: Optional[httpx.Client] = None,
        clock: Callable[[], float] = time.time,
        logger=None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self._url = url
        self._refresh_lead_time = refresh_lead_time
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client()
        self._clock = clock
        self.logger = logger or get_logger("idtoken.certs")
        self.metrics = metrics or MetricsCollector()

        # Guards (_keys, _valid_until); never held across network I/O.
        self._state_lock = threading.Lock()
        self._keys: Optional[KeySet] = None
        self._valid_until: float = clock()

        # Guards _inflight, _completed and _generation.
        self._fetch_lock = threading.Lock()
        self._inflight: Optional[_InflightFetch] = None
        self._completed: Optional[_InflightFetch] = None
        self._generation = 0

        try:
            self.refresh()
        except KeySetUnavailable as e:
            self.logger.warning("Initial key set load failed", **e.to_log_fields())

    @property
    def url(self) -> str:
        return self._url

    @property
    def expires_at(self) -> float:
        """Absolute expiry (epoch seconds) of the cached key set."""
        with self._state_lock:
            return self._valid_until

    def fetch(self) -> KeySet:
        # Read before the state so a fetch completing after the region check
        # is seen as newer than what this caller observed.
        with self._fetch_lock:
            generation = self._generation

        with self._state_lock:
            now = self._clock()
            keys = self._keys
            if now >= self._valid_until:
                self._keys = None
                expired = True
            else:
                expired = False
            soft_expired = now >= self._valid_until - self._refresh_lead_time

        if expired:
            self.logger.debug("Key set expired, refreshing", url=self._url)
            return self._refresh(None, generation)

        if soft_expired:
            self.logger.debug("Key set expiring soon, scheduling refresh", url=self._url)
            self._schedule_background_refresh(generation)

        if keys is None:
            raise KeySetUnavailable(
                f"Could not retrieve a valid key set from {self._url}",
                details={"url": self._url}
            )
        return keys

    def refresh(self, timeout: Optional[float] = None) -> KeySet:
        """Fetch the key set now, joining a fetch that is already running.

        ``timeout`` bounds the whole call, including time spent waiting on a
        fetch started by another caller.
        """
        return self._refresh(timeout, None)

    def close(self) -> None:
        """Close the underlying HTTP client if this provider created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "CachedURLCertsProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _refresh(self, timeout: Optional[float], observed: Optional[int]) -> KeySet:
        call, leader = self._join_or_start(observed)
        if leader:
            self._run(call, timeout)
            return call.result()
        return call.result(self._timeout if timeout is None else timeout)

    def _join_or_start(self, observed: Optional[int] = None) -> Tuple[_InflightFetch, bool]:
        """Return the fetch to wait on and whether the caller must run it.

        With ``observed`` set, a fetch completed after that generation is
        returned as is.
        """
        with self._fetch_lock:
            if self._inflight is not None:
                return self._inflight, False
            if observed is not None and observed != self._generation and self._completed is not None:
                return self._completed, False
            self._inflight = _InflightFetch()
            return self._inflight, True

    def _schedule_background_refresh(self, observed: int) -> None:
        call, leader = self._join_or_start(observed)
        if not leader:
            return
        thread = threading.Thread(
            target=self._run,
            args=(call, None),
            name="idtoken-certs-refresh",
            daemon=True,
        )
        thread.start()

    def _run(self, call: _InflightFetch, timeout: Optional[float]) -> None:
        try:
            call.key_set = self._load_from_url(timeout)
        except KeySetUnavailable as e:
            call.error = e
        finally:
            with self._fetch_lock:
                self._inflight = None
                self._completed = call
                self._generation += 1
            call.done.set()

    def _load_from_url(self, timeout: Optional[float]) -> KeySet:
        """Fetch, parse and install a key set; state is untouched on failure."""
        try:
            with self.metrics.time_refresh():
                key_set, valid_until = self._request_key_set(
                    self._timeout if timeout is None else timeout
                )
        except KeySetUnavailable as e:
            self.metrics.record_refresh("error")
            self.logger.error("Failed to load key set", **e.to_log_fields())
            raise

        with self._state_lock:
            self._keys = key_set
            self._valid_until = valid_until

        self.metrics.record_refresh("success")
        self.logger.info(
            "Key set refreshed",
            url=self._url,
            keys_count=len(key_set.keys),
            valid_until=valid_until
        )
        return key_set

    def _request_key_set(self, timeout: float) -> Tuple[KeySet, float]:
        if self._client.is_closed:
            raise KeySetUnavailable(
                "Key set client is closed",
                details={"url": self._url}
            )

        try:
            response, content = self._download(timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise KeySetUnavailable(
                "Key set request failed",
                details={"url": self._url, "reason": str(e)}
            ) from e

        if not response.is_success:
            raise KeySetUnavailable(
                f"Unsuccessful status code: {response.status_code}",
                details={"url": self._url, "status_code": response.status_code}
            )

        expires_header = response.headers.get("Expires")
        valid_until = parse_expires(expires_header)
        if valid_until is None:
            raise KeySetUnavailable(
                "Missing or invalid Expires header",
                details={"url": self._url, "expires": expires_header}
            )

        try:
            key_set = KeySet.from_json(content)
        except ValidationError as e:
            raise KeySetUnavailable(
                "Key set document is invalid",
                details={"url": self._url, "reason": str(e)}
            ) from e

        return key_set, valid_until

    def _download(self, timeout: float) -> Tuple[httpx.Response, bytes]:
        """GET the key set document within an overall ``timeout`` deadline.

        httpx applies ``timeout`` to each connect, read and write step; the
        deadline also bounds a body that trickles in slowly.
        """
        deadline = time.monotonic() + timeout
        chunks = []
        with self._client.stream("GET", self._url, timeout=timeout) as response:
            if response.is_success:
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    if time.monotonic() > deadline:
                        break
        if time.monotonic() > deadline:
            raise KeySetUnavailable(
                "Key set request exceeded its deadline",
                details={"url": self._url, "timeout": timeout}
            )
        return response, b"".join(chunks)


def parse_expires(value: Optional[str]) -> Optional[float]:
    """Parse an HTTP-date ``Expires`` value into epoch seconds."""
    if not value:
        return None
    try:
        expires = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if expires.tzinfo is None:
        # "-0000" zone parses as naive; HTTP dates are always UTC
        expires = expires.replace(tzinfo=timezone.utc)
    return expires.timestamp()
