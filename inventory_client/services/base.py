"""Shared freshness-gated fetch and mutation plumbing for the domain services."""

from typing import Any, Callable, Dict, Optional, TypeVar

from ..cache.freshness import FreshnessCache
from ..utils.exceptions import BaseAppException, SessionExpiredError
from ..utils.logger import get_cache_logger, get_error_logger

T = TypeVar("T")


class CachedService:
    """
    Base class for services that mirror a slice of backend state.

    ``error`` holds the message of the last failed call, and ``loading``
    tracks which cache keys have a request in flight.
    """

    def __init__(self, cache: FreshnessCache, scheduler):
        self.cache = cache
        self.scheduler = scheduler
        self.logger = get_cache_logger()
        self.error_logger = get_error_logger()
        self.error: Optional[str] = None
        self.loading: Dict[str, bool] = {}

    def is_loading(self, key: str) -> bool:
        return self.loading.get(key, False)

    def _fetch(
        self,
        key: str,
        loader: Callable[[], T],
        force: bool = False,
        default: Any = None
    ) -> T:
        """
        Return the snapshot for ``key``, calling ``loader`` only when stale.

        On failure (backend error or a payload the models reject) the
        previous snapshot (or ``default``) is returned and ``error`` is
        set. A ``SessionExpiredError`` still propagates.
        """
        if not force:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        self.loading[key] = True
        self.error = None
        try:
            value = loader()
            self.cache.set(key, value)
            self.logger.info(f"Fetched {key}")
            return value
        except SessionExpiredError as e:
            self.error = e.message
            raise
        except BaseAppException as e:
            self.error = e.message
            self.error_logger.error(f"Fetch {key} failed: {e.message}")
            return self.cache.peek(key, default)
        except (ValueError, KeyError) as e:
            # payload parsed but did not match the models
            self.error = f"Unexpected response for {key}"
            self.error_logger.error(f"Fetch {key} returned a malformed payload: {e!r}")
            return self.cache.peek(key, default)
        finally:
            self.loading[key] = False

    def _mutate(self, action: str, call: Callable[[], T]) -> T:
        """Run a mutating call; on failure set ``error`` and re-raise."""
        self.error = None
        try:
            return call()
        except BaseAppException as e:
            self.error = e.message
            self.error_logger.error(f"{action} failed: {e.message}")
            raise

    def _patch_list(self, key: str, transform: Callable[[list], list]):
        """Apply an optimistic local update to the cached list under ``key``."""
        current = self.cache.peek(key)
        if current is None:
            return
        self.cache.patch(key, transform(list(current)))

    def _refresh_later(self, job_id: str, refetch: Callable[..., Any]):
        """Schedule a forced background re-fetch of a dependent view."""
        self.scheduler.schedule(job_id, lambda: refetch(force=True))
