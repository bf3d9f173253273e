"""
Time-bounded cache of the active scoring configuration

Keeps the resolved ``ScoringConfiguration`` for ``ttl_seconds`` so scoring does
not hit the store on every request. Expired entries are refetched; writers call
``invalidate`` after activating a new version.
"""

import threading
import time
from typing import Callable, Optional

from core.config import get_settings
from core.exceptions import PersistenceError
from core.logging import get_logger
from core.metrics import metrics

from .defaults import default_configuration
from .schemas import ScoringConfiguration
from .store import ConfigurationVersionStore

logger = get_logger("scoring_config.cache", domain="d3_versioning")


class ActiveConfigurationCache:
    """Configuration provider for ``ReadinessScoringEngine``"""

    def __init__(
        self,
        store: ConfigurationVersionStore,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        fallback: Callable[[], ScoringConfiguration] = default_configuration,
    ):
        self.store = store
        self.ttl_seconds = get_settings().config_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._fallback = fallback
        self._configuration: Optional[ScoringConfiguration] = None
        self._loaded_at: Optional[float] = None
        self._lock = threading.Lock()

    def _is_fresh(self, now: float) -> bool:
        return (
            self._configuration is not None
            and self._loaded_at is not None
            and now - self._loaded_at < self.ttl_seconds
        )

    def get(self) -> ScoringConfiguration:
        """
        The active configuration, refetched once the TTL has passed

        Falls back to the built-in version 0 while the store is empty.

        Raises:
            PersistenceError: the store could not be read
        """
        with self._lock:
            now = self._clock()
            if self._is_fresh(now):
                return self._configuration

            try:
                configuration = self.store.get_active_configuration()
            except PersistenceError:
                metrics.track_config_reload("scoring_config", "error")
                logger.error("Failed to refresh active scoring configuration")
                raise

            if configuration is None:
                logger.warning("No active scoring configuration stored, using built-in defaults")
                configuration = self._fallback()

            if self._configuration is None or self._configuration.version != configuration.version:
                logger.info(f"Loaded scoring configuration version {configuration.version}")

            metrics.track_config_reload("scoring_config", "success")
            self._configuration = configuration
            self._loaded_at = now
            return configuration

    def invalidate(self) -> None:
        with self._lock:
            self._configuration = None
            self._loaded_at = None
