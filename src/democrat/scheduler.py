"""Periodic triggers for the sync and enrichment pipelines.

Each pipeline gets its own daemon thread. A trigger that fires while the
previous run of the same pipeline is still busy is simply late; enrichment
additionally drops overlapping runs through its run guard.
"""

import logging
import threading
from typing import Callable, List, Optional

from democrat.core.error_utils import ErrorCategorizer
from democrat.drucksache.models import SyncResult
from democrat.drucksache.sync import RegistrySyncEngine
from democrat.enrichment.models import EnrichmentResult
from democrat.enrichment.orchestrator import EnrichmentOrchestrator
from democrat.settings import ENRICHMENT_INTERVAL_SECONDS, SYNC_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class Scheduler:
    def __init__(
        self,
        sync_engine: RegistrySyncEngine,
        orchestrator: EnrichmentOrchestrator,
        sync_interval: float = SYNC_INTERVAL_SECONDS,
        enrichment_interval: float = ENRICHMENT_INTERVAL_SECONDS,
    ):
        self.sync_engine = sync_engine
        self.orchestrator = orchestrator
        self.sync_interval = sync_interval
        self.enrichment_interval = enrichment_interval
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    @property
    def running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def trigger_sync(self) -> SyncResult:
        logger.info("Running scheduled sync of Drucksachen")
        return self.sync_engine.sync()

    def trigger_enrichment(self) -> EnrichmentResult:
        return self.orchestrator.run()

    def _loop(self, name: str, interval: float, job: Callable[[], object]) -> None:
        # Fire once at start, then every interval until stopped
        while not self._stop.is_set():
            try:
                result = job()
                logger.debug(f"{name} run finished: {result}")
            except Exception as e:
                logger.error(
                    f"{name} run failed: {e}",
                    exc_info=True,
                    extra=ErrorCategorizer.extract_error_metadata(e, {"job": name}),
                )
            if self._stop.wait(interval):
                break

    def start(self) -> None:
        if self._threads:
            return
        self._stop.clear()
        for name, interval, job in (
            ("sync", self.sync_interval, self.trigger_sync),
            ("enrichment", self.enrichment_interval, self.trigger_enrichment),
        ):
            thread = threading.Thread(
                target=self._loop, args=(name, interval, job), name=f"democrat-{name}", daemon=True
            )
            thread.start()
            self._threads.append(thread)
        logger.info(
            "Scheduler started",
            extra={
                "sync_interval_seconds": self.sync_interval,
                "enrichment_interval_seconds": self.enrichment_interval,
            },
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        for thread in self._threads:
            thread.join(timeout)
        self._threads = []
        logger.info("Scheduler stopped")

    def wait(self) -> None:
        """Block the calling thread until stop() is called."""
        while not self._stop.wait(1.0):
            pass
