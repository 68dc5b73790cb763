"""
Scan session: processing cadence and display expiry around the label pipeline.
"""

import logging
import threading
import time
from typing import Callable, Iterable, List, Optional

from .config import FADE_OUT_DELAY_SECONDS, PROCESSING_INTERVAL_SECONDS
from .pipeline.layout import TextFragment
from .pipeline.main import LabelPipeline, ScanResult

logger = logging.getLogger(__name__)


class ScanSession:
    """
    Drives a LabelPipeline from a stream of OCR passes.

    Passes arriving sooner than ``processing_interval`` after the previous
    accepted pass are skipped. The displayed result expires ``fade_out_delay``
    seconds after the last detection, which also clears the smoothing history.
    """

    def __init__(
        self,
        pipeline: Optional[LabelPipeline] = None,
        processing_interval: float = PROCESSING_INTERVAL_SECONDS,
        fade_out_delay: float = FADE_OUT_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.pipeline = pipeline if pipeline is not None else LabelPipeline()
        self.processing_interval = processing_interval
        self.fade_out_delay = fade_out_delay
        self.clock = clock

        self._lock = threading.Lock()
        self._last_process_time: Optional[float] = None
        self._last_detection_time: Optional[float] = None
        self._current: Optional[ScanResult] = None

    def _now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now

    def should_process(self, now: Optional[float] = None) -> bool:
        """Whether a pass at ``now`` would clear the cadence gate."""
        now = self._now(now)
        with self._lock:
            return self._gate_open(now)

    def _gate_open(self, now: float) -> bool:
        return (
            self._last_process_time is None
            or now - self._last_process_time >= self.processing_interval
        )

    def submit(
        self, fragments: Iterable[TextFragment], now: Optional[float] = None
    ) -> Optional[ScanResult]:
        """
        Feed one OCR pass of positioned fragments.

        Returns:
            The new ScanResult, or None if the pass was skipped or unreadable
        """
        return self._run(lambda: self.pipeline.process(fragments), now)

    def submit_lines(
        self, lines: List[str], now: Optional[float] = None
    ) -> Optional[ScanResult]:
        """Feed one OCR pass whose text is already grouped into lines."""
        return self._run(lambda: self.pipeline.process_lines(lines), now)

    def _run(self, process, now: Optional[float]) -> Optional[ScanResult]:
        now = self._now(now)
        with self._lock:
            self._expire(now)
            if not self._gate_open(now):
                logger.debug("Pass skipped by cadence gate")
                return None
            self._last_process_time = now

            result = process()
            if result is not None:
                self._current = result
                self._last_detection_time = now
            return result

    def current_result(self, now: Optional[float] = None) -> Optional[ScanResult]:
        """The result to display at ``now``, or None once it has faded out."""
        now = self._now(now)
        with self._lock:
            self._expire(now)
            return self._current

    def _expire(self, now: float):
        if self._last_detection_time is None:
            return
        if now - self._last_detection_time < self.fade_out_delay:
            return
        logger.debug("Reading expired after %.1fs", now - self._last_detection_time)
        self._current = None
        self._last_detection_time = None
        self.pipeline.reset()

    def reset(self):
        """Drop the displayed result and the smoothing history."""
        with self._lock:
            self._current = None
            self._last_detection_time = None
            self._last_process_time = None
            self.pipeline.reset()
