"""
Background LTTB sampling worker.

Runs large reductions on a dedicated thread so request handlers are not
blocked. Each submitted request gets an id and a Future that resolves to

    {'request_id': str, 'data': [...], 'original_length': int, 'sampled_length': int}
"""

import logging
import queue
import threading
import uuid
from concurrent.futures import Future
from typing import Any, Dict, List, Optional

from .lttb import lttb_downsample
from .samples import DEFAULT_VALUE_KEY, Sample, Series, validate_threshold

logger = logging.getLogger(__name__)


def _sampling_result(request_id: str, series: Series, sampled: List[Sample]) -> Dict[str, Any]:
    return {
        'request_id': request_id,
        'data': sampled,
        'original_length': len(series),
        'sampled_length': len(sampled),
    }


class SamplingWorker:
    """Background thread that downsamples queued series with LTTB."""

    def __init__(self, name: str = 'LTTB Sampler'):
        """
        Initialize the worker.

        Args:
            name: Name of the background thread
        """
        self.name = name
        self.running = False
        self.thread: Optional[threading.Thread] = None
        self._queue: queue.Queue = queue.Queue()
        self._pending: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start the background sampling thread."""
        with self._lock:
            if self.running:
                logger.info(f"{self.name} is already running")
                return
            self.running = True
        self.thread = threading.Thread(target=self._run, daemon=True, name=self.name)
        self.thread.start()
        logger.info(f"{self.name} started")

    def stop(self, timeout: float = 5) -> None:
        """Stop the background thread and cancel requests still queued."""
        with self._lock:
            if not self.running:
                return
            self.running = False

        self._queue.put(None)
        if self.thread:
            self.thread.join(timeout=timeout)

        # submit() checks running under the lock, so nothing is queued after this drain
        cancelled = []
        with self._lock:
            while True:
                try:
                    request = self._queue.get_nowait()
                except queue.Empty:
                    break
                if request is not None:
                    cancelled.append(self._pending.pop(request['request_id']))
        for future in cancelled:
            future.cancel()
        logger.info(f"{self.name} stopped")

    @property
    def is_processing(self) -> bool:
        """True while any submitted request has not completed."""
        with self._lock:
            return bool(self._pending)

    def submit(self, series: Series, threshold: int, value_key: str = DEFAULT_VALUE_KEY) -> Future:
        """
        Queue a series for LTTB downsampling.

        Args:
            series: Samples sorted by timestamp ascending
            threshold: Target number of samples in the output
            value_key: Name of the value field to downsample on

        Returns:
            Future resolving to the sampling result dict

        Raises:
            InvalidThresholdError: if threshold is not a positive integer
        """
        threshold = validate_threshold(threshold)
        request_id = uuid.uuid4().hex
        future: Future = Future()

        # Short circuit small series
        if len(series) <= threshold:
            future.set_result(_sampling_result(request_id, series, list(series)))
            return future

        with self._lock:
            queued = self.running
            if queued:
                self._pending[request_id] = future
                self._queue.put({
                    'request_id': request_id,
                    'series': series,
                    'threshold': threshold,
                    'value_key': value_key,
                })

        if not queued:
            logger.warning(f"{self.name} not running, sampling synchronously")
            future.set_result(_sampling_result(request_id, series, lttb_downsample(series, threshold, value_key)))
        return future

    def _finish(self, request_id: str) -> Future:
        with self._lock:
            return self._pending.pop(request_id)

    def _run(self) -> None:
        """Main loop: sample queued requests until stopped."""
        while self.running:
            request = self._queue.get()
            if request is None:
                break

            with self._lock:
                future = self._pending[request['request_id']]
            if not future.set_running_or_notify_cancel():
                self._finish(request['request_id'])
                continue

            try:
                sampled = lttb_downsample(request['series'], request['threshold'], request['value_key'])
            except Exception as e:
                logger.error(f"Sampling request {request['request_id']} failed: {e}")
                self._finish(request['request_id'])
                future.set_exception(e)
            else:
                result = _sampling_result(request['request_id'], request['series'], sampled)
                self._finish(request['request_id'])
                future.set_result(result)


# Global worker instance
_worker = None


def get_worker() -> SamplingWorker:
    """Get the global sampling worker, creating it if needed."""
    global _worker
    if _worker is None:
        _worker = SamplingWorker()
    return _worker


def start_worker() -> SamplingWorker:
    """Start the global sampling worker."""
    worker = get_worker()
    worker.start()
    return worker


def stop_worker() -> None:
    """Stop the global sampling worker."""
    if _worker is not None:
        _worker.stop()
