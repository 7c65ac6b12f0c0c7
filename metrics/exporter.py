"""SignalFx exporter: periodically flushes a metrics registry over HTTP"""
import json
import threading
import time
from typing import Callable, Optional
import httpx
from config import Config
from logging_config import get_logger, log_error, log_exporter_startup, log_flush
from .exceptions import FlushError, ResponseStatusError, SerializationError, TransportError
from .models import Batch, batch_to_payload
from .reducer import build_batch

logger = get_logger(__name__)

TOKEN_HEADER = "X-SF-Token"


class SignalFxExporter:
    """Flush registry snapshots to a SignalFx datapoint endpoint.

    run() blocks the calling thread; start it on a background thread if the
    host must keep going. Flushes are strictly sequential.
    """

    def __init__(self, registry, config: Config, client: Optional[httpx.Client] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.registry = registry
        self.config = config
        self._clock = clock
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=config.request_timeout)
        self._stop_event = threading.Event()

        self.flush_count = 0
        self.flush_errors = 0
        self.last_flush_time: Optional[float] = None
        self.last_error: Optional[str] = None

    def run(self, interval: Optional[float] = None) -> None:
        """Flush on a fixed interval grid until stop() is called.

        The first flush happens one interval after the call. Ticks that pass
        while a flush is still in flight are dropped, not queued.
        """
        if interval is None:
            interval = self.config.flush_interval
        log_exporter_startup(logger, self.config, interval)

        next_tick = self._clock() + interval
        while not self._stop_event.wait(max(0.0, next_tick - self._clock())):
            self.flush()

            next_tick += interval
            now = self._clock()
            if next_tick < now:
                missed = int((now - next_tick) // interval) + 1
                next_tick += missed * interval
                logger.debug("Dropped ticks during slow flush", missed_ticks=missed,
                             event_type="ticks_dropped")

        logger.info("SignalFx exporter stopped", flushes=self.flush_count,
                    errors=self.flush_errors, event_type="exporter_stopped")

    def stop(self) -> None:
        """Ask run() to return after the current wait or flush"""
        self._stop_event.set()

    def flush(self) -> bool:
        """One tick: sample the registry and send it. Never raises."""
        start_time = time.time()
        self.flush_count += 1

        try:
            batch = build_batch(self.registry, self.config)
            if not batch:
                logger.debug("Nothing to send", event_type="flush_skipped")
                return True
            self.send(batch)
        except FlushError as e:
            self.flush_errors += 1
            self.last_error = str(e)
            logger.error(
                "Failed to flush metrics to SignalFx",
                error=str(e),
                error_type=type(e).__name__,
                endpoint=self.config.signalfx_endpoint,
                event_type="flush_error"
            )
            return False
        except Exception as e:
            self.flush_errors += 1
            self.last_error = str(e)
            log_error(logger, e, {"component": "exporter", "phase": "flush"})
            return False

        self.last_flush_time = time.time()
        log_flush(logger, sum(len(metrics) for metrics in batch.values()),
                  self.last_flush_time - start_time)
        return True

    def send(self, batch: Batch) -> None:
        """POST one batch; raises a FlushError subclass on any failure"""
        try:
            body = json.dumps(batch_to_payload(batch), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e

        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.config.user_agent,
            TOKEN_HEADER: self.config.signalfx_token,
        }

        try:
            with self._client.stream("POST", self.config.signalfx_endpoint,
                                     content=body, headers=headers) as response:
                if response.status_code != httpx.codes.OK:
                    raise ResponseStatusError(response.status_code, response.reason_phrase)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or type(e).__name__) from e

    def get_status(self) -> dict:
        """Flush bookkeeping for health reporting"""
        return {
            "endpoint": self.config.signalfx_endpoint,
            "total_flushes": self.flush_count,
            "flush_errors": self.flush_errors,
            "last_flush_time": self.last_flush_time,
            "last_error": self.last_error,
            "stop_requested": self._stop_event.is_set(),
        }

    def close(self) -> None:
        """Release the HTTP client if this exporter created it"""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SignalFxExporter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
        self.close()


def run(registry, interval: float, config: Config) -> None:
    """Flush registry to SignalFx every interval seconds, forever.

    Blocks the calling thread; there is no return path.
    """
    exporter = SignalFxExporter(registry, config)
    exporter.run(interval)
