"""Metrics registry holding named instruments"""
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple
from logging_config import get_logger


logger = get_logger(__name__)


class DuplicateMetricError(ValueError):
    """Raised when registering a name that is already taken"""


class MetricsRegistry:
    """Central registry for named instruments.

    Application code owns the instruments and mutates them freely; the
    exporter only reads a snapshot through items().
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._instruments: Dict[str, Any] = {}

    def register(self, name: str, instrument: Any) -> Any:
        """Register an instrument under a unique name"""
        with self._lock:
            if name in self._instruments:
                raise DuplicateMetricError(f"Metric already registered: {name}")
            self._instruments[name] = instrument
        logger.debug("Registered instrument", metric=name, kind=type(instrument).__name__)
        return instrument

    def get_or_register(self, name: str, factory: Callable[[], Any]) -> Any:
        """Return the instrument for name, creating it with factory if absent"""
        with self._lock:
            instrument = self._instruments.get(name)
            if instrument is None:
                instrument = factory()
                self._instruments[name] = instrument
            return instrument

    def get(self, name: str) -> Optional[Any]:
        with self._lock:
            return self._instruments.get(name)

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._instruments.pop(name, None) is not None

    def list_metrics(self) -> List[str]:
        """List all registered metric names"""
        with self._lock:
            return list(self._instruments.keys())

    def items(self) -> List[Tuple[str, Any]]:
        """Snapshot of every (name, instrument) pair"""
        with self._lock:
            return list(self._instruments.items())

    def clear(self) -> None:
        with self._lock:
            self._instruments.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._instruments)
