"""Thread-safe metric instruments

Each instrument exposes the accessor the reducer samples:
Counter.count(), Gauge.value(), FloatGauge.value(), Histogram.mean(),
Meter.rate1() and Timer.mean().
"""
import math
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator

Clock = Callable[[], float]


class Counter:
    """Monotonic-by-convention integer count"""

    def __init__(self):
        self._lock = threading.Lock()
        self._count = 0

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    def clear(self) -> None:
        with self._lock:
            self._count = 0

    def count(self) -> int:
        with self._lock:
            return self._count


class Gauge:
    """Integer-valued instantaneous value"""

    def __init__(self, value: int = 0):
        self._lock = threading.Lock()
        self._value = int(value)

    def update(self, value: int) -> None:
        with self._lock:
            self._value = int(value)

    def value(self) -> int:
        with self._lock:
            return self._value


class FloatGauge:
    """Float-valued instantaneous value"""

    def __init__(self, value: float = 0.0):
        self._lock = threading.Lock()
        self._value = float(value)

    def update(self, value: float) -> None:
        with self._lock:
            self._value = float(value)

    def value(self) -> float:
        with self._lock:
            return self._value


class Histogram:
    """Running statistics over every recorded sample"""

    def __init__(self):
        self._lock = threading.Lock()
        self._count = 0
        self._sum = 0.0
        self._min = math.inf
        self._max = -math.inf

    def update(self, value: float) -> None:
        with self._lock:
            self._count += 1
            self._sum += value
            self._min = min(self._min, value)
            self._max = max(self._max, value)

    def count(self) -> int:
        with self._lock:
            return self._count

    def sum(self) -> float:
        with self._lock:
            return self._sum

    def min(self) -> float:
        with self._lock:
            return self._min if self._count else 0.0

    def max(self) -> float:
        with self._lock:
            return self._max if self._count else 0.0

    def mean(self) -> float:
        """Arithmetic mean of all samples, 0.0 when empty"""
        with self._lock:
            if not self._count:
                return 0.0
            return self._sum / self._count

    def clear(self) -> None:
        with self._lock:
            self._count = 0
            self._sum = 0.0
            self._min = math.inf
            self._max = -math.inf


class EWMA:
    """Exponentially-weighted moving average of events per second.

    Not thread-safe on its own; Meter serializes access to it.
    """

    TICK_INTERVAL = 5.0

    def __init__(self, minutes: float):
        self.alpha = 1 - math.exp(-self.TICK_INTERVAL / 60.0 / minutes)
        self._uncounted = 0
        self._rate = 0.0
        self._initialized = False

    def update(self, n: int) -> None:
        self._uncounted += n

    def tick(self) -> None:
        instant_rate = self._uncounted / self.TICK_INTERVAL
        self._uncounted = 0
        if self._initialized:
            self._rate += self.alpha * (instant_rate - self._rate)
        else:
            self._rate = instant_rate
            self._initialized = True

    def rate(self) -> float:
        return self._rate


class Meter:
    """Event throughput with 1, 5 and 15 minute moving rates"""

    def __init__(self, clock: Clock = time.monotonic):
        self._lock = threading.Lock()
        self._clock = clock
        self._count = 0
        self._start_time = clock()
        self._last_tick = self._start_time
        self._m1 = EWMA(1)
        self._m5 = EWMA(5)
        self._m15 = EWMA(15)

    def _tick_if_necessary(self) -> None:
        elapsed = self._clock() - self._last_tick
        if elapsed < EWMA.TICK_INTERVAL:
            return
        ticks = int(elapsed // EWMA.TICK_INTERVAL)
        self._last_tick += ticks * EWMA.TICK_INTERVAL
        for _ in range(ticks):
            self._m1.tick()
            self._m5.tick()
            self._m15.tick()

    def mark(self, n: int = 1) -> None:
        with self._lock:
            self._tick_if_necessary()
            self._count += n
            self._m1.update(n)
            self._m5.update(n)
            self._m15.update(n)

    def count(self) -> int:
        with self._lock:
            return self._count

    def rate1(self) -> float:
        with self._lock:
            self._tick_if_necessary()
            return self._m1.rate()

    def rate5(self) -> float:
        with self._lock:
            self._tick_if_necessary()
            return self._m5.rate()

    def rate15(self) -> float:
        with self._lock:
            self._tick_if_necessary()
            return self._m15.rate()

    def rate_mean(self) -> float:
        with self._lock:
            elapsed = self._clock() - self._start_time
            if elapsed <= 0:
                return 0.0
            return self._count / elapsed


class Timer:
    """Duration statistics.

    Durations are float seconds (not nanoseconds), so mean() and the value
    sent to SignalFx are in seconds too.
    """

    def __init__(self, clock: Clock = time.perf_counter):
        self._clock = clock
        self._durations = Histogram()

    def update(self, seconds: float) -> None:
        self._durations.update(seconds)

    @contextmanager
    def time(self) -> Iterator[None]:
        """Record the duration of the wrapped block"""
        start = self._clock()
        try:
            yield
        finally:
            self.update(self._clock() - start)

    def count(self) -> int:
        return self._durations.count()

    def mean(self) -> float:
        """Arithmetic mean of recorded durations, 0.0 when empty"""
        return self._durations.mean()

    def min(self) -> float:
        return self._durations.min()

    def max(self) -> float:
        return self._durations.max()
