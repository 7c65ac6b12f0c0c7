"""Reduce registry instruments to a transmittable batch"""
from typing import Any, Optional
from config import Config
from logging_config import get_logger
from .instruments import Counter, FloatGauge, Gauge, Histogram, Meter, Timer
from .models import Batch, MetricType, MetricValue


logger = get_logger(__name__)


def reduce_instrument(instrument: Any) -> Optional[MetricValue]:
    """Sample one instrument, returning None for unsupported kinds.

    The returned value is unnamed; build_batch fills in the name.
    """
    if isinstance(instrument, Counter):
        return MetricValue("", float(instrument.count()), MetricType.COUNTER)
    elif isinstance(instrument, (Gauge, FloatGauge)):
        return MetricValue("", float(instrument.value()), MetricType.GAUGE)
    elif isinstance(instrument, Histogram):
        return MetricValue("", instrument.mean(), MetricType.GAUGE)
    elif isinstance(instrument, Meter):
        return MetricValue("", instrument.rate1(), MetricType.GAUGE)
    elif isinstance(instrument, Timer):
        return MetricValue("", instrument.mean(), MetricType.GAUGE)
    else:
        return None


def build_batch(registry, config: Config) -> Batch:
    """Take one point-in-time read of every instrument in the registry.

    registry is anything whose items() yields (name, instrument) pairs.
    """
    batch: Batch = {}

    for name, instrument in registry.items():
        metric = reduce_instrument(instrument)
        if metric is None:
            logger.debug("Skipping unsupported instrument", metric=name,
                         kind=type(instrument).__name__, event_type="instrument_skipped")
            continue
        metric.name = config.prefixed(name)
        batch.setdefault(metric.metric_type, []).append(metric)

    # Dimensions go on in a second pass; every metric shares the same mapping
    if config.dimensions:
        for metrics in batch.values():
            for metric in metrics:
                metric.dimensions = config.dimensions

    return batch
