"""Metric models and SignalFx payload serialization"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from enum import Enum


class MetricType(Enum):
    """SignalFx datapoint categories"""
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass
class MetricValue:
    """Single reduced metric value, lives for one flush"""
    name: str
    value: float
    metric_type: MetricType = MetricType.GAUGE
    dimensions: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render as a SignalFx datapoint"""
        value = self.value
        # Whole numbers go out as JSON integers, e.g. counter totals
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        data = {"metric": self.name, "value": value}
        if self.dimensions is not None:
            data["dimensions"] = self.dimensions
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], metric_type: MetricType) -> "MetricValue":
        return cls(
            name=data["metric"],
            value=float(data["value"]),
            metric_type=metric_type,
            dimensions=data.get("dimensions"),
        )


Batch = Dict[MetricType, List[MetricValue]]


def batch_to_payload(batch: Batch) -> Dict[str, List[Dict[str, Any]]]:
    """Convert a batch to the JSON-ready {category: [datapoint, ...]} shape"""
    return {
        metric_type.value: [metric.to_dict() for metric in metrics]
        for metric_type, metrics in batch.items()
        if metrics
    }


def batch_from_payload(payload: Dict[str, List[Dict[str, Any]]]) -> Batch:
    """Rebuild a batch from a decoded payload"""
    batch: Batch = {}
    for category, datapoints in payload.items():
        metric_type = MetricType(category)
        batch[metric_type] = [MetricValue.from_dict(dp, metric_type) for dp in datapoints]
    return batch
