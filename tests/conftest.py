"""Shared test fixtures"""
import logging
import pytest
import structlog


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep exporter settings from the host environment out of tests"""
    for var in ("SIGNALFX_ENDPOINT", "SIGNALFX_TOKEN", "METRIC_PREFIX", "DIMENSIONS",
                "FLUSH_INTERVAL", "REQUEST_TIMEOUT", "LOG_LEVEL", "LOG_FILE", "ENVIRONMENT"):
        monkeypatch.delenv(var, raising=False)
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        # pytest's own capture handlers are subclasses; leave them alone
        if type(handler) not in (logging.StreamHandler, logging.FileHandler):
            continue
        root.removeHandler(handler)
        handler.close()


class FakeClock:
    """Manually advanced clock for time-dependent instruments"""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()
