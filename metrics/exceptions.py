"""Errors raised while flushing a batch to SignalFx"""


class FlushError(Exception):
    """Base class for failures local to a single flush"""


class SerializationError(FlushError):
    """The batch could not be encoded as JSON"""


class TransportError(FlushError):
    """The request could not be built or delivered"""


class ResponseStatusError(FlushError):
    """The endpoint answered with a non-200 status"""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.status = f"{status_code} {reason}".strip()
        super().__init__(f"response code when posting metrics was {self.status!r}")
