# genmed/domain/errors.py
from __future__ import annotations


class UpstreamError(Exception):
    """Raised by adapters; services convert it into a failure marker at the tool boundary."""
    kind = "transport"


class UpstreamTransportError(UpstreamError):
    kind = "transport"


class UpstreamMalformedError(UpstreamError):
    kind = "malformed"


class BackendNotConfigured(UpstreamError):
    kind = "transport"
