"""Exceptions raised by the host stats service."""
from __future__ import annotations


class HostStatsError(Exception):
    """Base class for service errors."""


class SamplerPoisonedError(HostStatsError):
    """A previous failure inside a sampler's critical section left it unusable."""

    def __init__(self, sampler_name: str) -> None:
        super().__init__(f"{sampler_name} sampler is poisoned by an earlier failure")
        self.sampler_name = sampler_name


class ServerBindError(HostStatsError):
    """The listening address could not be bound."""

    def __init__(self, address: str, reason: OSError) -> None:
        super().__init__(f"Could not bind {address}: {reason}")
        self.address = address
        self.reason = reason
