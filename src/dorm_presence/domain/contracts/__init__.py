"""Domain contracts (protocols) shared across layers."""

from dorm_presence.domain.contracts.clock import Clock

__all__ = ["Clock"]
