"""Runtime services shared by the buffer core."""

from . import telemetry

__all__ = ["telemetry"]
