"""Periodic telemetry reporting."""

from .reporter import TelemetryReporter

__all__ = ["TelemetryReporter"]
