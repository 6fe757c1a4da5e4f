"""Measurement/Ease Resolver."""

from .ease import EaseResolution, plausibility_warnings, resolve_finished_measurements

__all__ = ["EaseResolution", "resolve_finished_measurements", "plausibility_warnings"]
