"""Exceptions raised by car_plotter.

Every error is a usage error reported synchronously to the caller of the
offending operation. Value-like problems also derive from :class:`ValueError`
and sequencing problems from :class:`RuntimeError` so callers can catch them
with the builtin types as well.
"""

from __future__ import annotations


class CarPlotterError(Exception):
    """Base class for all car_plotter errors."""


class InvalidCapacity(CarPlotterError, ValueError):
    """Ring buffer capacity is not an integer ``>= 1``."""


class InvalidConfiguration(CarPlotterError, ValueError):
    """Session configuration or vehicle dimensions are invalid."""


class DegeneratePath(CarPlotterError, ValueError):
    """Reference path is too short (or malformed) to derive a bounding box."""


class MissingGpsData(CarPlotterError, ValueError):
    """GPS mode is enabled but a sample carries no usable GPS fixes."""


class NotInitialized(CarPlotterError, RuntimeError):
    """Trajectory state was used before :meth:`TrajectoryState.initialize`."""


class NotSetup(CarPlotterError, RuntimeError):
    """Controller was ticked before :meth:`DualViewController.setup`."""
