r"""Common typed dataclasses used across car_plotter.

All coordinates live in a fixed world frame with the east/north convention.
The containers are lightweight so the state and geometry layers can be unit
tested without any rendering backend.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Integral, Real
from typing import ClassVar, Iterable, Sequence

import numpy as np

from car_plotter.errors import InvalidConfiguration, MissingGpsData


@dataclass(frozen=True, slots=True)
class Point2D:
    """Planar point in world frame, in meters."""

    x: float
    y: float

    @classmethod
    def from_xy(cls, value: "Point2D | Sequence[float] | np.ndarray") -> "Point2D":
        """Build from a ``Point2D`` or any length-2 sequence/array."""
        if isinstance(value, Point2D):
            return value
        xy = np.asarray(value, dtype=float).reshape(-1)
        if xy.size != 2:
            raise ValueError(f"Expected a 2D point, got {xy.size} values")
        return cls(float(xy[0]), float(xy[1]))

    def as_array(self) -> np.ndarray:
        """Return ``[x, y]`` as a numpy array."""
        return np.array([self.x, self.y], dtype=float)


@dataclass(frozen=True, slots=True)
class Pose2D:
    """Vehicle pose in world frame.

    Attributes
    ----------
    x, y:
        Position in meters.
    heading:
        Orientation in radians. The caller decides on wrapping; nothing in
        car_plotter normalizes it.
    """

    x: float
    y: float
    heading: float

    @property
    def position(self) -> Point2D:
        return Point2D(self.x, self.y)

    def as_array(self) -> np.ndarray:
        """Return ``[x, y, heading]`` as a numpy array."""
        return np.array([self.x, self.y, self.heading], dtype=float)


@dataclass(frozen=True, slots=True)
class GpsFix:
    """Positions reported by the two GPS receivers, already in world frame."""

    gps1: Point2D
    gps2: Point2D

    @classmethod
    def from_array(cls, values: Sequence[float] | np.ndarray) -> "GpsFix":
        """Build from ``[x1, y1, x2, y2]``."""
        flat = np.asarray(values, dtype=float).reshape(-1)
        if flat.size != 4:
            raise MissingGpsData(f"GPS data must hold 4 values [x1, y1, x2, y2], got {flat.size}")
        return cls(gps1=Point2D(float(flat[0]), float(flat[1])), gps2=Point2D(float(flat[2]), float(flat[3])))


@dataclass(frozen=True, slots=True)
class TrajectorySample:
    """One incoming sample: estimated position, heading and optional GPS fixes."""

    position: Point2D
    heading: float
    gps: GpsFix | None = None

    @classmethod
    def from_values(
        cls,
        position: Point2D | Sequence[float] | np.ndarray,
        heading: float,
        gps: GpsFix | Sequence[float] | np.ndarray | None = None,
    ) -> "TrajectorySample":
        """Build a sample from loosely typed inputs (sequences, arrays)."""
        if gps is not None and not isinstance(gps, GpsFix):
            gps = GpsFix.from_array(gps)
        return cls(position=Point2D.from_xy(position), heading=float(heading), gps=gps)


def _require_positive(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidConfiguration(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidConfiguration(f"{name} must be positive and finite, got {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class VehicleDimensions:
    """Body dimensions of the vehicle, fixed for one session.

    Attributes
    ----------
    wheel_base:
        Distance between both wheel axes ``L`` in meters.
    front_track:
        Distance between the wheels of the front axis ``W`` in meters.
    """

    wheel_base: float = 2.2
    front_track: float = 1.3

    def __post_init__(self) -> None:
        object.__setattr__(self, "wheel_base", _require_positive("wheel_base", self.wheel_base))
        object.__setattr__(self, "front_track", _require_positive("front_track", self.front_track))


@dataclass(frozen=True, slots=True)
class VehicleSilhouette:
    """Triangle drawn for the vehicle, vertices ordered ``(left, right, front)``."""

    FACE: ClassVar[tuple[int, int, int]] = (0, 1, 2)

    left: Point2D
    right: Point2D
    front: Point2D

    def vertices(self) -> np.ndarray:
        """Return the ``(3, 2)`` vertex array in face order."""
        return np.array(
            [[self.left.x, self.left.y], [self.right.x, self.right.y], [self.front.x, self.front.y]],
            dtype=float,
        )


@dataclass(frozen=True, slots=True)
class ViewWindow:
    """Axis-aligned plot window described by its center and half extents."""

    center_x: float
    center_y: float
    half_extent_x: float
    half_extent_y: float

    @classmethod
    def centered_on(cls, point: Point2D, half_extent: float) -> "ViewWindow":
        """Square window of ``2 * half_extent`` side around ``point``."""
        return cls(point.x, point.y, half_extent, half_extent)

    @classmethod
    def from_bounding_box(cls, points: np.ndarray, margin: float) -> "ViewWindow":
        """Bounding box of an ``(M, 2)`` point array grown by ``margin`` on every side."""
        x_min, y_min = np.min(points, axis=0)
        x_max, y_max = np.max(points, axis=0)
        return cls(
            center_x=float(0.5 * (x_min + x_max)),
            center_y=float(0.5 * (y_min + y_max)),
            half_extent_x=float(0.5 * (x_max - x_min) + margin),
            half_extent_y=float(0.5 * (y_max - y_min) + margin),
        )

    def bounds(self) -> tuple[float, float, float, float]:
        """Return ``(x_min, x_max, y_min, y_max)``."""
        return (
            self.center_x - self.half_extent_x,
            self.center_x + self.half_extent_x,
            self.center_y - self.half_extent_y,
            self.center_y + self.half_extent_y,
        )


@dataclass(slots=True)
class CarPlotterConfig:
    """Session configuration.

    Parameters
    ----------
    use_gps:
        Enable the two GPS windows and series. Fixed for the session lifetime.
    front_track:
        Vehicle width parameter ``W`` in meters.
    wheel_base:
        Vehicle length parameter ``L`` in meters.
    buffer_size:
        Number of points kept by the windowed (zoomed) histories.
    zoom_half_extent:
        Half side of the square zoomed window in meters.
    map_margin:
        Margin added around the reference path bounding box in the full map.
    """

    use_gps: bool = False
    front_track: float = 1.3
    wheel_base: float = 2.2
    buffer_size: int = 300
    zoom_half_extent: float = 15.0
    map_margin: float = 50.0

    def __post_init__(self) -> None:
        if not isinstance(self.use_gps, (bool, np.bool_)):
            raise InvalidConfiguration(f"use_gps must be a bool, got {self.use_gps!r}")
        self.use_gps = bool(self.use_gps)
        self.front_track = _require_positive("front_track", self.front_track)
        self.wheel_base = _require_positive("wheel_base", self.wheel_base)
        self.zoom_half_extent = _require_positive("zoom_half_extent", self.zoom_half_extent)

        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, Integral) or self.buffer_size < 1:
            raise InvalidConfiguration(f"buffer_size must be an integer >= 1, got {self.buffer_size!r}")
        self.buffer_size = int(self.buffer_size)

        if isinstance(self.map_margin, bool) or not isinstance(self.map_margin, Real):
            raise InvalidConfiguration(f"map_margin must be a real number, got {self.map_margin!r}")
        if not math.isfinite(self.map_margin) or self.map_margin < 0.0:
            raise InvalidConfiguration(f"map_margin must be non-negative and finite, got {self.map_margin!r}")
        self.map_margin = float(self.map_margin)

    @property
    def dimensions(self) -> VehicleDimensions:
        return VehicleDimensions(wheel_base=self.wheel_base, front_track=self.front_track)


def points_to_array(points: Iterable[Point2D]) -> np.ndarray:
    """Stack points into an ``(M, 2)`` float array (``(0, 2)`` when empty)."""
    rows = [(point.x, point.y) for point in points]
    if not rows:
        return np.empty((0, 2), dtype=float)
    return np.array(rows, dtype=float)
