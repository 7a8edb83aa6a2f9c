"""Single source of truth for the vehicle trajectory shown by both views."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from car_plotter.errors import MissingGpsData, NotInitialized
from car_plotter.ring_buffer import RingBuffer
from car_plotter.types import GpsFix, Point2D, Pose2D, points_to_array

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TrajectoryState:
    """Current pose plus full and windowed position histories.

    ``full_path`` grows without bound and feeds the full-map path line, while
    ``vehicle_window`` (and the GPS windows when enabled) keep the last
    ``buffer_size`` samples for the zoomed view. Every sample updates all of
    them together; a failed :meth:`record_sample` leaves the state untouched.

    Notes
    -----
    ``use_gps`` is fixed at construction. Switching GPS on mid-session is not
    supported.
    """

    buffer_size: int = 300
    use_gps: bool = False
    _pose: Pose2D = field(init=False, repr=False)
    _full_path: list[Point2D] = field(init=False, repr=False)
    _vehicle_window: RingBuffer = field(init=False, repr=False)
    _gps1_window: RingBuffer | None = field(init=False, repr=False)
    _gps2_window: RingBuffer | None = field(init=False, repr=False)
    _initialized: bool = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._pose = Pose2D(0.0, 0.0, 0.0)
        self._full_path = []
        self._vehicle_window = RingBuffer(self.buffer_size)
        self._gps1_window = RingBuffer(self.buffer_size) if self.use_gps else None
        self._gps2_window = RingBuffer(self.buffer_size) if self.use_gps else None
        self._initialized = False

    def initialize(self, start_position: Point2D, start_heading: float) -> None:
        """Reset the state to a new session starting at ``start_position``."""
        start_position = Point2D.from_xy(start_position)
        self._pose = Pose2D(start_position.x, start_position.y, float(start_heading))
        self._full_path = [start_position]
        self._vehicle_window.clear()
        if self._gps1_window is not None:
            self._gps1_window.clear()
        if self._gps2_window is not None:
            self._gps2_window.clear()
        self._initialized = True
        logger.debug("Trajectory state initialized at (%.3f, %.3f)", start_position.x, start_position.y)

    def record_sample(self, position: Point2D, heading: float, gps: GpsFix | None = None) -> None:
        """Store one sample in the pose, the full path and every window.

        Raises
        ------
        NotInitialized
            If :meth:`initialize` was never called.
        MissingGpsData
            If GPS mode is enabled and ``gps`` is ``None``.
        """
        if not self._initialized:
            raise NotInitialized("record_sample() called before initialize()")
        position = Point2D.from_xy(position)
        gps_enabled = self._gps1_window is not None
        if gps_enabled:
            if gps is None:
                raise MissingGpsData("GPS mode is enabled but the sample carries no GPS fixes")
            if not isinstance(gps, GpsFix):
                gps = GpsFix.from_array(gps)

        self._pose = Pose2D(position.x, position.y, float(heading))
        self._full_path.append(position)
        self._vehicle_window.push((position.x, position.y))
        if gps_enabled:
            self._gps1_window.push((gps.gps1.x, gps.gps1.y))
            self._gps2_window.push((gps.gps2.x, gps.gps2.y))

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def pose(self) -> Pose2D:
        return self._pose

    @property
    def full_path(self) -> tuple[Point2D, ...]:
        return tuple(self._full_path)

    @property
    def path_length(self) -> int:
        """Number of points in the full path, the start position included."""
        return len(self._full_path)

    def points_since(self, index: int) -> list[Point2D]:
        """Full path points from ``index`` on, without copying the earlier ones."""
        return self._full_path[index:]

    def full_path_array(self) -> np.ndarray:
        """Return the full path as an ``(M, 2)`` array."""
        return points_to_array(self._full_path)

    @property
    def sample_count(self) -> int:
        """Number of recorded samples, the start position excluded."""
        return max(len(self._full_path) - 1, 0)

    @property
    def vehicle_window(self) -> RingBuffer:
        return self._vehicle_window

    @property
    def gps1_window(self) -> RingBuffer | None:
        return self._gps1_window

    @property
    def gps2_window(self) -> RingBuffer | None:
        return self._gps2_window
