r"""Two-view synchronization of the trajectory state with a plot surface.

Views
-----
``View.ZOOMED`` shows the reference path, the vehicle silhouette, the last
``buffer_size`` positions and (optionally) both GPS tracks inside a square
window re-centred on the vehicle on every frame.

``View.FULL_MAP`` shows the whole reference path with start/stop markers,
the complete vehicle path and the current position inside a window fixed
once from the reference path bounding box.

Update protocol
---------------
Each frame pushes, in this order: silhouette vertices, zoomed bounds, zoomed
path, full path append, current position marker, GPS tracks; then an
advisory render request. Repaint cadence belongs to the surface.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Protocol, Sequence

import numpy as np

from car_plotter.errors import DegeneratePath, NotSetup
from car_plotter.geometry import vehicle_silhouette
from car_plotter.trajectory_state import TrajectoryState
from car_plotter.types import (
    CarPlotterConfig,
    Point2D,
    TrajectorySample,
    VehicleDimensions,
    ViewWindow,
)

logger = logging.getLogger(__name__)


class View(str, enum.Enum):
    ZOOMED = "zoomed"
    FULL_MAP = "full_map"


class PlotSurface(Protocol):
    """Rendering capability driven by :class:`DualViewController`.

    Handles returned by the ``create_*`` methods are opaque to the controller.
    ``style`` is a role name such as ``"reference"`` or ``"vehicle_path"``;
    the surface decides what it looks like.
    """

    def create_filled_shape(self, view: View, vertices: np.ndarray, style: str) -> Any: ...

    def set_shape_vertices(self, handle: Any, vertices: np.ndarray) -> None: ...

    def create_series(self, view: View, points: np.ndarray, style: str) -> Any: ...

    def set_series_data(self, handle: Any, points: np.ndarray) -> None: ...

    def append_series_point(self, handle: Any, point: Point2D) -> None: ...

    def set_view_bounds(self, view: View, x_min: float, x_max: float, y_min: float, y_max: float) -> None: ...

    def request_render(self) -> Any: ...

    def clear(self) -> None: ...


@dataclass(slots=True)
class _SurfaceHandles:
    vehicle_shape: Any
    zoomed_path: Any
    full_path: Any
    position: Any
    gps1: Any = None
    gps2: Any = None


def _empty_series() -> np.ndarray:
    return np.full((1, 2), np.nan, dtype=float)


@dataclass(slots=True)
class DualViewController:
    """Project :class:`TrajectoryState` onto a zoomed and a full-map view."""

    surface: PlotSurface
    config: CarPlotterConfig = field(default_factory=CarPlotterConfig)

    _state: TrajectoryState = field(init=False, repr=False)
    _dims: VehicleDimensions = field(init=False, repr=False)
    _handles: _SurfaceHandles | None = field(init=False, repr=False)
    _reference_path: np.ndarray | None = field(init=False, repr=False)
    _zoomed_window: ViewWindow | None = field(init=False, repr=False)
    _full_map_window: ViewWindow | None = field(init=False, repr=False)
    _rendered_path_len: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Own copy, fixed for the session.
        self.config = replace(self.config)
        self._state = TrajectoryState(buffer_size=self.config.buffer_size, use_gps=self.config.use_gps)
        self._dims = self.config.dimensions
        self._handles = None
        self._reference_path = None
        self._zoomed_window = None
        self._full_map_window = None
        self._rendered_path_len = 0

    def setup(
        self,
        reference_path: Sequence[Sequence[float]] | np.ndarray,
        start_position: Point2D | Sequence[float],
        start_heading: float,
    ) -> None:
        """Create every artist of both views for a new session.

        Parameters
        ----------
        reference_path:
            ``(M, 2)`` array-like of reference points, ``M >= 2``.
        start_position:
            Initial vehicle position.
        start_heading:
            Initial vehicle heading in radians.

        Raises
        ------
        DegeneratePath
            If the reference path has fewer than two points or is not ``(M, 2)``.
        """
        path = np.asarray(reference_path, dtype=float)
        if path.ndim != 2 or path.shape[1] != 2:
            raise DegeneratePath(f"Reference path must be an (M, 2) array, got shape {path.shape}")
        if path.shape[0] < 2:
            raise DegeneratePath(f"Reference path needs at least 2 points, got {path.shape[0]}")
        start = Point2D.from_xy(start_position)

        if self._handles is not None:
            self.surface.clear()
            self._handles = None

        self._state.initialize(start, start_heading)
        self._reference_path = path.copy()
        self._zoomed_window = ViewWindow.centered_on(start, self.config.zoom_half_extent)
        self._full_map_window = ViewWindow.from_bounding_box(path, self.config.map_margin)

        surface = self.surface
        silhouette = vehicle_silhouette(self._state.pose, self._dims)

        surface.create_series(View.ZOOMED, path, "reference")
        vehicle_shape = surface.create_filled_shape(View.ZOOMED, silhouette.vertices(), "vehicle")
        zoomed_path = surface.create_series(View.ZOOMED, _empty_series(), "vehicle_path")
        gps1 = gps2 = None
        if self._state.gps1_window is not None:
            gps1 = surface.create_series(View.ZOOMED, _empty_series(), "gps1")
            gps2 = surface.create_series(View.ZOOMED, _empty_series(), "gps2")
        surface.set_view_bounds(View.ZOOMED, *self._zoomed_window.bounds())

        surface.create_series(View.FULL_MAP, path, "reference")
        surface.create_series(View.FULL_MAP, path[:1], "start")
        surface.create_series(View.FULL_MAP, path[-1:], "end")
        start_xy = start.as_array().reshape(1, 2)
        full_path = surface.create_series(View.FULL_MAP, start_xy, "vehicle_path")
        position = surface.create_series(View.FULL_MAP, start_xy, "position")
        surface.set_view_bounds(View.FULL_MAP, *self._full_map_window.bounds())

        self._handles = _SurfaceHandles(
            vehicle_shape=vehicle_shape,
            zoomed_path=zoomed_path,
            full_path=full_path,
            position=position,
            gps1=gps1,
            gps2=gps2,
        )
        self._rendered_path_len = 1
        logger.info(
            "Car plotter ready: %d reference points, full map bounds %s",
            path.shape[0],
            tuple(round(value, 3) for value in self._full_map_window.bounds()),
        )
        surface.request_render()

    def record(self, sample: TrajectorySample) -> None:
        """Store ``sample`` without touching the surface."""
        self._require_setup()
        self._state.record_sample(sample.position, sample.heading, sample.gps)

    def render(self) -> None:
        """Push the current state to both views."""
        handles = self._require_setup()
        surface = self.surface
        pose = self._state.pose
        position = pose.position

        surface.set_shape_vertices(handles.vehicle_shape, vehicle_silhouette(pose, self._dims).vertices())

        self._zoomed_window = ViewWindow.centered_on(position, self.config.zoom_half_extent)
        surface.set_view_bounds(View.ZOOMED, *self._zoomed_window.bounds())

        surface.set_series_data(handles.zoomed_path, self._state.vehicle_window.snapshot())

        for point in self._state.points_since(self._rendered_path_len):
            surface.append_series_point(handles.full_path, point)
        self._rendered_path_len = self._state.path_length

        surface.set_series_data(handles.position, position.as_array().reshape(1, 2))

        if handles.gps1 is not None:
            surface.set_series_data(handles.gps1, self._state.gps1_window.snapshot())
            surface.set_series_data(handles.gps2, self._state.gps2_window.snapshot())

        surface.request_render()

    def tick(self, sample: TrajectorySample) -> None:
        """Record ``sample`` and render it in one frame.

        Raises
        ------
        NotSetup
            If :meth:`setup` has not been called.
        MissingGpsData
            If GPS mode is enabled and ``sample.gps`` is ``None``.
        """
        self.record(sample)
        self.render()

    @property
    def state(self) -> TrajectoryState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._handles is not None

    @property
    def reference_path(self) -> np.ndarray | None:
        return None if self._reference_path is None else self._reference_path.copy()

    @property
    def zoomed_window(self) -> ViewWindow | None:
        return self._zoomed_window

    @property
    def full_map_window(self) -> ViewWindow | None:
        return self._full_map_window

    def _require_setup(self) -> _SurfaceHandles:
        if self._handles is None:
            raise NotSetup("setup() must be called before recording or rendering samples")
        return self._handles
