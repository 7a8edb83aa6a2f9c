"""Matplotlib implementation of the plot surface used by the car plotter."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.lines import Line2D
from matplotlib.patches import Polygon

from car_plotter.controller import View
from car_plotter.types import Point2D

logger = logging.getLogger(__name__)

# Line colour order of the newer MATLAB releases the original tool was styled with.
DEFAULT_PALETTE: tuple[str, ...] = (
    "#0072bd",
    "#d95319",
    "#edb120",
    "#7e2f8e",
    "#77ac30",
    "#4dbeee",
    "#a2142f",
)


@dataclass(slots=True)
class PlotStyle:
    """Palette and per-role artist styling.

    Roles map to palette slots the same way for every view: the vehicle path
    and position use slot 0, the reference path slot 1, start/stop markers
    slots 2 and 4, GPS tracks slots 3 and 5.
    """

    palette: tuple[str, ...] = DEFAULT_PALETTE
    vehicle_face_color: str = "cyan"
    marker_size: float = 7.0

    @classmethod
    def from_rcparams(cls, min_colors: int = 6) -> "PlotStyle":
        """Use the active matplotlib colour cycle, or the default palette if it is too short."""
        colors = tuple(plt.rcParams["axes.prop_cycle"].by_key().get("color", ()))
        if len(colors) < min_colors:
            logger.debug("Colour cycle has %d colours, using default palette", len(colors))
            return cls()
        return cls(palette=colors)

    def color(self, slot: int) -> str:
        return self.palette[slot % len(self.palette)]

    def series_kwargs(self, role: str) -> dict:
        """Keyword arguments for ``Axes.plot`` for a series role."""
        if role == "reference":
            return {"color": self.color(1), "lw": 1.2, "label": "Ref."}
        if role == "vehicle_path":
            return {"color": self.color(0), "ls": "--", "lw": 1.2, "label": "Car"}
        if role == "position":
            return {"color": self.color(0), "ls": "none", "marker": "o", "ms": self.marker_size, "mfc": self.color(0)}
        if role == "start":
            return {"color": self.color(2), "ls": "none", "marker": "s", "ms": self.marker_size, "mfc": self.color(2), "label": "Start"}
        if role == "end":
            return {"color": self.color(4), "ls": "none", "marker": "s", "ms": self.marker_size, "mfc": self.color(4), "label": "Stop"}
        if role == "gps1":
            return {"color": self.color(3), "ls": "none", "marker": ".", "ms": 4.0, "label": "GPS 1"}
        if role == "gps2":
            return {"color": self.color(5), "ls": "none", "marker": ".", "ms": 4.0, "label": "GPS 2"}
        raise ValueError(f"Unsupported series style: {role}")

    def shape_kwargs(self, role: str) -> dict:
        """Keyword arguments for :class:`~matplotlib.patches.Polygon` for a shape role."""
        if role == "vehicle":
            return {"facecolor": self.vehicle_face_color, "edgecolor": "k", "lw": 0.8}
        raise ValueError(f"Unsupported shape style: {role}")


@dataclass(slots=True)
class MatplotlibSurface:
    """Side-by-side zoomed and full-map axes in one figure.

    Notes
    -----
    Artists are created once and updated in place. Render requests closer
    together than ``1 / max_fps`` seconds are coalesced, like MATLAB's
    ``drawnow limitrate``.
    """

    style: PlotStyle = field(default_factory=PlotStyle)
    max_fps: float = 20.0
    figure_name: str = "Car Plotter"
    figsize: tuple[float, float] = (12.0, 6.0)
    fig: plt.Figure = field(init=False)
    _axes: dict[View, plt.Axes] = field(init=False, repr=False)
    _last_render_s: float | None = field(init=False, repr=False)
    _render_pending: bool = field(init=False, repr=False)
    _series_buffers: dict[Line2D, tuple[np.ndarray, int]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if plt.fignum_exists(self.figure_name):
            self.fig = plt.figure(self.figure_name)
            self.fig.clf()
            logger.debug("Reusing open figure %r", self.figure_name)
        else:
            self.fig = plt.figure(self.figure_name, figsize=self.figsize)
            logger.debug("Created figure %r", self.figure_name)
        self._last_render_s = None
        self._render_pending = False
        self._series_buffers = {}
        self._build_axes()

    def _build_axes(self) -> None:
        zoomed = self.fig.add_subplot(1, 2, 1)
        full_map = self.fig.add_subplot(1, 2, 2)
        zoomed.set_title("Estimated position in 2D - zoom", fontsize=9)
        full_map.set_title("Estimated position in 2D", fontsize=9)
        for ax in (zoomed, full_map):
            ax.set_xlabel("East [m]", fontsize=9)
            ax.set_ylabel("North [m]", fontsize=9)
            ax.set_aspect("equal", adjustable="box")
            ax.grid(True, alpha=0.3)
        self._axes = {View.ZOOMED: zoomed, View.FULL_MAP: full_map}

    def axes(self, view: View) -> plt.Axes:
        return self._axes[View(view)]

    def create_filled_shape(self, view: View, vertices: np.ndarray, style: str) -> Polygon:
        patch = Polygon(np.asarray(vertices, dtype=float), closed=True, **self.style.shape_kwargs(style))
        self.axes(view).add_patch(patch)
        return patch

    def set_shape_vertices(self, handle: Polygon, vertices: np.ndarray) -> None:
        handle.set_xy(np.asarray(vertices, dtype=float))

    def create_series(self, view: View, points: np.ndarray, style: str) -> Line2D:
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        (line,) = self.axes(view).plot(points[:, 0], points[:, 1], **self.style.series_kwargs(style))
        if View(view) is View.FULL_MAP and style in ("vehicle_path", "end"):
            self._refresh_legend(View.FULL_MAP)
        return line

    def set_series_data(self, handle: Line2D, points: np.ndarray) -> None:
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        self._series_buffers.pop(handle, None)
        handle.set_data(points[:, 0], points[:, 1])

    def append_series_point(self, handle: Line2D, point: Point2D) -> None:
        """Append one vertex; the backing array doubles when full."""
        buffer, size = self._series_buffers.get(handle, (None, 0))
        if buffer is None:
            current = np.column_stack(
                [np.asarray(handle.get_xdata(), dtype=float), np.asarray(handle.get_ydata(), dtype=float)]
            )
            size = current.shape[0]
            buffer = np.empty((max(2 * size, 64), 2), dtype=float)
            buffer[:size] = current
        elif size == buffer.shape[0]:
            grown = np.empty((2 * size, 2), dtype=float)
            grown[:size] = buffer
            buffer = grown
        buffer[size] = (point.x, point.y)
        size += 1
        self._series_buffers[handle] = (buffer, size)
        handle.set_data(buffer[:size, 0], buffer[:size, 1])

    def set_view_bounds(self, view: View, x_min: float, x_max: float, y_min: float, y_max: float) -> None:
        ax = self.axes(view)
        ax.set_xlim(x_min, x_max)
        ax.set_ylim(y_min, y_max)

    def request_render(self) -> bool:
        """Repaint unless the previous repaint was less than ``1 / max_fps`` ago.

        Returns
        -------
        bool
            ``True`` if a repaint was issued, ``False`` if it was coalesced.
            A coalesced frame stays pending until the next repaint or :meth:`flush`.
        """
        now = time.monotonic()
        if self._last_render_s is not None and self.max_fps > 0 and now - self._last_render_s < 1.0 / self.max_fps:
            self._render_pending = True
            return False
        self._repaint(now)
        return True

    def flush(self) -> bool:
        """Repaint a coalesced frame right away. Returns ``False`` if nothing was pending."""
        if not self._render_pending:
            return False
        self._repaint(time.monotonic())
        return True

    def _repaint(self, now: float) -> None:
        self._last_render_s = now
        self._render_pending = False
        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()

    def clear(self) -> None:
        """Drop every artist and rebuild empty axes."""
        self.fig.clf()
        self._last_render_s = None
        self._render_pending = False
        self._series_buffers = {}
        self._build_axes()

    def is_open(self) -> bool:
        return plt.fignum_exists(self.fig.number)

    def close(self) -> None:
        plt.close(self.fig)

    def _refresh_legend(self, view: View) -> None:
        ax = self.axes(view)
        handles, labels = ax.get_legend_handles_labels()
        if handles:
            ax.legend(handles, labels, loc="upper center", ncol=len(handles), fontsize=8, frameon=False)
