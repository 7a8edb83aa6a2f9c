from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402

from car_plotter.controller import View  # noqa: E402
from car_plotter.types import Point2D  # noqa: E402


@dataclass
class RecordingSurface:
    """Plot surface fake that records every call and keeps series data."""

    calls: list[tuple[str, Any]] = field(default_factory=list)
    data: dict[int, np.ndarray] = field(default_factory=dict)
    styles: dict[int, tuple[View, str]] = field(default_factory=dict)
    bounds: dict[View, tuple[float, float, float, float]] = field(default_factory=dict)
    render_requests: int = 0
    _next_handle: int = 0

    def _new_handle(self, view: View, points: np.ndarray, style: str) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.data[handle] = np.asarray(points, dtype=float).reshape(-1, 2).copy()
        self.styles[handle] = (view, style)
        return handle

    def create_filled_shape(self, view: View, vertices: np.ndarray, style: str) -> int:
        handle = self._new_handle(view, vertices, style)
        self.calls.append(("create_filled_shape", (view, style)))
        return handle

    def set_shape_vertices(self, handle: int, vertices: np.ndarray) -> None:
        self.data[handle] = np.asarray(vertices, dtype=float).copy()
        self.calls.append(("set_shape_vertices", self.styles[handle][1]))

    def create_series(self, view: View, points: np.ndarray, style: str) -> int:
        handle = self._new_handle(view, points, style)
        self.calls.append(("create_series", (view, style)))
        return handle

    def set_series_data(self, handle: int, points: np.ndarray) -> None:
        self.data[handle] = np.asarray(points, dtype=float).copy()
        self.calls.append(("set_series_data", self.styles[handle][1]))

    def append_series_point(self, handle: int, point: Point2D) -> None:
        self.data[handle] = np.vstack([self.data[handle], point.as_array()])
        self.calls.append(("append_series_point", self.styles[handle][1]))

    def set_view_bounds(self, view: View, x_min: float, x_max: float, y_min: float, y_max: float) -> None:
        self.bounds[view] = (x_min, x_max, y_min, y_max)
        self.calls.append(("set_view_bounds", view))

    def request_render(self) -> bool:
        self.render_requests += 1
        self.calls.append(("request_render", None))
        return True

    def clear(self) -> None:
        self.data.clear()
        self.styles.clear()
        self.bounds.clear()
        self.calls.append(("clear", None))

    def handle_for(self, view: View, style: str) -> int:
        matches = [handle for handle, key in self.styles.items() if key == (view, style)]
        assert len(matches) == 1, f"expected one {style} artist in {view}, found {len(matches)}"
        return matches[0]

    def series(self, view: View, style: str) -> np.ndarray:
        return self.data[self.handle_for(view, style)]

    def reset_calls(self) -> None:
        self.calls.clear()


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def straight_course() -> np.ndarray:
    """Two-point reference path along the east axis."""
    return np.array([[0.0, 0.0], [100.0, 0.0]])


@pytest.fixture
def oval_course() -> np.ndarray:
    """Closed oval reference course, 60 m x 30 m."""
    angles = np.linspace(0.0, 2.0 * np.pi, num=73)
    return np.column_stack([30.0 * np.cos(angles), 15.0 * np.sin(angles)])


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
