"""High-level car plotter mirroring the original prepare/update workflow."""

from __future__ import annotations

from dataclasses import fields
from typing import Sequence

import numpy as np

from car_plotter.controller import DualViewController, PlotSurface
from car_plotter.errors import InvalidConfiguration, NotSetup
from car_plotter.types import CarPlotterConfig, GpsFix, Point2D, TrajectorySample


class CarPlotter:
    """Zoomed plus full-map view of a vehicle following a reference path.

    Parameters
    ----------
    config:
        Session configuration. Keyword ``overrides`` replace single fields,
        e.g. ``CarPlotter(use_gps=True, buffer_size=100)``.
    surface:
        Rendering surface. A :class:`~car_plotter.viz.matplotlib_surface.MatplotlibSurface`
        is created on the first :meth:`prepare_figure` when omitted.
    """

    def __init__(self, config: CarPlotterConfig | None = None, surface: PlotSurface | None = None, **overrides) -> None:
        base = CarPlotterConfig() if config is None else config
        known = {item.name for item in fields(CarPlotterConfig)}
        unknown = set(overrides) - known
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
        values = {name: getattr(base, name) for name in known}
        values.update(overrides)
        self.config = CarPlotterConfig(**values)
        self._surface = surface
        self._controller: DualViewController | None = None

    @property
    def surface(self) -> PlotSurface | None:
        return self._surface

    @property
    def controller(self) -> DualViewController | None:
        return self._controller

    def prepare_figure(
        self,
        map_points: Sequence[Sequence[float]] | np.ndarray,
        car_position: Sequence[float] | Point2D,
        heading: float,
    ) -> None:
        """Draw the reference path and the vehicle at its starting pose."""
        if self._surface is None:
            from car_plotter.viz.matplotlib_surface import MatplotlibSurface

            self._surface = MatplotlibSurface()
        if self._controller is None:
            self._controller = DualViewController(surface=self._surface, config=self.config)
        self._controller.setup(map_points, car_position, heading)

    def update_data(
        self,
        car_position: Sequence[float] | Point2D,
        heading: float,
        gps: GpsFix | Sequence[float] | None = None,
    ) -> None:
        """Store a new sample without redrawing.

        ``gps`` is a :class:`GpsFix` or ``[x1, y1, x2, y2]``; it is ignored
        unless the plotter was built with ``use_gps=True``.
        """
        if not self.config.use_gps:
            gps = None
        self._require_controller().record(TrajectorySample.from_values(car_position, heading, gps))

    def update_plots(self) -> None:
        """Redraw both views from the stored data."""
        self._require_controller().render()

    def update(
        self,
        car_position: Sequence[float] | Point2D,
        heading: float,
        gps: GpsFix | Sequence[float] | None = None,
    ) -> None:
        """Store a sample and redraw."""
        self.update_data(car_position, heading, gps)
        self.update_plots()

    def _require_controller(self) -> DualViewController:
        if self._controller is None:
            raise NotSetup("prepare_figure() must be called before updating the plots")
        return self._controller
