r"""car_plotter package.

Live zoomed and full-map views of a ground vehicle following a reference path.
"""

from .controller import DualViewController, PlotSurface, View
from .errors import (
    CarPlotterError,
    DegeneratePath,
    InvalidCapacity,
    InvalidConfiguration,
    MissingGpsData,
    NotInitialized,
    NotSetup,
)
from .geometry import vehicle_silhouette
from .plotter import CarPlotter
from .ring_buffer import RingBuffer
from .trajectory_state import TrajectoryState
from .types import (
    CarPlotterConfig,
    GpsFix,
    Point2D,
    Pose2D,
    TrajectorySample,
    VehicleDimensions,
    VehicleSilhouette,
    ViewWindow,
)

__all__ = [
    "CarPlotter",
    "CarPlotterConfig",
    "CarPlotterError",
    "DegeneratePath",
    "DualViewController",
    "GpsFix",
    "InvalidCapacity",
    "InvalidConfiguration",
    "MissingGpsData",
    "NotInitialized",
    "NotSetup",
    "PlotSurface",
    "Point2D",
    "Pose2D",
    "RingBuffer",
    "TrajectorySample",
    "TrajectoryState",
    "VehicleDimensions",
    "VehicleSilhouette",
    "View",
    "ViewWindow",
    "vehicle_silhouette",
]
