r"""Vehicle silhouette geometry.

The vehicle body frame has ``x`` pointing to the front and ``y`` towards the
left door. The silhouette is a triangle spanned by the front axle midpoint
and both rear wheels:

.. math::
   p_f = p + R(\psi)\,[L, 0]^T,
   \quad p_l = p + R(\psi)\,[0, W/2]^T,
   \quad p_r = p + R(\psi)\,[0, -W/2]^T
"""

from __future__ import annotations

import numpy as np

from car_plotter.types import Point2D, Pose2D, VehicleDimensions, VehicleSilhouette


def rotation_matrix(heading_rad: float) -> np.ndarray:
    """2D rotation matrix for ``heading_rad``."""
    c, s = np.cos(heading_rad), np.sin(heading_rad)
    return np.array([[c, -s], [s, c]], dtype=float)


def vehicle_silhouette(pose: Pose2D, dims: VehicleDimensions) -> VehicleSilhouette:
    """Compute the ``(left, right, front)`` silhouette vertices for ``pose``."""
    rot = rotation_matrix(pose.heading)
    origin = np.array([pose.x, pose.y], dtype=float)
    half_track = 0.5 * dims.front_track

    front = origin + rot @ np.array([dims.wheel_base, 0.0])
    left = origin + rot @ np.array([0.0, half_track])
    right = origin + rot @ np.array([0.0, -half_track])
    return VehicleSilhouette(
        left=Point2D(float(left[0]), float(left[1])),
        right=Point2D(float(right[0]), float(right[1])),
        front=Point2D(float(front[0]), float(front[1])),
    )
