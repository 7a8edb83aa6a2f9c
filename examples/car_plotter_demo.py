r"""Drive a vehicle around an oval course and show it live in both views."""

from __future__ import annotations

import logging

import matplotlib.pyplot as plt
import numpy as np

from car_plotter.controller import DualViewController
from car_plotter.types import CarPlotterConfig, GpsFix, Point2D, TrajectorySample
from car_plotter.viz.matplotlib_surface import MatplotlibSurface, PlotStyle


def oval_course(n_points: int = 400, half_length: float = 120.0, half_width: float = 60.0) -> np.ndarray:
    angles = np.linspace(0.0, 2.0 * np.pi, num=n_points)
    return np.column_stack([half_length * np.cos(angles), half_width * np.sin(angles)])


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s - %(message)s")
    rng = np.random.default_rng(42)

    course = oval_course()
    # The vehicle weaves around the reference with a slowly varying lateral offset.
    tangents = np.gradient(course, axis=0)
    headings = np.arctan2(tangents[:, 1], tangents[:, 0])
    normals = np.column_stack([-np.sin(headings), np.cos(headings)])
    offsets = 1.5 * np.sin(np.linspace(0.0, 12.0 * np.pi, num=course.shape[0]))
    vehicle_xy = course + offsets[:, None] * normals

    config = CarPlotterConfig(use_gps=True, buffer_size=80)
    surface = MatplotlibSurface(style=PlotStyle.from_rcparams())
    controller = DualViewController(surface=surface, config=config)
    controller.setup(course, vehicle_xy[0], float(headings[0]))

    paused = False

    def on_key_press(event: plt.KeyEvent) -> None:
        nonlocal paused
        if event.key == " ":
            paused = not paused
            print(f"Playback: {'PAUSED' if paused else 'RUNNING'}")

    surface.fig.canvas.mpl_connect("key_press_event", on_key_press)

    # Antennas sit near the front and rear axles; each fix carries independent noise.
    antenna_offset = 0.5 * config.wheel_base
    for xy, heading in zip(vehicle_xy[1:], headings[1:]):
        while paused and surface.is_open():
            plt.pause(0.05)
        if not surface.is_open():
            break

        direction = np.array([np.cos(heading), np.sin(heading)])
        gps1 = xy + 2.0 * antenna_offset * direction + rng.normal(0.0, 0.3, size=2)
        gps2 = xy + rng.normal(0.0, 0.3, size=2)
        sample = TrajectorySample(
            position=Point2D(float(xy[0]), float(xy[1])),
            heading=float(heading),
            gps=GpsFix(Point2D.from_xy(gps1), Point2D.from_xy(gps2)),
        )
        controller.tick(sample)
        plt.pause(0.02)

    surface.flush()
    print(f"Demo complete after {controller.state.sample_count} samples. Close the plot window to exit.")
    plt.show()


if __name__ == "__main__":
    main()
