import numpy as np
import pytest

from car_plotter.errors import InvalidCapacity, MissingGpsData, NotInitialized
from car_plotter.trajectory_state import TrajectoryState
from car_plotter.types import GpsFix, Point2D, Pose2D


def test_record_before_initialize_fails() -> None:
    state = TrajectoryState(buffer_size=5)
    with pytest.raises(NotInitialized):
        state.record_sample(Point2D(1.0, 1.0), 0.0)


def test_new_state_starts_at_origin_with_empty_windows() -> None:
    state = TrajectoryState(buffer_size=4)
    assert state.pose == Pose2D(0.0, 0.0, 0.0)
    assert not state.initialized
    assert state.full_path == ()
    assert state.gps1_window is None
    assert np.all(np.isnan(state.vehicle_window.snapshot()))


def test_initialize_resets_path_and_windows() -> None:
    state = TrajectoryState(buffer_size=3, use_gps=True)
    state.initialize(Point2D(1.0, 2.0), 0.3)
    state.record_sample(Point2D(2.0, 2.0), 0.4, GpsFix(Point2D(2.1, 2.0), Point2D(1.9, 2.0)))

    state.initialize(Point2D(-1.0, -1.0), 1.0)
    assert state.pose == Pose2D(-1.0, -1.0, 1.0)
    assert state.full_path == (Point2D(-1.0, -1.0),)
    assert state.sample_count == 0
    for window in (state.vehicle_window, state.gps1_window, state.gps2_window):
        assert window.count == 0


def test_record_updates_pose_path_and_window_together() -> None:
    state = TrajectoryState(buffer_size=2)
    state.initialize(Point2D(0.0, 0.0), 0.0)
    for step in range(1, 5):
        state.record_sample(Point2D(float(step), 0.0), 0.1 * step)

    assert state.pose.position == Point2D(4.0, 0.0)
    assert state.pose.heading == pytest.approx(0.4)
    assert state.sample_count == 4
    assert np.allclose(state.full_path_array()[:, 0], [0.0, 1.0, 2.0, 3.0, 4.0])
    assert np.allclose(state.vehicle_window.snapshot(), [[3.0, 0.0], [4.0, 0.0]])


def test_heading_is_not_normalized() -> None:
    state = TrajectoryState()
    state.initialize(Point2D(0.0, 0.0), 0.0)
    state.record_sample(Point2D(0.0, 0.0), 7.5)
    assert state.pose.heading == 7.5


def test_gps_windows_follow_fixes() -> None:
    state = TrajectoryState(buffer_size=3, use_gps=True)
    state.initialize(Point2D(0.0, 0.0), 0.0)
    state.record_sample(Point2D(1.0, 0.0), 0.0, GpsFix(Point2D(1.1, 0.1), Point2D(0.9, -0.1)))
    state.record_sample(Point2D(2.0, 0.0), 0.0, [2.1, 0.1, 1.9, -0.1])

    assert np.allclose(state.gps1_window.values(), [[1.1, 0.1], [2.1, 0.1]])
    assert np.allclose(state.gps2_window.values(), [[0.9, -0.1], [1.9, -0.1]])


def test_missing_gps_leaves_state_unchanged() -> None:
    state = TrajectoryState(buffer_size=3, use_gps=True)
    state.initialize(Point2D(0.0, 0.0), 0.0)
    state.record_sample(Point2D(1.0, 0.0), 0.0, GpsFix(Point2D(1.0, 0.0), Point2D(1.0, 0.0)))
    pose_before = state.pose
    path_before = state.full_path
    window_before = state.vehicle_window.snapshot()

    with pytest.raises(MissingGpsData):
        state.record_sample(Point2D(5.0, 5.0), 1.0)
    with pytest.raises(MissingGpsData):
        state.record_sample(Point2D(5.0, 5.0), 1.0, [1.0, 2.0])

    assert state.pose == pose_before
    assert state.full_path == path_before
    assert np.array_equal(state.vehicle_window.snapshot(), window_before, equal_nan=True)
    assert state.gps1_window.count == 1


def test_gps_ignored_when_disabled() -> None:
    state = TrajectoryState(buffer_size=3, use_gps=False)
    state.initialize(Point2D(0.0, 0.0), 0.0)
    state.record_sample(Point2D(1.0, 1.0), 0.0, GpsFix(Point2D(9.0, 9.0), Point2D(9.0, 9.0)))
    assert state.gps1_window is None
    assert state.full_path[-1] == Point2D(1.0, 1.0)


def test_invalid_buffer_size() -> None:
    with pytest.raises(InvalidCapacity):
        TrajectoryState(buffer_size=0)


def test_points_since_returns_only_the_tail() -> None:
    state = TrajectoryState(buffer_size=2)
    state.initialize(Point2D(0.0, 0.0), 0.0)
    for step in range(1, 6):
        state.record_sample(Point2D(float(step), 0.0), 0.0)

    assert state.path_length == 6
    assert state.points_since(4) == [Point2D(4.0, 0.0), Point2D(5.0, 0.0)]
    assert state.points_since(state.path_length) == []
