"""Trajectory label derivation from localization samples."""

from typing import List

import numpy as np

from feature_gen.schemas.frames import PathPoint, TrajectoryPoint
from feature_gen.schemas.samples import LocalizationSample
from .window import LabelWindow


def trajectory_point_from_localization(sample: LocalizationSample) -> TrajectoryPoint:
    """Convert one localization sample into a label trajectory point.

    Speed and acceleration are planar magnitudes of the x/y components.

    Args:
        sample: Localization sample

    Returns:
        TrajectoryPoint at the sample's pose
    """
    v = np.hypot(sample.linear_velocity.x, sample.linear_velocity.y)
    a = np.hypot(sample.linear_acceleration.x, sample.linear_acceleration.y)

    return TrajectoryPoint(
        path_point=PathPoint(
            x=sample.position.x,
            y=sample.position.y,
            z=sample.position.z,
            theta=sample.heading,
        ),
        v=float(v),
        a=float(a),
    )


def generate_trajectory_label(window: LabelWindow, stride: int) -> List[TrajectoryPoint]:
    """Stride-sample the window into label trajectory points.

    Args:
        window: Label window, front (oldest) to back
        stride: Trajectory point sampling interval

    Returns:
        Trajectory points in time order, starting with the oldest sample
    """
    return [trajectory_point_from_localization(s) for s in window.sample(stride)]
