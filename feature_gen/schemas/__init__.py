"""Data schemas for samples and learning data frames."""

from .samples import Point3D, GearPosition, LocalizationSample, ChassisSample
from .frames import (
    LocalizationFeature,
    ChassisFeature,
    PathPoint,
    TrajectoryPoint,
    LearningDataFrame,
    LearningData,
)

__all__ = [
    # Samples
    "Point3D",
    "GearPosition",
    "LocalizationSample",
    "ChassisSample",
    # Frames
    "LocalizationFeature",
    "ChassisFeature",
    "PathPoint",
    "TrajectoryPoint",
    "LearningDataFrame",
    "LearningData",
]
