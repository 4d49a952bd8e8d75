"""Frame accumulation, trajectory labeling and batch writing."""

from .errors import FeatureGeneratorError, NoOpenFrameError, SerializationError
from .window import LabelWindow
from .labels import trajectory_point_from_localization, generate_trajectory_label
from .accumulator import FrameAccumulator, OpenFrame
from .batch_writer import BatchWriter
from .feature_generator import FeatureGenerator, GenerationStats, IngestOutcome

__all__ = [
    # Errors
    "FeatureGeneratorError",
    "NoOpenFrameError",
    "SerializationError",
    # Window and labels
    "LabelWindow",
    "trajectory_point_from_localization",
    "generate_trajectory_label",
    # Frames
    "FrameAccumulator",
    "OpenFrame",
    # Output
    "BatchWriter",
    # Facade
    "FeatureGenerator",
    "GenerationStats",
    "IngestOutcome",
]
