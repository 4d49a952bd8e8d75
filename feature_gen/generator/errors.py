"""Exceptions raised by the feature generator."""


class FeatureGeneratorError(Exception):
    """Base class for feature generator errors."""


class NoOpenFrameError(FeatureGeneratorError):
    """A sample arrived while no frame was open to receive it."""


class SerializationError(FeatureGeneratorError):
    """A batch could not be written to its output file."""

    def __init__(self, file_path, frame_count: int, cause: Exception):
        self.file_path = file_path
        self.frame_count = frame_count
        self.cause = cause
        super().__init__(
            f"Failed to write {frame_count} frames to {file_path}: {cause}"
        )
