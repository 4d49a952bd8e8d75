"""Batching of closed frames into rotating learning data files."""

from pathlib import Path
from typing import List, Optional

import polars as pl

from feature_gen.schemas.frames import LearningData, LearningDataFrame
from feature_gen.utils.io_utils import TEXT_SUFFIX, ensure_dir, save_learning_data
from feature_gen.utils.logging_utils import get_logger
from .errors import SerializationError

logger = get_logger(__name__)

FILE_PREFIX = "learning_data"
BINARY_SUFFIX = ".bin"


class BatchWriter:
    """Collects closed frames and writes them out ``frames_per_file`` at a time.

    File index and cumulative frame count belong to the writer instance.
    """

    def __init__(
        self,
        output_dir: str | Path,
        frames_per_file: int,
        binary: bool = True,
    ):
        """Initialize writer.

        Args:
            output_dir: Directory for learning data files
            frames_per_file: Batch size that triggers a flush
            binary: Parquet files, otherwise indented JSON text
        """
        if frames_per_file <= 0:
            raise ValueError("frames_per_file must be > 0")

        self.output_dir = Path(output_dir)
        self.frames_per_file = frames_per_file
        self.binary = binary

        self._batch: List[LearningDataFrame] = []
        self._file_index = 0
        self._total_frames = 0
        self.written_files: List[Path] = []

    @property
    def file_index(self) -> int:
        """Index the next flushed file will use."""
        return self._file_index

    @property
    def total_frames(self) -> int:
        """Frames flushed so far across all files."""
        return self._total_frames

    @property
    def pending(self) -> int:
        """Frames waiting in the current batch."""
        return len(self._batch)

    @property
    def suffix(self) -> str:
        return BINARY_SUFFIX if self.binary else TEXT_SUFFIX

    def file_name(self, index: int) -> Path:
        return self.output_dir / f"{FILE_PREFIX}.{index}{self.suffix}"

    def on_frame_closed(self, frame: LearningDataFrame) -> Optional[Path]:
        """Queue a closed frame, flushing once the batch is full.

        A batch left over from a failed flush is written out in
        ``frames_per_file`` chunks.

        Args:
            frame: Closed learning data frame

        Returns:
            Path of the last file written, if this frame completed a batch
        """
        self._batch.append(frame)
        written = None
        while len(self._batch) >= self.frames_per_file:
            written = self.flush()
        return written

    def flush(self) -> Optional[Path]:
        """Write up to ``frames_per_file`` queued frames to the next file index.

        An empty batch is skipped. If writing fails the batch and counters
        are left untouched.

        Returns:
            Path of the file written, or None for an empty batch

        Raises:
            SerializationError: If the batch could not be written
        """
        if not self._batch:
            return None

        file_path = self.file_name(self._file_index)
        chunk = self._batch[: self.frames_per_file]
        frame_count = len(chunk)

        try:
            ensure_dir(self.output_dir)
            save_learning_data(LearningData(learning_data=chunk), file_path, binary=self.binary)
        except (OSError, TypeError, ValueError, pl.exceptions.PolarsError) as e:
            logger.error(f"Failed to write learning data file {file_path}: {e}")
            raise SerializationError(file_path, frame_count, e) from e

        self._total_frames += frame_count
        self._file_index += 1
        self._batch = self._batch[frame_count:]
        self.written_files.append(file_path)

        logger.info(f"Wrote {frame_count} frames to {file_path}")
        return file_path

    def finalize(self) -> int:
        """Flush every queued frame and report the cumulative frame total.

        Returns:
            Total frames flushed by this writer

        Raises:
            SerializationError: If a remaining batch could not be written
        """
        while self._batch:
            self.flush()
        logger.info(f"Total learning_data_frame number: {self._total_frames}")
        return self._total_frames
