"""Feature generator: turns a localization/chassis stream into learning data files."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from feature_gen.conf.settings import Settings
from feature_gen.ingestion.record_reader import (
    RecordReader,
    decode_chassis,
    decode_localization,
)
from feature_gen.schemas.samples import ChassisSample, LocalizationSample
from feature_gen.utils.logging_utils import get_logger
from .accumulator import FrameAccumulator
from .batch_writer import BatchWriter
from .errors import NoOpenFrameError

logger = get_logger(__name__)


class IngestOutcome(str, Enum):
    """Result of feeding one sample to the generator."""

    ACCEPTED = "accepted"  # Features updated, no frame closed
    FRAME_CLOSED = "frame_closed"
    BATCH_FLUSHED = "batch_flushed"  # Frame closed and completed a file
    NO_OPEN_FRAME = "no_open_frame"  # Sample dropped


@dataclass
class GenerationStats:
    """Statistics from a feature generation run."""

    localization_samples: int = 0
    chassis_samples: int = 0
    dropped_samples: int = 0
    malformed_messages: int = 0
    records_processed: int = 0
    frames_closed: int = 0
    files_written: int = 0
    total_frames: int = 0
    output_files: List[str] = field(default_factory=list)


class FeatureGenerator:
    """Single-stream pipeline: frame accumulation followed by batch writing.

    One instance per input stream; instances share no mutable state.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize generator.

        Args:
            settings: Generator settings (default: fresh Settings())
        """
        self.settings = settings or Settings()

        self.accumulator = FrameAccumulator(
            label_sample_interval=self.settings.label_sample_interval,
            trajectory_point_interval=self.settings.trajectory_point_interval,
            move_window_step=self.settings.move_window_step,
        )
        self.writer = BatchWriter(
            output_dir=self.settings.planning_data_dir,
            frames_per_file=self.settings.frames_per_file,
            binary=self.settings.enable_binary_learning_data,
        )
        self.stats = GenerationStats()
        self._closed = False

    def on_localization(self, sample: LocalizationSample) -> IngestOutcome:
        """Feed one localization sample.

        Raises:
            SerializationError: If a full batch could not be written
        """
        try:
            closed = self.accumulator.on_localization(sample)
        except NoOpenFrameError:
            return self._drop("localization")

        self.stats.localization_samples += 1
        if closed is None:
            return IngestOutcome.ACCEPTED

        self.stats.frames_closed += 1
        if self.writer.on_frame_closed(closed) is not None:
            return IngestOutcome.BATCH_FLUSHED
        return IngestOutcome.FRAME_CLOSED

    def on_chassis(self, sample: ChassisSample) -> IngestOutcome:
        """Feed one chassis sample."""
        try:
            self.accumulator.on_chassis(sample)
        except NoOpenFrameError:
            return self._drop("chassis")

        self.stats.chassis_samples += 1
        return IngestOutcome.ACCEPTED

    def _drop(self, kind: str) -> IngestOutcome:
        self.stats.dropped_samples += 1
        logger.warning(f"learning_data_frame is not open, dropping {kind} sample")
        return IngestOutcome.NO_OPEN_FRAME

    def process_offline_data(self, record_path: str | Path) -> bool:
        """Feed every localization and chassis message of a record file.

        Messages on other channels are ignored; messages that fail to decode
        are skipped and counted.

        Args:
            record_path: Path to record file

        Returns:
            False if the record could not be opened, True otherwise

        Raises:
            SerializationError: If a full batch could not be written
        """
        reader = RecordReader(record_path)
        if not reader.is_valid:
            logger.error(f"Fail to open {record_path}")
            return False

        localization_channel = self.settings.localization_channel
        chassis_channel = self.settings.chassis_channel

        for message in reader.read_messages():
            if message.channel_name == localization_channel:
                localization = decode_localization(message.content)
                if localization is None:
                    self.stats.malformed_messages += 1
                    continue
                self.on_localization(localization)
            elif message.channel_name == chassis_channel:
                chassis = decode_chassis(message.content)
                if chassis is None:
                    self.stats.malformed_messages += 1
                    continue
                self.on_chassis(chassis)

        self.stats.records_processed += 1
        return True

    def close(self) -> GenerationStats:
        """Finish the stream: flush the partial batch and report statistics.

        Samples fed after close are dropped.

        Returns:
            GenerationStats for the run

        Raises:
            SerializationError: If the final batch could not be written
        """
        if not self._closed:
            self.writer.finalize()
            self.accumulator.close()
            self._closed = True

        self.stats.total_frames = self.writer.total_frames
        self.stats.files_written = len(self.writer.written_files)
        self.stats.output_files = [str(p) for p in self.writer.written_files]

        logger.info("=" * 60)
        logger.info("Feature Generation Summary:")
        logger.info(f"  Records processed: {self.stats.records_processed}")
        logger.info(f"  Localization samples: {self.stats.localization_samples:,}")
        logger.info(f"  Chassis samples: {self.stats.chassis_samples:,}")
        if self.stats.malformed_messages:
            logger.warning(f"  Malformed messages skipped: {self.stats.malformed_messages:,}")
        if self.stats.dropped_samples:
            logger.warning(f"  Samples dropped (no open frame): {self.stats.dropped_samples:,}")
        logger.info(f"  Frames closed: {self.stats.frames_closed:,}")
        logger.info(f"  Files written: {self.stats.files_written}")
        logger.info(f"  Total learning_data_frame number: {self.stats.total_frames:,}")
        logger.info("=" * 60)

        return self.stats
