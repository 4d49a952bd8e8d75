"""Frame and label window accumulation.

Each localization sample refreshes the open frame's localization snapshot
and enters the label window. Once the window holds ``label_sample_interval``
samples, the open frame is closed with trajectory labels stride-sampled from
the window, a fresh frame is opened, and ``move_window_step`` samples are
evicted from the front of the window. Consecutive labels therefore share
``label_sample_interval - move_window_step`` samples.
"""

from dataclasses import dataclass
from typing import Optional

from feature_gen.schemas.frames import ChassisFeature, LearningDataFrame, LocalizationFeature
from feature_gen.schemas.samples import ChassisSample, LocalizationSample
from feature_gen.utils.logging_utils import get_logger
from .errors import NoOpenFrameError
from .labels import generate_trajectory_label
from .window import LabelWindow

logger = get_logger(__name__)


@dataclass
class OpenFrame:
    """Frame still accepting feature updates."""

    frame_num: int
    localization_feature: Optional[LocalizationFeature] = None
    chassis_feature: Optional[ChassisFeature] = None

    def close(self, window: LabelWindow, stride: int) -> LearningDataFrame:
        """Freeze the frame with labels drawn from the window."""
        return LearningDataFrame(
            frame_num=self.frame_num,
            localization_feature=self.localization_feature,
            chassis_feature=self.chassis_feature,
            label_trajectory_points=generate_trajectory_label(window, stride),
        )


class FrameAccumulator:
    """Owns the open frame and the label window of one sample stream."""

    def __init__(
        self,
        label_sample_interval: int,
        trajectory_point_interval: int,
        move_window_step: int,
    ):
        """Initialize accumulator with the first frame open.

        Args:
            label_sample_interval: Window length that triggers a frame close
            trajectory_point_interval: Stride for trajectory point sampling
            move_window_step: Samples evicted from the window per close
        """
        if trajectory_point_interval <= 0:
            raise ValueError("trajectory_point_interval must be > 0")
        if not 0 < move_window_step <= label_sample_interval:
            raise ValueError(
                "move_window_step must be in [1, label_sample_interval], "
                f"got {move_window_step} with interval {label_sample_interval}"
            )

        self.trajectory_point_interval = trajectory_point_interval
        self.move_window_step = move_window_step
        self.window = LabelWindow(label_sample_interval)

        self.frames_closed = 0
        self._open_frame: Optional[OpenFrame] = OpenFrame(frame_num=0)

    @property
    def open_frame(self) -> Optional[OpenFrame]:
        return self._open_frame

    def _require_open_frame(self) -> OpenFrame:
        if self._open_frame is None:
            raise NoOpenFrameError("No open learning data frame")
        return self._open_frame

    def on_localization(self, sample: LocalizationSample) -> Optional[LearningDataFrame]:
        """Ingest a localization sample.

        Args:
            sample: Localization sample

        Returns:
            The frame closed by this sample, or None

        Raises:
            NoOpenFrameError: If no frame is open
        """
        frame = self._require_open_frame()
        frame.localization_feature = LocalizationFeature.from_sample(sample)
        self.window.append(sample)

        if not self.window.is_full:
            return None

        closed = frame.close(self.window, self.trajectory_point_interval)
        self.frames_closed += 1
        self._open_frame = OpenFrame(frame_num=closed.frame_num + 1)
        self.window.evict(self.move_window_step)

        logger.debug(
            f"Closed frame {closed.frame_num} with "
            f"{len(closed.label_trajectory_points)} trajectory points"
        )
        return closed

    def on_chassis(self, sample: ChassisSample) -> None:
        """Overwrite the open frame's chassis snapshot.

        Raises:
            NoOpenFrameError: If no frame is open
        """
        frame = self._require_open_frame()
        frame.chassis_feature = ChassisFeature.from_sample(sample)

    def close(self) -> Optional[OpenFrame]:
        """Stop accepting samples.

        The open frame never reached a label, so it is discarded rather
        than emitted.

        Returns:
            The discarded open frame, or None if already closed
        """
        discarded, self._open_frame = self._open_frame, None
        if discarded is not None:
            logger.debug(
                f"Discarding unlabeled frame {discarded.frame_num} "
                f"({len(self.window)} samples left in window)"
            )
        return discarded
