"""Sliding window of localization samples used to derive trajectory labels."""

from collections import deque
from typing import Deque, Iterator, List

from feature_gen.schemas.samples import LocalizationSample
from feature_gen.utils.logging_utils import get_logger

logger = get_logger(__name__)


class LabelWindow:
    """FIFO buffer of localization samples with bounded front eviction.

    Samples only enter at the back and only leave from the front; the
    window is never reordered.
    """

    def __init__(self, capacity: int):
        """Initialize the window.

        Args:
            capacity: Number of samples that makes the window full
                (label sample interval)
        """
        if capacity <= 0:
            raise ValueError("capacity must be > 0")

        self.capacity = int(capacity)
        self._samples: Deque[LocalizationSample] = deque()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[LocalizationSample]:
        return iter(self._samples)

    @property
    def is_full(self) -> bool:
        return len(self._samples) >= self.capacity

    def append(self, sample: LocalizationSample) -> None:
        self._samples.append(sample)

    def sample(self, stride: int) -> List[LocalizationSample]:
        """Every ``stride``-th sample, front to back, starting with the first.

        Args:
            stride: Sampling interval (>= 1)

        Returns:
            Selected samples in time order
        """
        if stride <= 0:
            raise ValueError("stride must be > 0")
        return [s for i, s in enumerate(self._samples) if i % stride == 0]

    def evict(self, count: int) -> int:
        """Drop up to ``count`` samples from the front.

        Eviction saturates at an empty window.

        Args:
            count: Number of samples to drop

        Returns:
            Number of samples actually dropped
        """
        evicted = min(max(count, 0), len(self._samples))
        if evicted < count:
            logger.debug(
                f"Window eviction saturated: requested {count}, held {len(self._samples)}"
            )

        for _ in range(evicted):
            self._samples.popleft()
        return evicted
