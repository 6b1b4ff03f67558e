"""Base class for segmentation engines."""

from abc import ABC, abstractmethod


class SegmentationEngine(ABC):
    """Base class for segmentation engines."""

    @abstractmethod
    def segment_with_indices(self, text: str) -> list[tuple[str, int, int]]:
        """Segment text and return segments with their indices.

        Args:
            text: Input text to segment

        Returns:
            List of (segment_text, start_index, end_index) tuples, in order
        """
        pass

    def segment(self, text: str) -> list[str]:
        """Segment text into words.

        Args:
            text: Input text to segment

        Returns:
            List of segments whose concatenation equals ``text``
        """
        return [segment for segment, _, _ in self.segment_with_indices(text)]
