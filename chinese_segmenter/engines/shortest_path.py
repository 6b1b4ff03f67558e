"""Dictionary-based segmentation as a shortest-path search (unigram Viterbi)."""

import heapq
import logging
import math
from enum import IntEnum

from ..word_model import WordModel
from .base import SegmentationEngine

logger = logging.getLogger(__name__)


class NodeStatus(IntEnum):
    """State of an offset in the per-call segmentation graph."""

    UNDISCOVERED = 0
    QUEUED = 1
    UNRECOGNIZED = 2  # expanded, and no dictionary word starts here


class ShortestPathSegmenter(SegmentationEngine):
    """Split unspaced text into its most probable sequence of words.

    Every offset of the input is a node and every dictionary word starting at
    an offset is an edge weighted by the word's cost. Dijkstra's algorithm
    finds the cheapest path from offset 0 to the end of the text. Offsets
    where no word starts get a single zero-cost edge over one character, and
    consecutive such characters are merged into one segment.

    Equal-cost paths are resolved deterministically: the first predecessor
    that reaches an offset keeps it, and among queued offsets with equal
    distance the leftmost is expanded first.

    The segmenter keeps no state between calls, so one instance (and one
    finished model) can serve many threads.

    Any model works, including test doubles, as long as it subclasses
    WordModel. When the model reports a max_word_length, each lookup sees
    only that many characters, which keeps a call linear in the input length.
    """

    def __init__(self, model: WordModel):
        """Initialize segmenter.

        Args:
            model: Finished word model used for prefix lookups
        """
        if not isinstance(model, WordModel):
            raise TypeError(
                f"ShortestPathSegmenter needs a WordModel, got {type(model).__name__}"
            )
        self.model = model

    def segment_with_indices(self, text: str) -> list[tuple[str, int, int]]:
        """Segment text using the word model.

        Args:
            text: Input text to segment

        Returns:
            List of (segment_text, start_index, end_index) tuples
        """
        if not text:
            return []

        length = len(text)
        dist = [math.inf] * (length + 1)
        prev = [0] * (length + 1)
        status = [NodeStatus.UNDISCOVERED] * (length + 1)
        expanded = [False] * (length + 1)

        dist[0] = 0.0
        status[0] = NodeStatus.QUEUED
        queue = [(0.0, 0)]
        window = self.model.max_word_length
        expansions = 0

        def relax(source: int, target: int, cost: float) -> None:
            if status[target] == NodeStatus.UNDISCOVERED:
                status[target] = NodeStatus.QUEUED
            if cost < dist[target]:
                dist[target] = cost
                prev[target] = source
                heapq.heappush(queue, (cost, target))

        while queue:
            distance, pos = heapq.heappop(queue)
            if expanded[pos] or distance > dist[pos]:
                continue  # stale entry
            expanded[pos] = True
            if pos == length:
                break
            expansions += 1

            suffix = text[pos:] if window is None else text[pos:pos + window]
            matches = self.model.find_prefixes_with_weight(suffix)
            for match in matches:
                relax(pos, pos + len(match.word), distance + match.weight)

            if not matches:
                status[pos] = NodeStatus.UNRECOGNIZED
                relax(pos, pos + 1, distance)

        logger.debug(f"Segmented {length} characters in {expansions} expansions")
        return self._backtrack(text, prev, status)

    @staticmethod
    def _backtrack(
        text: str, prev: list[int], status: list[NodeStatus]
    ) -> list[tuple[str, int, int]]:
        """Walk predecessor links from the end, merging unrecognized runs."""
        segments = []
        end = len(text)
        while end > 0:
            start = prev[end]
            while (
                start > 0
                and status[start] == NodeStatus.UNRECOGNIZED
                and status[prev[start]] == NodeStatus.UNRECOGNIZED
            ):
                start = prev[start]
            segments.append((text[start:end], start, end))
            end = start

        segments.reverse()
        return segments
