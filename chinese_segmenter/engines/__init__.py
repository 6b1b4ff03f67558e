"""Segmentation engines."""

from .base import SegmentationEngine
from .shortest_path import NodeStatus, ShortestPathSegmenter

__all__ = ["SegmentationEngine", "ShortestPathSegmenter", "NodeStatus"]
