"""Chinese segmenter - split unspaced text into its most probable words."""

__version__ = "0.1.0"

from .config import Config
from .dictionary import MarisaPrefixDictionary, PrefixDictionary
from .engines import SegmentationEngine, ShortestPathSegmenter
from .loader import ModelLoader, load_model
from .models import WordWeight
from .pipeline import SegmentationPipeline
from .word_model import WeightedWordModel, WordModel

__all__ = [
    "Config",
    "MarisaPrefixDictionary",
    "ModelLoader",
    "PrefixDictionary",
    "SegmentationEngine",
    "SegmentationPipeline",
    "ShortestPathSegmenter",
    "WeightedWordModel",
    "WordModel",
    "WordWeight",
    "load_model",
]
