"""Configuration management for the segmentation pipeline."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .loader import DEFAULT_DICTIONARY_URL, DEFAULT_TIMEOUT


class DictionaryConfig(BaseModel):
    """Configuration for the word frequency table."""

    source: str = Field(
        default=DEFAULT_DICTIONARY_URL,
        description="Path or http(s) URL of the frequency table (.gz/.bz2 allowed)",
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    encoding: str = "utf-8"


class SegmentationConfig(BaseModel):
    """Configuration for segmentation."""

    separator: str = " "
    max_text_length: Optional[int] = Field(
        default=None, ge=1, description="Skip records longer than this many characters"
    )


class OutputConfig(BaseModel):
    """Configuration for output options."""

    output_dir: Path = Path("data/segmented_output")
    save_tokens_csv: bool = True  # One row per word in All_Segments.csv
    save_joined_text: bool = True  # One separator-joined line per record


class Config(BaseModel):
    """Main configuration for the segmentation pipeline."""

    input_file: Optional[Path] = None
    dictionary: DictionaryConfig = Field(default_factory=DictionaryConfig)
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("input_file", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)
