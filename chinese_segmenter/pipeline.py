"""Main segmentation pipeline."""

import json
import logging
import re
from pathlib import Path
from typing import Optional

import pandas as pd
from tqdm import tqdm

from .config import Config
from .engines import ShortestPathSegmenter
from .loader import ModelLoader
from .models import DocumentMetadata, SegmentationResult
from .word_model import WordModel

logger = logging.getLogger(__name__)

TOKENS_FILENAME = "All_Segments.csv"
JOINED_FILENAME = "segmented.txt"

# Regex pattern for illegal control characters (except tab, newline, carriage return)
ILLEGAL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f]')


def sanitize_text(text: str) -> str:
    """Remove control characters that may interfere with CSV/Excel.

    Args:
        text: Input text

    Returns:
        Sanitized text
    """
    if not text:
        return text
    return ILLEGAL_CHARS.sub('', text)


class SegmentationPipeline:
    """Pipeline for segmenting JSONL records of unspaced text."""

    def __init__(self, config: Config, model: Optional[WordModel] = None):
        """Initialize segmentation pipeline.

        Args:
            config: Pipeline configuration
            model: Finished word model. Loaded from ``config.dictionary`` if omitted.
        """
        self.config = config

        if model is None:
            loader = ModelLoader(
                source=config.dictionary.source,
                timeout=config.dictionary.timeout,
                encoding=config.dictionary.encoding,
            )
            model = loader.load()

        self.segmenter = ShortestPathSegmenter(model)

    def segment_text(self, text: str) -> str:
        """Segment text and join the words with the configured separator."""
        return self.config.segmentation.separator.join(self.segmenter.segment(text))

    def process_line(self, text: str, metadata: DocumentMetadata) -> SegmentationResult:
        """Process a single line of text.

        Args:
            text: Input text content
            metadata: Document metadata

        Returns:
            SegmentationResult with word spans and metadata
        """
        spans = self.segmenter.segment_with_indices(text)
        return SegmentationResult(spans=spans, metadata=metadata)

    def _result_rows(self, result: SegmentationResult) -> list[dict]:
        rows = []
        for order, (word, start, end) in enumerate(result.spans, 1):
            rows.append({
                "File_ID": result.metadata.record_id,
                "Source_Line_Number": result.metadata.line_number,
                "Word_Order": order,
                "Word": word,
                "Start_Index": start,
                "End_Index": end,
                "Length": end - start,
            })
        return rows

    def _save_tokens(self, rows: list[dict], output_dir: Path) -> None:
        """Save one row per word as CSV."""
        df = pd.DataFrame(
            rows,
            columns=[
                "File_ID", "Source_Line_Number", "Word_Order", "Word",
                "Start_Index", "End_Index", "Length",
            ],
        )
        for col in df.select_dtypes(include=["object"]).columns:
            df[col] = df[col].apply(
                lambda x: sanitize_text(x) if isinstance(x, str) else x
            )
        save_path = output_dir / TOKENS_FILENAME
        df.to_csv(save_path, index=False)
        print(f"Word table saved to: {save_path}")

    def _save_joined(self, lines: list[str], output_dir: Path) -> None:
        """Save one separator-joined line per record."""
        save_path = output_dir / JOINED_FILENAME
        with open(save_path, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
        print(f"Segmented text saved to: {save_path}")

    def process_file(self, input_path: Path) -> int:
        """Process a JSONL file and generate segmented output.

        Args:
            input_path: Path to input JSONL file

        Returns:
            Number of records processed
        """
        output_dir = self.config.output.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        print(f"Reading from: {input_path}")

        max_length = self.config.segmentation.max_text_length
        separator = self.config.segmentation.separator
        rows = []
        joined = []
        records_processed = 0

        with open(input_path, "r", encoding="utf-8") as infile:
            total_lines = sum(1 for _ in infile)
            infile.seek(0)
            for line_num, line in tqdm(
                enumerate(infile, 1), total=total_lines, desc="Segmenting"
            ):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning(f"Line {line_num}: invalid JSON, skipped")
                    continue
                if not isinstance(record, dict):
                    logger.warning(f"Line {line_num}: not a JSON object, skipped")
                    continue

                text_content = record.get("text") or record.get("content") or ""
                if not text_content or not isinstance(text_content, str):
                    continue
                if max_length is not None and len(text_content) > max_length:
                    logger.warning(
                        f"Line {line_num}: {len(text_content)} characters exceeds "
                        f"max_text_length={max_length}, skipped"
                    )
                    continue

                metadata = DocumentMetadata(
                    record_id=str(record.get("id") or record.get("file_id") or "Unknown_Source"),
                    line_number=line_num,
                )
                result = self.process_line(text_content, metadata)
                rows.extend(self._result_rows(result))
                joined.append(separator.join(result.words))
                records_processed += 1

        if self.config.output.save_tokens_csv:
            self._save_tokens(rows, output_dir)
        if self.config.output.save_joined_text:
            self._save_joined(joined, output_dir)

        print(f"\nCompleted: {records_processed} records, {len(rows)} words.")
        return records_processed

    def run(self) -> int:
        """Run the segmentation pipeline.

        Returns:
            Number of records processed
        """
        if not self.config.input_file:
            raise ValueError("Input file not specified in configuration")

        if not self.config.input_file.exists():
            raise FileNotFoundError(f"Input file not found: {self.config.input_file}")

        return self.process_file(self.config.input_file)
