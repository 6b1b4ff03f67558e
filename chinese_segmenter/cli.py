"""Command-line interface for the segmenter."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx

from .config import Config
from .pipeline import SegmentationPipeline


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chinese-segmenter",
        description="Split unspaced (e.g. Chinese) text into words",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Segment text with a local frequency table
  chinese-segmenter segment --dict dictionary.txt "我儿子四岁。"

  # Segment stdin line by line
  cat input.txt | chinese-segmenter segment --dict dictionary.txt.gz

  # Segment a JSONL file
  chinese-segmenter run --input data/input.jsonl --output data/output
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    segment_parser = subparsers.add_parser("segment", help="Segment text arguments or stdin")
    setup_segment_parser(segment_parser)

    run_parser = subparsers.add_parser("run", help="Segment a JSONL file")
    setup_run_parser(run_parser)

    return parser


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by all commands."""
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--dict",
        dest="dictionary",
        type=str,
        help="Frequency table path or URL (default: gse dictionary from the web)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def setup_segment_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for segment command."""
    parser.add_argument(
        "text",
        nargs="*",
        help="Text to segment (reads stdin when omitted)",
    )
    parser.add_argument(
        "--separator",
        type=str,
        help="String placed between words (default: space)",
    )
    add_common_arguments(parser)


def setup_run_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for run command."""
    parser.add_argument(
        "--input",
        type=Path,
        help="Path to input JSONL file",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output directory for segmented files",
    )
    parser.add_argument(
        "--max-length",
        type=int,
        help="Skip records longer than this many characters",
    )
    parser.add_argument(
        "--no-csv",
        action="store_true",
        help="Skip saving the per-word CSV table",
    )
    parser.add_argument(
        "--no-text",
        action="store_true",
        help="Skip saving the joined text file",
    )
    add_common_arguments(parser)


def build_config(args: argparse.Namespace) -> Config:
    """Build configuration from arguments."""
    # Start with config file if provided
    if getattr(args, "config", None):
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    if getattr(args, "dictionary", None):
        config.dictionary.source = args.dictionary
    if getattr(args, "separator", None) is not None:
        config.segmentation.separator = args.separator

    if getattr(args, "input", None):
        config.input_file = args.input
    if getattr(args, "output", None):
        config.output.output_dir = args.output
    if getattr(args, "max_length", None) is not None:
        config.segmentation.max_text_length = args.max_length
    if getattr(args, "no_csv", False):
        config.output.save_tokens_csv = False
    if getattr(args, "no_text", False):
        config.output.save_joined_text = False

    return config


def handle_segment(args: argparse.Namespace) -> int:
    """Handle segment command."""
    try:
        config = build_config(args)
        pipeline = SegmentationPipeline(config)
    except (OSError, ValueError, httpx.HTTPError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    lines = args.text if args.text else (line.rstrip("\n") for line in sys.stdin)
    for line in lines:
        print(pipeline.segment_text(line))
    return 0


def handle_run(args: argparse.Namespace) -> int:
    """Handle run command."""
    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.input_file:
        print("Error: Input file is required (use --input or --config)", file=sys.stderr)
        return 1
    if not config.input_file.exists():
        print(f"Error: File not found - {config.input_file}", file=sys.stderr)
        return 1

    try:
        pipeline = SegmentationPipeline(config)
        count = pipeline.run()
        print(f"\nProcessed {count} records")
        return 0
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Segmentation failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    if args.command == "run":
        return handle_run(args)
    return handle_segment(args)


if __name__ == "__main__":
    sys.exit(main())
