"""Command-line entry point.

Settings come from the defaults, then ``WAVSCRIBE_*`` environment
variables (a ``.env`` file in the working directory is loaded first),
then command-line flags.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .config import TIMESTAMP_CHOICES, TranscriptionConfig, parse_timestamps
from .exceptions import ConfigError, WavscribeError
from .pipeline import TranscriptionPipeline

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavscribe",
        description="Fetch a WAV file, transcribe it with word timestamps, "
        "and write the transcript as JSON.",
    )
    parser.add_argument(
        "--source",
        default=None,
        help="URL or path of the WAV file (env: WAVSCRIBE_SOURCE)",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Hugging Face ASR model id (env: WAVSCRIBE_MODEL)",
    )
    parser.add_argument(
        "--chunk-length",
        type=float,
        default=None,
        help="Chunk length in seconds (env: WAVSCRIBE_CHUNK_LENGTH, default: 30)",
    )
    parser.add_argument(
        "--stride-length",
        type=float,
        default=None,
        help="Stride length in seconds (env: WAVSCRIBE_STRIDE_LENGTH, default: 5)",
    )
    parser.add_argument(
        "--timestamps",
        choices=sorted(TIMESTAMP_CHOICES),
        default=None,
        help="Timestamp granularity (env: WAVSCRIBE_TIMESTAMPS, default: word)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory (env: WAVSCRIBE_OUTPUT_DIR, default: ./audios)",
    )
    parser.add_argument(
        "--output-file",
        default=None,
        help="Output file name (env: WAVSCRIBE_OUTPUT_FILE, "
        "default: transcription.json)",
    )
    parser.add_argument(
        "--device",
        default=None,
        help="Inference device, e.g. cpu or cuda (env: WAVSCRIBE_DEVICE)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def resolve_config(
    args: argparse.Namespace,
    config: Optional[TranscriptionConfig] = None,
) -> TranscriptionConfig:
    """Merge parsed flags over the environment-derived config."""
    if config is None:
        config = TranscriptionConfig.from_env()
    return config.with_overrides(
        source=args.source,
        model=args.model,
        chunk_length_s=args.chunk_length,
        stride_length_s=args.stride_length,
        return_timestamps=(
            parse_timestamps(args.timestamps) if args.timestamps else None
        ),
        output_dir=args.output_dir,
        output_file=args.output_file,
        device=args.device,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the pipeline once. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )
    load_dotenv(find_dotenv(usecwd=True))
    
    # environment and .env errors exit 1; flag errors exit 2 through argparse
    try:
        env_config = TranscriptionConfig.from_env()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    
    try:
        config = resolve_config(args, env_config)
    except ConfigError as e:
        parser.error(str(e))
    
    try:
        TranscriptionPipeline(config).run()
    except WavscribeError as e:
        logger.error(f"Transcription failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Transcription failed with unexpected error: {e}")
        return 1
    
    logger.info("done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
