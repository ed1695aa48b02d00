"""wavscribe: WAV-to-transcript pipeline.

This module fetches a WAV file, normalizes it to mono 16 kHz float32
samples, transcribes it with a Hugging Face speech-recognition pipeline,
and writes the result with word-level timestamps to a JSON file.

Example:
    >>> from wavscribe import TranscriptionConfig, TranscriptionPipeline
    >>> config = TranscriptionConfig(source="speech.wav", output_dir="out")
    >>> result, info = TranscriptionPipeline(config).run()
    >>> for chunk in result["chunks"]:
    ...     start, end = chunk["timestamp"]
    ...     print(f"[{start:.2f}s - {end:.2f}s] {chunk['text']}")
"""

from .config import TranscriptionConfig
from .data_models import RunInfo, TranscriptionOptions, WaveDescriptor
from .engine import HFPipelineEngine, TranscriptionEngine
from .exceptions import (
    ConfigError,
    DecodeError,
    ExpiredURLError,
    FetchError,
    InferenceError,
    WavscribeError,
)
from .normalizer import decode_wav, downmix, normalize, resample, to_float32
from .pipeline import TranscriptionPipeline
from .sources import BytesSource, ByteSource, FileSource, URLSource, open_source
from .writer import ensure_directory, write_result

__version__ = "0.1.0"

__all__ = [
    "ByteSource",
    "BytesSource",
    "ConfigError",
    "DecodeError",
    "ExpiredURLError",
    "FetchError",
    "FileSource",
    "HFPipelineEngine",
    "InferenceError",
    "RunInfo",
    "TranscriptionConfig",
    "TranscriptionEngine",
    "TranscriptionOptions",
    "TranscriptionPipeline",
    "URLSource",
    "WaveDescriptor",
    "WavscribeError",
    "decode_wav",
    "downmix",
    "ensure_directory",
    "normalize",
    "open_source",
    "resample",
    "to_float32",
    "write_result",
]
