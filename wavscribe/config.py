"""Run configuration.

A ``TranscriptionConfig`` is built once at startup, from hard-coded
defaults overridden by ``WAVSCRIBE_*`` environment variables, and then
passed explicitly to every stage.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional, Union

from .data_models import TranscriptionOptions
from .exceptions import ConfigError

DEFAULT_MODEL = "openai/whisper-tiny.en"
DEFAULT_SOURCE = (
    "https://huggingface.co/datasets/Xenova/transformers.js-docs"
    "/resolve/main/jfk.wav"
)
DEFAULT_OUTPUT_DIR = "./audios"
DEFAULT_OUTPUT_FILE = "transcription.json"

ENV_PREFIX = "WAVSCRIBE_"

# CLI/env spelling -> engine value
TIMESTAMP_CHOICES = {
    "word": "word",
    "segment": True,
    "none": False,
}


def parse_timestamps(value: str) -> Union[str, bool]:
    """Map a timestamp mode name ("word", "segment", "none") to its engine value."""
    key = value.strip().lower()
    if key not in TIMESTAMP_CHOICES:
        raise ConfigError(
            f"timestamps must be one of {sorted(TIMESTAMP_CHOICES)}, got '{value}'"
        )
    return TIMESTAMP_CHOICES[key]


def _parse_seconds(name: str, value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number of seconds, got '{value}'") from e
    if seconds.is_integer():
        return int(seconds)
    return seconds


@dataclass(frozen=True)
class TranscriptionConfig:
    """Immutable settings for one pipeline run.
    
    Attributes:
        model: Hugging Face model identifier for the ASR engine
        source: URL or local path of the WAV file to transcribe
        chunk_length_s: Engine window length in seconds
        stride_length_s: Engine window overlap in seconds
        return_timestamps: "word", True (segment) or False (none)
        output_dir: Directory the transcript is written to
        output_file: Transcript file name inside output_dir
        device: Device for the engine ("cpu", "cuda", "cuda:0", ...)
    """
    model: str = DEFAULT_MODEL
    source: str = DEFAULT_SOURCE
    chunk_length_s: float = 30
    stride_length_s: float = 5
    return_timestamps: Union[str, bool] = "word"
    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    output_file: str = DEFAULT_OUTPUT_FILE
    device: str = "cpu"
    
    def __post_init__(self):
        if not self.model:
            raise ConfigError("model cannot be empty")
        if not self.source:
            raise ConfigError("source cannot be empty")
        if not self.output_file:
            raise ConfigError("output_file cannot be empty")
        # frozen dataclass, so normalize through object.__setattr__
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        try:
            self.options()
        except (TypeError, ValueError) as e:
            raise ConfigError(str(e)) from e
    
    @property
    def output_path(self) -> Path:
        return self.output_dir / self.output_file
    
    def options(self) -> TranscriptionOptions:
        """Engine options derived from this config."""
        return TranscriptionOptions(
            return_timestamps=self.return_timestamps,
            chunk_length_s=self.chunk_length_s,
            stride_length_s=self.stride_length_s,
        )
    
    def with_overrides(self, **overrides) -> "TranscriptionConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
    
    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "TranscriptionConfig":
        """Build a config from ``WAVSCRIBE_*`` variables over the defaults.
        
        Args:
            environ: Mapping to read from (default: ``os.environ``)
            
        Raises:
            ConfigError: If a variable holds an invalid value
        """
        if environ is None:
            environ = os.environ
        
        def get(name: str) -> Optional[str]:
            value = environ.get(ENV_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()
        
        values = {}
        if get("MODEL"):
            values["model"] = get("MODEL")
        if get("SOURCE"):
            values["source"] = get("SOURCE")
        if get("CHUNK_LENGTH"):
            values["chunk_length_s"] = _parse_seconds(
                ENV_PREFIX + "CHUNK_LENGTH", get("CHUNK_LENGTH")
            )
        if get("STRIDE_LENGTH"):
            values["stride_length_s"] = _parse_seconds(
                ENV_PREFIX + "STRIDE_LENGTH", get("STRIDE_LENGTH")
            )
        if get("TIMESTAMPS"):
            values["return_timestamps"] = parse_timestamps(get("TIMESTAMPS"))
        if get("OUTPUT_DIR"):
            values["output_dir"] = Path(get("OUTPUT_DIR"))
        if get("OUTPUT_FILE"):
            values["output_file"] = get("OUTPUT_FILE")
        if get("DEVICE"):
            values["device"] = get("DEVICE")
        
        return cls(**values)
