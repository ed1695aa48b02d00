"""Core data models for wavscribe.

This module defines the data structures passed between the pipeline
stages: the decoded WAV file, the options handed to the ASR engine, and
the run metadata reported once a transcription completes.
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np

TARGET_SAMPLE_RATE = 16000

TIMESTAMP_MODES = ("word", True, False)


@dataclass
class WaveDescriptor:
    """Decoded WAV file.
    
    The format conversion steps in ``wavscribe.normalizer`` replace
    ``samples`` in place, so a descriptor always reflects the current
    state of the audio rather than the file it was read from.
    
    Attributes:
        sample_rate: Sample rate in Hz
        num_channels: Number of channels in the source file
        subtype: soundfile subtype of the source ("PCM_16", "FLOAT", ...)
        samples: Per-channel samples with shape [channels, frames]
    """
    sample_rate: int
    num_channels: int
    subtype: str
    samples: np.ndarray
    
    @property
    def num_frames(self) -> int:
        return self.samples.shape[-1]
    
    @property
    def duration(self) -> float:
        """Duration in seconds."""
        if self.sample_rate <= 0:
            return 0.0
        return self.num_frames / self.sample_rate


@dataclass(frozen=True)
class TranscriptionOptions:
    """Options forwarded to the ASR engine on every call.
    
    Attributes:
        return_timestamps: "word" for word-level timestamps, True for
            segment-level, False for text only
        chunk_length_s: Window length in seconds for long audio
        stride_length_s: Overlap in seconds on each side of a window
    """
    return_timestamps: Union[str, bool] = "word"
    chunk_length_s: float = 30
    stride_length_s: float = 5
    
    def __post_init__(self):
        if self.return_timestamps not in TIMESTAMP_MODES:
            raise ValueError(
                f"return_timestamps must be 'word', True or False, "
                f"got {self.return_timestamps!r}"
            )
        for name in ("chunk_length_s", "stride_length_s"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(
                    f"{name} must be numeric, got {type(value).__name__}"
                )
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if self.chunk_length_s <= 0:
            raise ValueError(
                f"chunk_length_s must be positive, got {self.chunk_length_s}"
            )
        if self.stride_length_s < 0:
            raise ValueError(
                f"stride_length_s must be non-negative, got {self.stride_length_s}"
            )
        if self.stride_length_s >= self.chunk_length_s:
            raise ValueError(
                f"stride_length_s ({self.stride_length_s}s) must be less than "
                f"chunk_length_s ({self.chunk_length_s}s)"
            )


@dataclass
class RunInfo:
    """Metadata about a completed pipeline run.
    
    Attributes:
        audio_duration: Duration of the normalized audio in seconds
        num_samples: Number of samples passed to the engine
        processing_time: Wall-clock time for the whole run in seconds
        output_path: Where the transcript was written
        model: Model identifier used by the engine
    """
    audio_duration: float
    num_samples: int
    processing_time: float
    output_path: Path
    model: str
    
    @property
    def rtf(self) -> float:
        """Real-time factor (processing_time / audio_duration)."""
        if self.audio_duration <= 0:
            return 0.0
        return self.processing_time / self.audio_duration
    
    def __str__(self) -> str:
        return (
            f"{self.audio_duration:.1f}s audio in {self.processing_time:.2f}s "
            f"(RTF: {self.rtf:.3f}, samples: {self.num_samples}, "
            f"model: {self.model}) -> {self.output_path}"
        )
