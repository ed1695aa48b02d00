"""ASR engine boundary.

The pipeline only knows ``TranscriptionEngine.transcribe``: canonical
samples and options go in, an opaque result dict comes out. Model
loading, chunk/stride reconciliation and timestamp alignment all belong
to the engine.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np

from .data_models import TARGET_SAMPLE_RATE, TranscriptionOptions
from .exceptions import InferenceError

logger = logging.getLogger(__name__)


def validate_samples(samples: np.ndarray) -> None:
    """Check that ``samples`` is a non-empty 1-D array."""
    if not isinstance(samples, np.ndarray):
        raise TypeError(
            f"samples must be np.ndarray, got {type(samples).__name__}"
        )
    if samples.ndim != 1:
        raise ValueError(
            f"samples must be 1-dimensional, got shape {samples.shape}"
        )
    if len(samples) == 0:
        raise ValueError("samples cannot be empty")


class TranscriptionEngine(ABC):
    """Anything that turns canonical samples into a transcript."""
    
    @abstractmethod
    def transcribe(
        self,
        samples: np.ndarray,
        options: TranscriptionOptions,
    ) -> Dict[str, Any]:
        """Transcribe mono 16 kHz float32 samples.
        
        Returns:
            Result dict with at least "text" and "chunks"
            
        Raises:
            InferenceError: If the engine fails
        """


class HFPipelineEngine(TranscriptionEngine):
    """Engine backed by a ``transformers`` speech-recognition pipeline.
    
    The pipeline is built on the first call and reused afterwards.
    
    Example:
        >>> engine = HFPipelineEngine("openai/whisper-tiny.en")
        >>> result = engine.transcribe(samples, TranscriptionOptions())
        >>> result["text"]
    
    Attributes:
        model_name: Hugging Face model identifier
        device: Device string passed to ``transformers.pipeline``
    """
    
    def __init__(
        self,
        model_name: str = "openai/whisper-tiny.en",
        device: str = "cpu",
    ):
        if not isinstance(model_name, str):
            raise TypeError(
                f"model_name must be str, got {type(model_name).__name__}"
            )
        if not model_name:
            raise ValueError("model_name cannot be empty string")
        if not isinstance(device, str):
            raise TypeError(
                f"device must be str, got {type(device).__name__}"
            )
        
        self.model_name = model_name
        self.device = device
        self._pipeline = None
    
    @property
    def pipeline(self):
        """The loaded ``transformers`` pipeline (loads on first access)."""
        if self._pipeline is None:
            self._pipeline = self._load_pipeline()
        return self._pipeline
    
    def _load_pipeline(self):
        # transformers is heavy; import on first use only
        from transformers import pipeline
        
        logger.info(f"Loading model '{self.model_name}' on device '{self.device}'")
        try:
            return pipeline(
                "automatic-speech-recognition",
                model=self.model_name,
                device=self.device,
            )
        except Exception as e:
            raise InferenceError(
                f"Failed to load model '{self.model_name}'. {e}"
            ) from e
    
    def transcribe(
        self,
        samples: np.ndarray,
        options: Optional[TranscriptionOptions] = None,
    ) -> Dict[str, Any]:
        validate_samples(samples)
        if options is None:
            options = TranscriptionOptions()
        
        asr = self.pipeline
        inputs = {"raw": samples, "sampling_rate": TARGET_SAMPLE_RATE}
        
        logger.info(
            f"Transcribing {len(samples) / TARGET_SAMPLE_RATE:.2f}s of audio "
            f"(timestamps={options.return_timestamps}, "
            f"chunk={options.chunk_length_s}s, stride={options.stride_length_s}s)"
        )
        try:
            result = asr(
                inputs,
                return_timestamps=options.return_timestamps,
                chunk_length_s=options.chunk_length_s,
                stride_length_s=options.stride_length_s,
            )
        except Exception as e:
            raise InferenceError(f"Transcription failed: {e}") from e
        
        if not isinstance(result, dict):
            raise InferenceError(
                f"Engine returned {type(result).__name__}, expected dict"
            )
        result.setdefault("chunks", [])
        return result
