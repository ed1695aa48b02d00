"""Main pipeline for wavscribe.

``TranscriptionPipeline`` runs the four stages in order:
fetch -> normalize -> transcribe -> write.
"""

import logging
import time
from typing import Any, Dict, Optional, Tuple

from .config import TranscriptionConfig
from .data_models import TARGET_SAMPLE_RATE, RunInfo
from .engine import HFPipelineEngine, TranscriptionEngine
from .normalizer import normalize
from .sources import ByteSource, open_source
from .writer import write_result

logger = logging.getLogger(__name__)


class TranscriptionPipeline:
    """Fetches a WAV file, transcribes it, and writes the transcript as JSON.
    
    Example:
        >>> config = TranscriptionConfig(source="speech.wav")
        >>> result, info = TranscriptionPipeline(config).run()
        >>> print(result["text"])
    
    Attributes:
        config: Settings for this run
        engine: ASR engine used for the transcription
        source: Where the WAV bytes come from
    """
    
    def __init__(
        self,
        config: TranscriptionConfig,
        engine: Optional[TranscriptionEngine] = None,
        source: Optional[ByteSource] = None,
    ):
        """Initialize pipeline.
        
        Args:
            config: Run configuration
            engine: ASR engine (default: ``HFPipelineEngine`` for config.model)
            source: Byte source (default: opened from config.source)
        """
        if not isinstance(config, TranscriptionConfig):
            raise TypeError(
                f"config must be TranscriptionConfig, got {type(config).__name__}"
            )
        if engine is not None and not isinstance(engine, TranscriptionEngine):
            raise TypeError(
                f"engine must be TranscriptionEngine, got {type(engine).__name__}"
            )
        if source is not None and not isinstance(source, ByteSource):
            raise TypeError(
                f"source must be ByteSource, got {type(source).__name__}"
            )
        
        self.config = config
        self.engine = engine if engine is not None else HFPipelineEngine(
            config.model, device=config.device
        )
        self.source = source if source is not None else open_source(config.source)
    
    def run(self) -> Tuple[Dict[str, Any], RunInfo]:
        """Run all stages once.
        
        Returns:
            result: Transcription result as returned by the engine
            info: Run metadata
            
        Raises:
            FetchError, DecodeError, InferenceError, OSError: From the
                failing stage, after the failure has been logged
        """
        start_time = time.perf_counter()
        
        try:
            data = self.source.read()
            samples = normalize(data)
            del data
            
            audio_duration = len(samples) / TARGET_SAMPLE_RATE
            logger.info(
                f"Normalized audio: {audio_duration:.2f}s, {len(samples)} samples"
            )
            
            result = self.engine.transcribe(samples, self.config.options())
            output_path = write_result(result, self.config.output_path)
        except Exception as e:
            elapsed = time.perf_counter() - start_time
            logger.error(f"Error processing audio: {e}")
            logger.info(f"Failed execution duration: {elapsed} seconds")
            raise
        
        processing_time = time.perf_counter() - start_time
        info = RunInfo(
            audio_duration=audio_duration,
            num_samples=len(samples),
            processing_time=processing_time,
            output_path=output_path,
            model=self.config.model,
        )
        
        logger.info(f"Execution duration: {processing_time} seconds")
        text = result.get("text", "")
        logger.info(
            f"Transcript: {len(text)} characters, "
            f"{len(result.get('chunks') or [])} timestamped chunks; {info}"
        )
        
        return result, info
