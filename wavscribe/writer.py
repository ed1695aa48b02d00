"""Transcript output."""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

import numpy as np

logger = logging.getLogger(__name__)


def ensure_directory(path: Union[str, Path]) -> Path:
    """Create ``path`` and any missing parents. Safe to call repeatedly."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _to_jsonable(value: Any) -> Any:
    # Engines hand back tuples for (start, end) and sometimes numpy scalars
    if isinstance(value, Mapping):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    return value


def write_result(result: Mapping[str, Any], path: Union[str, Path]) -> Path:
    """Serialize ``result`` as JSON to ``path``, overwriting any existing file.
    
    Args:
        result: Transcription result from the engine
        path: Target file path; missing parent directories are created
        
    Returns:
        The path written to
        
    Raises:
        TypeError: If result is not a mapping
        OSError: If the directory or file cannot be written
    """
    if not isinstance(result, Mapping):
        raise TypeError(f"result must be a mapping, got {type(result).__name__}")
    
    path = Path(path)
    ensure_directory(path.parent)
    
    payload = json.dumps(
        _to_jsonable(result), ensure_ascii=False, separators=(",", ":")
    )
    path.write_text(payload, encoding="utf-8")
    
    logger.info(f"Transcript written to {path}")
    return path
