"""WAV normalization to the engine's canonical input format.

The ASR engine expects a single channel of float32 samples at 16 kHz.
``normalize`` turns any readable WAV file into exactly that:

1. bit-depth conversion to float32 in [-1.0, 1.0]
2. band-limited resampling to 16000 Hz
3. downmix to mono

The steps run in that order and never touch the filesystem.
"""

import io
import logging
import math
from typing import Sequence, Union

import numpy as np
import soundfile as sf
import torch
import torchaudio.functional as AF

from .data_models import TARGET_SAMPLE_RATE, WaveDescriptor
from .exceptions import DecodeError

logger = logging.getLogger(__name__)

# Averaging two uncorrelated channels drops the level by 3 dB; sqrt(2) restores it.
SCALING_FACTOR = math.sqrt(2)

WAV_FORMATS = ("WAV", "WAVEX", "RF64")


def decode_wav(data: bytes) -> WaveDescriptor:
    """Parse a WAV buffer.
    
    Integer PCM is read as full-scale int32 regardless of the stored bit
    depth, so ``to_float32`` needs a single scale factor. Float and
    compressed subtypes are decoded by libsndfile to float64.
    
    Args:
        data: Raw bytes of a WAV file
        
    Returns:
        WaveDescriptor with samples shaped [channels, frames]
        
    Raises:
        TypeError: If data is not bytes
        DecodeError: If data is not a readable WAV container
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"data must be bytes, got {type(data).__name__}")
    if len(data) == 0:
        raise DecodeError("Failed to decode WAV: buffer is empty")
    
    try:
        with sf.SoundFile(io.BytesIO(bytes(data))) as f:
            if f.format not in WAV_FORMATS:
                raise DecodeError(
                    f"Failed to decode WAV: container is {f.format}, not WAV"
                )
            subtype = f.subtype
            dtype = "int32" if subtype.startswith("PCM") else "float64"
            frames = f.read(dtype=dtype, always_2d=True)
            sample_rate = f.samplerate
            num_channels = f.channels
    except sf.SoundFileError as e:
        raise DecodeError(f"Failed to decode WAV: {e}") from e
    
    return WaveDescriptor(
        sample_rate=sample_rate,
        num_channels=num_channels,
        subtype=subtype,
        samples=np.ascontiguousarray(frames.T),
    )


def to_float32(samples: np.ndarray) -> np.ndarray:
    """Linear PCM-to-float conversion.
    
    Signed integers are divided by 2**(bits - 1) so the full-scale range
    maps onto [-1.0, 1.0] and the result is clipped to that range;
    unsigned integers are re-centred first. Float input is only cast, so
    float32 audio passes through untouched, out-of-range samples included.
    """
    samples = np.asarray(samples)
    
    if np.issubdtype(samples.dtype, np.integer):
        bits = samples.dtype.itemsize * 8
        scale = float(2 ** (bits - 1))
        converted = samples.astype(np.float64)
        if np.issubdtype(samples.dtype, np.unsignedinteger):
            converted -= scale
        converted /= scale
        return np.clip(converted, -1.0, 1.0).astype(np.float32)
    if np.issubdtype(samples.dtype, np.floating):
        return samples.astype(np.float32, copy=False)
    
    raise TypeError(
        f"samples must be integer or float PCM, got dtype {samples.dtype}"
    )


def resample(
    samples: np.ndarray,
    orig_sr: int,
    target_sr: int = TARGET_SAMPLE_RATE,
) -> np.ndarray:
    """Resample along the last axis with windowed-sinc interpolation.
    
    Returns the input unchanged when the rates already match. Otherwise
    the output has ``ceil(frames * target_sr / orig_sr)`` frames.
    """
    if orig_sr <= 0 or target_sr <= 0:
        raise ValueError(
            f"sample rates must be positive, got {orig_sr} -> {target_sr}"
        )
    if orig_sr == target_sr:
        return samples
    if samples.shape[-1] == 0:
        return samples
    
    waveform = torch.from_numpy(np.ascontiguousarray(samples, dtype=np.float32))
    resampled = AF.resample(waveform, int(orig_sr), int(target_sr))
    return resampled.numpy()


def downmix(channels: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
    """Reduce per-channel samples to one channel.
    
    With two or more channels the first two are averaged and scaled by
    sqrt(2): ``m[i] = sqrt(2) * (a[i] + b[i]) / 2``. Extra channels are
    ignored. A single channel is returned as is, and so is a flat 1-D
    sequence.
    """
    channels = np.asarray(channels)
    
    if channels.ndim <= 1:
        return channels
    if channels.ndim != 2:
        raise ValueError(
            f"channels must be 1- or 2-dimensional, got shape {channels.shape}"
        )
    if channels.shape[0] == 1:
        return channels[0]
    
    left = channels[0].astype(np.float64)
    right = channels[1].astype(np.float64)
    return (SCALING_FACTOR * (left + right) / 2).astype(np.float32)


def convert_bit_depth(wave: WaveDescriptor) -> WaveDescriptor:
    """Step 1: replace ``wave.samples`` with float32 data."""
    wave.samples = to_float32(wave.samples)
    return wave


def convert_sample_rate(
    wave: WaveDescriptor,
    target_sr: int = TARGET_SAMPLE_RATE,
) -> WaveDescriptor:
    """Step 2: resample ``wave`` in place to ``target_sr``."""
    wave.samples = resample(wave.samples, wave.sample_rate, target_sr)
    wave.sample_rate = target_sr
    return wave


def normalize(data: bytes) -> np.ndarray:
    """Turn a WAV buffer into mono 16 kHz float32 samples.
    
    Args:
        data: Raw bytes of a WAV file (any bit depth, rate, channel count)
        
    Returns:
        1-D contiguous float32 array sampled at 16000 Hz
        
    Raises:
        DecodeError: If data is not a readable WAV container
    """
    wave = decode_wav(data)
    logger.debug(
        f"Decoded WAV: {wave.num_channels} channel(s), {wave.sample_rate} Hz, "
        f"{wave.subtype}, {wave.duration:.2f}s"
    )
    
    convert_bit_depth(wave)
    convert_sample_rate(wave, TARGET_SAMPLE_RATE)
    mono = downmix(wave.samples)
    
    return np.ascontiguousarray(mono, dtype=np.float32)
