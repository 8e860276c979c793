"""Conversions between float samples, 16-bit PCM bytes and base64 text."""

import base64
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import (
    INPUT_MIME_TYPE,
    OUTPUT_SAMPLE_RATE,
    PCM16_MAX,
    PCM16_MIN,
    PCM16_SCALE,
)


@dataclass(frozen=True)
class AudioBlob:
    """An outbound audio frame as sent over the wire."""

    data: str  # base64-encoded little-endian int16 PCM
    mime_type: str = INPUT_MIME_TYPE

    def to_dict(self) -> dict[str, str]:
        return {"data": self.data, "mimeType": self.mime_type}


@dataclass(frozen=True)
class AudioBuffer:
    """Decoded mono float samples ready for playback."""

    samples: NDArray[np.float32]
    sample_rate: int = OUTPUT_SAMPLE_RATE

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.frame_count / self.sample_rate


def float_to_pcm16(samples: ArrayLike) -> bytes:
    """Scale float samples in [-1, 1] to little-endian int16 bytes.

    Values outside the range are clipped.
    """
    scaled = np.rint(np.asarray(samples, dtype=np.float64) * PCM16_SCALE)
    clipped = np.clip(scaled, PCM16_MIN, PCM16_MAX)
    return clipped.astype("<i2").tobytes()


def pcm16_to_float(pcm: bytes) -> NDArray[np.float32]:
    """Convert little-endian int16 bytes back to float samples in [-1, 1).

    A trailing odd byte is ignored.
    """
    usable = len(pcm) - (len(pcm) % 2)
    ints = np.frombuffer(pcm[:usable], dtype="<i2")
    return (ints.astype(np.float32) / np.float32(PCM16_SCALE)).astype(np.float32)


def encode_pcm16_base64(samples: ArrayLike) -> str:
    """Encode float samples as base64 PCM16 text."""
    return base64.b64encode(float_to_pcm16(samples)).decode("ascii")


def decode_pcm16_base64(data: str) -> NDArray[np.float32]:
    """Decode base64 PCM16 text to float samples."""
    return pcm16_to_float(base64.b64decode(data))


def make_audio_blob(samples: ArrayLike) -> AudioBlob:
    """Build the outbound frame for a captured block."""
    return AudioBlob(data=encode_pcm16_base64(samples))


def decode_audio_buffer(data: str, sample_rate: int = OUTPUT_SAMPLE_RATE) -> AudioBuffer:
    """Decode an inbound base64 payload into a playable buffer."""
    return AudioBuffer(samples=decode_pcm16_base64(data), sample_rate=sample_rate)
