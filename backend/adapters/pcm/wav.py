"""PCM16WavEncoder — canonical 44-byte-header WAV payloads for chunk upload."""

import struct

import numpy as np

from domain.models import AudioStream, ChunkWindow, EncodedChunk
from ports.audio import AudioEncoderPort

WAV_HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8


def interleave(samples: np.ndarray) -> np.ndarray:
    """(channels, frames) -> flat [f0c0, f0c1, ..., f1c0, f1c1, ...]."""
    return np.ascontiguousarray(samples.T).reshape(-1)


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Clamp to [-1, 1] and scale asymmetrically (0x8000 negative, 0x7FFF positive)."""
    clipped = np.clip(samples.astype(np.float64), -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 0x8000, clipped * 0x7FFF)
    return np.trunc(scaled).astype("<i2")


def wav_header(num_samples: int, sample_rate: int, num_channels: int) -> bytes:
    data_size = num_samples * BYTES_PER_SAMPLE
    return struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,  # fmt chunk size
        1,  # linear PCM
        num_channels,
        sample_rate,
        sample_rate * num_channels * BYTES_PER_SAMPLE,
        num_channels * BYTES_PER_SAMPLE,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def encode_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode (channels, frames) float samples as a complete WAV file."""
    pcm = float_to_pcm16(interleave(samples))
    return wav_header(pcm.size, sample_rate, samples.shape[0]) + pcm.tobytes()


class PCM16WavEncoder(AudioEncoderPort):
    def encode(self, stream: AudioStream, window: ChunkWindow) -> EncodedChunk:
        first, last = stream.frame_range(window.start, window.end)
        data = encode_wav(stream.samples[:, first:last], stream.sample_rate)
        return EncodedChunk(
            data=data,
            mime_type="audio/wav",
            duration=(last - first) / stream.sample_rate,
        )
