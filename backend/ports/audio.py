"""Audio ports — decoding input files and encoding chunk payloads."""

from abc import ABC, abstractmethod

from domain.models import AudioStream, ChunkWindow, EncodedChunk


class AudioDecoderPort(ABC):
    @abstractmethod
    def decode(self, input_path: str) -> AudioStream:
        """Decode an audio or video file into per-channel float samples.

        Raises DecodeError for unsupported or corrupt input.
        """


class AudioEncoderPort(ABC):
    @abstractmethod
    def encode(self, stream: AudioStream, window: ChunkWindow) -> EncodedChunk:
        """Encode the samples inside ``window`` as a self-contained payload."""
