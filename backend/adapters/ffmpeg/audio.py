"""FFmpegAudioDecoder — decodes any audio/video container via ffmpeg + soundfile."""

import os
import logging
import tempfile
import subprocess
from typing import Optional

import numpy as np
import soundfile

from domain.errors import DecodeError
from domain.models import AudioStream
from ports.audio import AudioDecoderPort

logger = logging.getLogger(__name__)


class FFmpegAudioDecoder(AudioDecoderPort):
    """Decode input into float32 samples, one row per channel.

    Formats libsndfile reads natively (wav, flac, ogg) skip ffmpeg when no
    resampling is requested. Everything else, including video containers, is
    converted to a temporary 16-bit WAV first.
    """

    def __init__(self, sample_rate: Optional[int] = None, ffmpeg_binary: str = "ffmpeg",
                 temp_dir: Optional[str] = None):
        self._sample_rate = sample_rate
        self._ffmpeg = ffmpeg_binary
        self._temp_dir = temp_dir

    def decode(self, input_path: str) -> AudioStream:
        if not os.path.exists(input_path):
            raise DecodeError(f"Input file not found: {input_path}")

        stream = self._read_native(input_path)
        if stream is None:
            wav_path = self._convert_to_wav(input_path)
            try:
                stream = self._read(wav_path)
            finally:
                if os.path.exists(wav_path):
                    os.unlink(wav_path)

        if stream.num_frames == 0:
            raise DecodeError(f"No audio samples decoded from {input_path}")
        logger.info(
            f"Decoded {input_path}: {stream.duration:.2f}s, "
            f"{stream.sample_rate}Hz, {stream.num_channels} channel(s)"
        )
        return stream

    def _read_native(self, input_path: str) -> Optional[AudioStream]:
        try:
            info = soundfile.info(input_path)
        except (RuntimeError, soundfile.LibsndfileError):
            return None
        if self._sample_rate and info.samplerate != self._sample_rate:
            return None
        logger.debug(f"Reading {input_path} natively ({info.format})")
        return self._read(input_path)

    def _read(self, path: str) -> AudioStream:
        try:
            data, rate = soundfile.read(path, dtype="float32", always_2d=True)
        except (RuntimeError, soundfile.LibsndfileError) as e:
            raise DecodeError(f"Failed to read decoded audio: {e}") from e
        return AudioStream(sample_rate=int(rate), samples=np.ascontiguousarray(data.T))

    def _convert_to_wav(self, input_path: str) -> str:
        temp_file = tempfile.NamedTemporaryFile(suffix=".wav", delete=False, dir=self._temp_dir)
        temp_file.close()
        output_path = temp_file.name

        cmd = [
            self._ffmpeg, "-y",
            "-i", input_path,
            "-vn",
            "-c:a", "pcm_s16le",
        ]
        if self._sample_rate:
            cmd += ["-ar", str(self._sample_rate)]
        cmd.append(output_path)

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            os.unlink(output_path)
            raise DecodeError(f"ffmpeg not available: {e}") from e

        if result.returncode != 0:
            os.unlink(output_path)
            logger.error(f"Error converting audio: {result.stderr}")
            raise DecodeError(f"Unsupported or corrupt input: {result.stderr.strip()[-500:]}")
        return output_path
