import numpy as np
import pytest
import soundfile

from adapters.ffmpeg.audio import FFmpegAudioDecoder
from domain.errors import DecodeError


def test_decodes_wav_natively_per_channel(tmp_path):
    path = tmp_path / "meeting.wav"
    left = np.full(1600, 0.25, dtype=np.float32)
    right = np.full(1600, -0.5, dtype=np.float32)
    soundfile.write(str(path), np.stack([left, right], axis=1), 16000, subtype="PCM_16")

    stream = FFmpegAudioDecoder().decode(str(path))

    assert stream.sample_rate == 16000
    assert stream.num_channels == 2
    assert stream.duration == pytest.approx(0.1)
    assert np.allclose(stream.samples[0], 0.25, atol=1e-4)
    assert np.allclose(stream.samples[1], -0.5, atol=1e-4)


def test_missing_file_is_decode_error(tmp_path):
    with pytest.raises(DecodeError):
        FFmpegAudioDecoder().decode(str(tmp_path / "nope.mp3"))


def test_unreadable_input_without_ffmpeg_is_decode_error(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("definitely not audio")
    decoder = FFmpegAudioDecoder(ffmpeg_binary=str(tmp_path / "no-such-ffmpeg"))
    with pytest.raises(DecodeError):
        decoder.decode(str(path))


def test_empty_audio_is_decode_error(tmp_path):
    path = tmp_path / "silence.wav"
    soundfile.write(str(path), np.zeros((0, 1), dtype=np.float32), 16000)
    with pytest.raises(DecodeError):
        FFmpegAudioDecoder().decode(str(path))
