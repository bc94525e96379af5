"""TranscribeMeetingUseCase — orchestrates chunked transcription of one recording.

Decode once, plan chunk windows, then for each window strictly in order:
encode -> transmit -> extract -> reconcile -> append -> report progress.
Chunks are never dispatched in parallel: the running offset that places each
chunk on the global timeline depends on every earlier chunk having finished.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from domain.cancellation import CancellationToken
from domain.chunking import DEFAULT_MAX_CHUNK_SECONDS, plan_chunks
from domain.errors import ExtractionError, RunCancelled, TransmissionError
from domain.extraction import extract_json
from domain.models import ChunkProgress, RunState, TranscriptionRun
from domain.reconcile import reconcile_segments
from gateways.transcription import TranscriptionGateway
from ports.audio import AudioDecoderPort, AudioEncoderPort
from ports.progress import ProgressPort

logger = logging.getLogger(__name__)

FAILURE_POLICY_ABORT = "abort"
FAILURE_POLICY_PARTIAL = "partial"
FAILURE_POLICIES = (FAILURE_POLICY_ABORT, FAILURE_POLICY_PARTIAL)


@dataclass
class TranscribeRequest:
    """All parameters for a transcription run."""
    audio_path: str
    language: str = "en"
    chunk_duration: float = DEFAULT_MAX_CHUNK_SECONDS
    failure_policy: str = FAILURE_POLICY_ABORT


class TranscribeMeetingUseCase:
    def __init__(
        self,
        decoder: AudioDecoderPort,
        encoder: AudioEncoderPort,
        gateway: TranscriptionGateway,
        progress: ProgressPort,
    ):
        self._decoder = decoder
        self._encoder = encoder
        self._gateway = gateway
        self._progress = progress

    def execute(
        self,
        req: TranscribeRequest,
        job_id: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
        on_progress: Optional[Callable[[ChunkProgress], None]] = None,
    ) -> TranscriptionRun:
        """Run the pipeline and return the accumulated transcript.

        With the default "abort" policy the first decode, transmission or
        extraction error is re-raised and nothing partial is returned. With
        "partial", a chunk failure ends the run early and the segments from the
        chunks that succeeded come back with state FAILED and ``error`` set.

        Raises:
            DecodeError, TransmissionError, ExtractionError: the run failed.
            RunCancelled: cancel_token was triggered between chunks.
        """
        if req.failure_policy not in FAILURE_POLICIES:
            raise ValueError(f"Unknown failure policy: {req.failure_policy!r}. Valid options: abort, partial")
        job_id = job_id or uuid.uuid4().hex[:12]
        token = cancel_token or CancellationToken()
        run = TranscriptionRun()
        stream = None

        try:
            # 1. Decode (single global step, never retried)
            token.raise_if_cancelled()
            self._set_state(run, job_id, RunState.DECODING)
            stream = self._decoder.decode(req.audio_path)
            token.raise_if_cancelled()

            # 2. Plan chunk windows
            windows = plan_chunks(stream.duration, req.chunk_duration)
            run.total_chunks = len(windows)
            logger.info(f"[{job_id}] {stream.duration:.2f}s of audio -> {len(windows)} chunk(s) of <= {req.chunk_duration}s")
            self._set_state(run, job_id, RunState.CHUNK_PROCESSING)

            # 3. Chunks, strictly sequential
            cumulative = 0.0
            for window in windows:
                token.raise_if_cancelled()
                logger.info(f"[{job_id}] Processing chunk {window.index + 1}/{len(windows)} "
                            f"({window.start:.1f}s - {window.end:.1f}s)")
                try:
                    chunk = self._encoder.encode(stream, window)
                    raw_text = self._gateway.transcribe_chunk(chunk, req.language)
                    items = extract_json(raw_text, root="array")
                except (TransmissionError, ExtractionError) as e:
                    if req.failure_policy == FAILURE_POLICY_PARTIAL:
                        logger.warning(f"[{job_id}] Chunk {window.index + 1} failed, returning "
                                       f"{len(run.segments)} segment(s) from earlier chunks: {e}")
                        run.error = e
                        run.duration = cumulative
                        self._set_state(run, job_id, RunState.FAILED)
                        return run
                    raise

                segments, dropped = reconcile_segments(items, cumulative, req.language)
                run.segments.extend(segments)
                run.dropped_segments += dropped
                run.chunks_processed += 1

                # Advance by the decoded length, not the nominal window
                cumulative += chunk.duration

                event = ChunkProgress(chunk_index=window.index + 1, total_chunks=len(windows))
                self._progress.report(job_id, RunState.CHUNK_PROCESSING.value, event)
                if on_progress:
                    on_progress(event)

            run.duration = cumulative
            self._set_state(run, job_id, RunState.DONE)
            logger.info(f"[{job_id}] Transcribed {len(run.segments)} segment(s), "
                        f"dropped {run.dropped_segments} invalid")
            return run

        except RunCancelled:
            logger.info(f"[{job_id}] Cancelled after {run.chunks_processed}/{run.total_chunks} chunk(s)")
            # The traceback keeps this frame alive; drop the decoded samples now
            stream = None
            self._set_state(run, job_id, RunState.CANCELLED)
            raise
        except Exception as e:
            logger.error(f"[{job_id}] Transcription failed in state {run.state.value}: {e}")
            stream = None
            self._set_state(run, job_id, RunState.FAILED)
            raise

    def _set_state(self, run: TranscriptionRun, job_id: str, state: RunState) -> None:
        run.state = state
        self._progress.report(job_id, state.value)
