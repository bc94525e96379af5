"""HTTP surface for Meeting Scribe.

Transcription runs as a background job (submit, poll, cancel); analysis is a
single blocking call executed off the event loop.
"""

import os
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from adapters.local.memory_progress import InMemoryProgressAdapter
from config import (
    Config, get_config, create_audio_adapters, create_generation_adapter, create_infra_adapters,
)
from domain.cancellation import CancellationToken
from domain.errors import (
    DecodeError, EmptyTranscriptError, ExtractionError, PipelineError, RunCancelled,
    TransmissionError, TransmissionTimeout,
)
from domain.models import TranscriptionRun
from gateways.analysis import AnalysisGateway
from gateways.transcription import TranscriptionGateway
from mappers import dtos_to_segments, progress_to_dto, segments_to_dtos
from models import (
    AnalysisResult, AnalyzeRequest, ErrorDetail, JobCreatedResponse, SpeakerLabelsRequest,
    TranscriptionResponse,
)
from post_processing import apply_speaker_labels, format_transcript, transcript_to_text
from ports.job_queue import JobQueuePort, JOB_COMPLETED, JOB_UNKNOWN
from prompts import normalize_language
from use_cases.analyze import AnalyzeRequest as AnalyzeUseCaseRequest, AnalyzeTranscriptUseCase
from use_cases.transcribe import FAILURE_POLICIES, TranscribeMeetingUseCase, TranscribeRequest

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    DecodeError: 422,
    EmptyTranscriptError: 422,
    ExtractionError: 502,
    TransmissionTimeout: 504,
    TransmissionError: 502,
    RunCancelled: 409,
}


@dataclass
class Services:
    """Everything the routes need, wired once per app."""
    config: Config
    transcribe: TranscribeMeetingUseCase
    analyze: AnalyzeTranscriptUseCase
    job_queue: JobQueuePort
    progress: InMemoryProgressAdapter


def build_services(cfg: Config) -> Services:
    generation = create_generation_adapter(cfg)
    decoder, encoder = create_audio_adapters(cfg)
    infra = create_infra_adapters(cfg)
    return Services(
        config=cfg,
        transcribe=TranscribeMeetingUseCase(
            decoder=decoder,
            encoder=encoder,
            gateway=TranscriptionGateway(generation),
            progress=infra["progress"],
        ),
        analyze=AnalyzeTranscriptUseCase(AnalysisGateway(generation)),
        job_queue=infra["job_queue"],
        progress=infra["progress"],
    )


def error_detail(error: BaseException) -> ErrorDetail:
    kind = error.kind.value if isinstance(error, ExtractionError) else None
    return ErrorDetail(type=type(error).__name__, message=str(error), kind=kind)


def status_for(error: BaseException) -> int:
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


def _language(value: Optional[str], cfg: Config) -> str:
    try:
        return normalize_language(value, default=cfg.default_language)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def create_app(services: Optional[Services] = None) -> FastAPI:
    app = FastAPI(title="Meeting Scribe", version="0.1.0")
    app.state.services = services or build_services(get_config())

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(request: Request, exc: PipelineError):
        return JSONResponse(
            status_code=status_for(exc),
            content={"error": error_detail(exc).model_dump()},
        )

    @app.get("/health")
    async def health(request: Request):
        svc: Services = request.app.state.services
        return {"status": "ok", "config": svc.config.as_dict()}

    @app.post("/v1/transcriptions", status_code=202, response_model=JobCreatedResponse)
    async def submit_transcription(
        request: Request,
        file: UploadFile = File(...),
        language: Optional[str] = Form(None),
        failure_policy: Optional[str] = Form(None),
    ):
        svc: Services = request.app.state.services
        cfg = svc.config
        lang = _language(language, cfg)
        policy = (failure_policy or cfg.failure_policy).lower()
        if policy not in FAILURE_POLICIES:
            raise HTTPException(status_code=422, detail=f"Unknown failure policy: {policy!r}")

        suffix = Path(file.filename or "").suffix
        temp_file = tempfile.NamedTemporaryFile(suffix=suffix, delete=False, dir=cfg.temp_dir)
        with temp_file:
            temp_file.write(await file.read())
        logger.info(f"Received {file.filename} ({os.path.getsize(temp_file.name)} bytes, language={lang})")

        req = TranscribeRequest(
            audio_path=temp_file.name,
            language=lang,
            chunk_duration=cfg.chunk_duration,
            failure_policy=policy,
        )
        job_id = svc.job_queue.submit(_run_transcription, svc.transcribe, req)
        return JobCreatedResponse(job_id=job_id, status=svc.job_queue.status(job_id))

    @app.get("/v1/transcriptions/{job_id}", response_model=TranscriptionResponse)
    async def get_transcription(request: Request, job_id: str, fmt: str = Query("json", alias="format")):
        svc: Services = request.app.state.services
        if fmt not in ("json", "text"):
            raise HTTPException(status_code=422, detail=f"Unknown format: {fmt!r}. Valid options: json, text")
        status = svc.job_queue.status(job_id)
        if status == JOB_UNKNOWN:
            raise HTTPException(status_code=404, detail=f"Unknown job: {job_id}")

        if fmt == "text":
            if status != JOB_COMPLETED:
                raise HTTPException(status_code=409, detail=f"Job {job_id} is {status}")
            return PlainTextResponse(format_transcript(svc.job_queue.result(job_id).segments))

        return _job_response(svc, job_id, status)

    @app.put("/v1/transcriptions/{job_id}/speakers", response_model=TranscriptionResponse)
    async def rename_speakers(request: Request, job_id: str, body: SpeakerLabelsRequest):
        svc: Services = request.app.state.services
        status = svc.job_queue.status(job_id)
        if status == JOB_UNKNOWN:
            raise HTTPException(status_code=404, detail=f"Unknown job: {job_id}")
        if status != JOB_COMPLETED:
            raise HTTPException(status_code=409, detail=f"Job {job_id} is {status}")
        run: TranscriptionRun = svc.job_queue.result(job_id)
        apply_speaker_labels(run.segments, body.labels)
        return _job_response(svc, job_id, status)

    @app.delete("/v1/transcriptions/{job_id}", status_code=202)
    async def cancel_transcription(request: Request, job_id: str):
        svc: Services = request.app.state.services
        if svc.job_queue.status(job_id) == JOB_UNKNOWN:
            raise HTTPException(status_code=404, detail=f"Unknown job: {job_id}")
        if not svc.job_queue.cancel(job_id):
            raise HTTPException(status_code=409, detail=f"Job {job_id} already finished")
        return {"jobId": job_id, "status": "cancelling"}

    @app.post("/v1/analysis", response_model=AnalysisResult)
    async def analyze_transcript(request: Request, body: AnalyzeRequest):
        svc: Services = request.app.state.services
        lang = _language(body.language, svc.config)
        transcript = body.transcript if isinstance(body.transcript, str) else dtos_to_segments(body.transcript)
        req = AnalyzeUseCaseRequest(transcript=transcript, language=lang, hint=body.hint)
        return await run_in_threadpool(svc.analyze.execute, req)

    return app


def _job_response(svc: Services, job_id: str, status: str) -> TranscriptionResponse:
    response = TranscriptionResponse(job_id=job_id, status=status, stage=svc.progress.stage(job_id))
    latest = svc.progress.latest(job_id)
    if latest is not None:
        response.progress = progress_to_dto(latest)

    if status == JOB_COMPLETED:
        run: TranscriptionRun = svc.job_queue.result(job_id)
        response.segments = segments_to_dtos(run.segments)
        response.text = transcript_to_text(run.segments)
        response.duration = run.duration
        response.dropped_segments = run.dropped_segments
        if run.error is not None:
            response.error = error_detail(run.error)
        elif run.is_empty:
            response.error = error_detail(EmptyTranscriptError("No speech was transcribed"))
    else:
        error = svc.job_queue.error(job_id)
        if error is not None:
            response.error = error_detail(error)
    return response


def _run_transcription(
    job_id: str,
    cancel_token: CancellationToken,
    use_case: TranscribeMeetingUseCase,
    req: TranscribeRequest,
) -> TranscriptionRun:
    try:
        return use_case.execute(req, job_id=job_id, cancel_token=cancel_token)
    finally:
        if os.path.exists(req.audio_path):
            os.unlink(req.audio_path)
