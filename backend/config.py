import os
import logging
from typing import Dict, Any
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_MODEL_ID = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_CHUNK_DURATION = 300
DEFAULT_REQUEST_TIMEOUT = 300.0
DEFAULT_JOB_RETENTION = 3600.0


class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self.host = os.environ.get("HOST", DEFAULT_HOST)
        self.port = int(os.environ.get("PORT", DEFAULT_PORT))
        self.debug = os.environ.get("DEBUG", "0") == "1"
        self.api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
        self.model_id = os.environ.get("MODEL_ID", "").strip() or DEFAULT_MODEL_ID
        self.base_url = os.environ.get("GEMINI_BASE_URL", DEFAULT_BASE_URL)
        self.chunk_duration = float(os.environ.get("CHUNK_DURATION", DEFAULT_CHUNK_DURATION))
        self.request_timeout = float(os.environ.get("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))
        self.default_language = os.environ.get("DEFAULT_LANGUAGE", "en").lower()
        self.failure_policy = os.environ.get("FAILURE_POLICY", "abort").lower()
        sample_rate = os.environ.get("SAMPLE_RATE", "").strip()
        self.sample_rate = int(sample_rate) if sample_rate else None
        self.max_workers = int(os.environ.get("MAX_WORKERS", "1"))
        self.job_retention = float(os.environ.get("JOB_RETENTION", DEFAULT_JOB_RETENTION))
        self.temp_dir = os.environ.get("TEMP_DIR", "/tmp/meeting-scribe")
        self.engine = os.environ.get("ENGINE", "gemini").lower()
        self.infra = os.environ.get("INFRA", "local").lower()
        Path(self.temp_dir).mkdir(parents=True, exist_ok=True)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "model_id": self.model_id,
            "chunk_duration": self.chunk_duration,
            "request_timeout": self.request_timeout,
            "default_language": self.default_language,
            "failure_policy": self.failure_policy,
            "job_retention": self.job_retention,
            "sample_rate": self.sample_rate,
            "has_api_key": self.api_key is not None,
            "engine": self.engine,
            "infra": self.infra,
        }


config = Config()


def get_config() -> Config:
    return config


def create_generation_adapter(cfg: Config):
    """Create the text-generation adapter based on ENGINE env var.

    Uses lazy imports so unused clients are never loaded.
    """
    engine = cfg.engine

    if engine == "gemini":
        from adapters.gemini.generation import GeminiGenerationAdapter
        generation = GeminiGenerationAdapter(
            api_key=cfg.api_key,
            model=cfg.model_id,
            base_url=cfg.base_url,
            timeout=cfg.request_timeout,
        )
    else:
        raise ValueError(f"Unknown ENGINE: {engine!r}. Valid options: gemini")

    if not cfg.api_key:
        logger.warning("GEMINI_API_KEY is not set; generation requests will fail")
    logger.info(f"Generation adapter: engine={engine}, model={cfg.model_id}")
    return generation


def create_audio_adapters(cfg: Config):
    """Create the audio decoder (always FFmpeg) and chunk encoder (always PCM16 WAV)."""
    from adapters.ffmpeg.audio import FFmpegAudioDecoder
    from adapters.pcm.wav import PCM16WavEncoder
    return FFmpegAudioDecoder(sample_rate=cfg.sample_rate, temp_dir=cfg.temp_dir), PCM16WavEncoder()


def create_infra_adapters(cfg: Config):
    """Create infrastructure adapters based on INFRA env var."""
    from adapters.local.log_progress import LogProgressAdapter
    from adapters.local.memory_progress import InMemoryProgressAdapter

    infra = cfg.infra
    progress = InMemoryProgressAdapter(delegate=LogProgressAdapter())

    if infra == "local":
        from adapters.local.thread_job import ThreadJobAdapter
        job_queue = ThreadJobAdapter(
            max_workers=cfg.max_workers,
            retention_seconds=cfg.job_retention,
            on_evict=progress.forget,
        )
    elif infra == "sync":
        from adapters.local.sync_job import SyncJobAdapter
        job_queue = SyncJobAdapter(retention_seconds=cfg.job_retention, on_evict=progress.forget)
    else:
        raise ValueError(f"Unknown INFRA: {infra!r}. Valid options: local, sync")

    adapters = {
        "job_queue": job_queue,
        "progress": progress,
    }
    logger.info(f"Infra adapters: {infra} -> {', '.join(type(v).__name__ for v in adapters.values())}")
    return adapters
