"""TranscriptionGateway — one encoded chunk in, raw response text out."""

import logging

from domain.models import EncodedChunk, GenerationRequest
from ports.generation import GenerationPort
from prompts import TRANSCRIPTION_SCHEMA, transcription_instruction, transcription_prompt

logger = logging.getLogger(__name__)


class TranscriptionGateway:
    def __init__(self, generation: GenerationPort):
        self._generation = generation

    def transcribe_chunk(self, chunk: EncodedChunk, language: str) -> str:
        """Return the service's raw text for one chunk.

        Transmission failures propagate unchanged; retrying is the caller's call.
        """
        request = GenerationRequest(
            prompt=transcription_prompt(language),
            system_instruction=transcription_instruction(language),
            response_schema=TRANSCRIPTION_SCHEMA,
            language=language,
            media=chunk,
        )
        text = self._generation.generate(request)
        logger.debug(f"Transcription response: {len(text)} chars for {chunk.duration:.1f}s of audio")
        return text
