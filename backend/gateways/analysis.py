"""AnalysisGateway — turns a reviewed transcript into structured minutes."""

import logging
from typing import Optional

from pydantic import ValidationError

from domain.errors import ExtractionError, ExtractionErrorKind
from domain.extraction import extract_json
from domain.models import GenerationRequest
from models import AnalysisResult
from ports.generation import GenerationPort
from prompts import ANALYSIS_SCHEMA, analysis_prompt, json_only_instruction

logger = logging.getLogger(__name__)


class AnalysisGateway:
    def __init__(self, generation: GenerationPort):
        self._generation = generation

    def analyze(self, transcript: str, language: str, hint: Optional[str] = None) -> AnalysisResult:
        """Request minutes for ``transcript`` and parse the single-object reply.

        Raises:
            TransmissionError: the service call failed.
            ExtractionError: the reply could not be parsed, or parsed into
                something that is not an analysis record (SCHEMA_MISMATCH).
        """
        request = GenerationRequest(
            prompt=analysis_prompt(transcript, language, hint),
            system_instruction=json_only_instruction(language),
            response_schema=ANALYSIS_SCHEMA,
            language=language,
        )
        logger.info(f"Analyzing transcript ({len(transcript)} chars, language={language}, hint={bool(hint)})")
        raw = self._generation.generate(request)
        value = extract_json(raw, root="object")

        try:
            return AnalysisResult.model_validate(value)
        except ValidationError as e:
            logger.error(f"Analysis response did not match schema: {e.error_count()} error(s)")
            raise ExtractionError(
                ExtractionErrorKind.SCHEMA_MISMATCH, raw, root="object", detail=str(e),
            ) from e
