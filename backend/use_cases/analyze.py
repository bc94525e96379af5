"""AnalyzeTranscriptUseCase — derive meeting minutes from a reviewed transcript."""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from domain.errors import EmptyTranscriptError
from domain.models import TranscriptSegment
from gateways.analysis import AnalysisGateway
from models import AnalysisResult
from post_processing import transcript_to_text

logger = logging.getLogger(__name__)


@dataclass
class AnalyzeRequest:
    transcript: Union[str, Sequence[TranscriptSegment]]
    language: str = "en"
    hint: Optional[str] = None


class AnalyzeTranscriptUseCase:
    def __init__(self, gateway: AnalysisGateway):
        self._gateway = gateway

    def execute(self, req: AnalyzeRequest) -> AnalysisResult:
        if isinstance(req.transcript, str):
            text = req.transcript
        else:
            text = transcript_to_text(req.transcript)
        if not text.strip():
            raise EmptyTranscriptError("Transcript is empty; nothing to analyze")

        result = self._gateway.analyze(text, req.language, req.hint)
        logger.info(
            f"Analysis: {len(result.decisions)} decision(s), "
            f"{len(result.action_items)} action item(s), {len(result.pending_issues)} pending issue(s)"
        )
        return result
