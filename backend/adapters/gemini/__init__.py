"""Gemini adapter for chunk transcription and transcript analysis."""

from .generation import GeminiGenerationAdapter

__all__ = ["GeminiGenerationAdapter"]
