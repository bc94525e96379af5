"""GenerationPort — abstract interface for the text-generation service."""

from abc import ABC, abstractmethod

from domain.models import GenerationRequest


class GenerationPort(ABC):
    @abstractmethod
    def generate(self, request: GenerationRequest) -> str:
        """Send one request and return the raw response text, unvalidated.

        Raises TransmissionError (or TransmissionTimeout) on failure. Does not retry.
        """
