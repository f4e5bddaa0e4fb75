"""
Generative model boundary and response parsing.
"""

from pm_autopilot.llm.gemini_client import GeminiClient, LLMClient
from pm_autopilot.llm.response_parser import (
    SectionExtraction,
    StructuredExtraction,
    extract_sections,
    extract_structured,
)

__all__ = [
    "GeminiClient",
    "LLMClient",
    "SectionExtraction",
    "StructuredExtraction",
    "extract_sections",
    "extract_structured",
]
