"""
Prompt assembly for the generative model.
"""

from pm_autopilot.prompts.assembler import (
    ContentStyle,
    ContentStyleCatalog,
    build_content_prompt,
    build_prd_chat_prompt,
    build_prd_generation_prompt,
    build_voc_analysis_prompt,
    get_style_catalog,
)

__all__ = [
    "ContentStyle",
    "ContentStyleCatalog",
    "build_content_prompt",
    "build_prd_chat_prompt",
    "build_prd_generation_prompt",
    "build_voc_analysis_prompt",
    "get_style_catalog",
]
