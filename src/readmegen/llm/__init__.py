"""LLM integration for readmegen.

- prompts: Instruction composition, templates and override placeholders
- client: Streaming generation through LiteLLM (Groq models)
"""

from readmegen.llm.client import (
    GenerationClient,
    GenerationResult,
    GenerationStream,
    StreamAccumulator,
    create_client,
)
from readmegen.llm.prompts import (
    PLACEHOLDERS,
    SECTION_LINES,
    TEMPLATES,
    apply_override,
    build_instruction,
    compose_prompt,
    substitute_placeholders,
)
from readmegen.models.llm_config import AVAILABLE_MODELS, LLMConfig

__all__ = [
    "AVAILABLE_MODELS",
    "GenerationClient",
    "GenerationResult",
    "GenerationStream",
    "LLMConfig",
    "PLACEHOLDERS",
    "SECTION_LINES",
    "StreamAccumulator",
    "TEMPLATES",
    "apply_override",
    "build_instruction",
    "compose_prompt",
    "create_client",
    "substitute_placeholders",
]
