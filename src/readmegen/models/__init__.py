"""readmegen data models.

This module exports the core entities used throughout the application:
- RepositoryContext: Canonical derived facts about one repository
- RawRepositoryData: GitHub payloads before derivation
- RepositoryAnalysis: Context plus branch protection status
- SessionState: Interactive choices and generated-version history
"""

from readmegen.models.llm_config import AVAILABLE_MODELS, DEFAULT_MODEL, LLMConfig, ModelOption
from readmegen.models.repository import (
    Contributor,
    RawRepositoryData,
    Release,
    RepositoryAnalysis,
    RepositoryContext,
)
from readmegen.models.session import (
    SECTION_IDS,
    SECTION_PRESETS,
    GenerationHistory,
    SectionSelection,
    SessionState,
)

__all__ = [
    "AVAILABLE_MODELS",
    "Contributor",
    "DEFAULT_MODEL",
    "GenerationHistory",
    "LLMConfig",
    "ModelOption",
    "RawRepositoryData",
    "Release",
    "RepositoryAnalysis",
    "RepositoryContext",
    "SECTION_IDS",
    "SECTION_PRESETS",
    "SectionSelection",
    "SessionState",
]
