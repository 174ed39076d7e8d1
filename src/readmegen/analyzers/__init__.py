"""Repository analyzers.

- facts: Derive frameworks, CI/CD, documentation and context from GitHub payloads
- rules: Static detection tables
"""

from readmegen.analyzers.facts import (
    build_context,
    decode_content,
    detect_cicd,
    detect_documentation,
    detect_frameworks,
    find_readme,
    parse_manifest,
    select_manifest,
)

__all__ = [
    "build_context",
    "decode_content",
    "detect_cicd",
    "detect_documentation",
    "detect_frameworks",
    "find_readme",
    "parse_manifest",
    "select_manifest",
]
