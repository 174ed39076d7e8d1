"""readmegen - AI README generator for GitHub repositories.

readmegen reads a public repository's metadata from the GitHub API, derives
facts about it (frameworks, CI/CD, documentation, badges), composes a
generation instruction and streams a README back from a hosted model.

Core principles:
- Deterministic facts: frameworks, badges and the instruction are pure
  functions of the repository metadata
- Graceful degradation: only the repository lookup itself is mandatory
- Explicit session state: no hidden globals between analysis and generation
"""

__version__ = "0.1.0"
__author__ = "readmegen Contributors"
