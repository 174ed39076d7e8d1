"""readmegen utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- preflight: Credential and library checks
"""

from readmegen.utils.logging import get_logger, setup_logging
from readmegen.utils.preflight import PreflightChecker, PreflightResult

__all__ = [
    "get_logger",
    "setup_logging",
    "PreflightChecker",
    "PreflightResult",
]
