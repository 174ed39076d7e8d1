"""Preflight validation of credentials and libraries.

The GitHub token is optional (its absence only lowers rate limits); the
Groq API key is required for generation.
"""

import importlib.util
from dataclasses import dataclass, field
from typing import Any

from readmegen.config import GITHUB_TOKEN_ENV, GROQ_API_KEY_ENV


@dataclass
class ToolCheck:
    """Result of checking a single prerequisite.

    Attributes:
        name: Prerequisite name
        available: Whether it is available
        version: Library version if applicable
        required: Whether it is required for generation
        message: Status message (human-readable context)
    """

    name: str
    available: bool
    version: str | None = None
    required: bool = True
    message: str = ""


@dataclass
class PreflightResult:
    """Result of preflight validation.

    Attributes:
        success: Whether all required prerequisites are available
        checks: Individual check results
        errors: Messages for missing required prerequisites
        warnings: Messages for missing optional prerequisites
    """

    success: bool = True
    checks: list[ToolCheck] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_check(self, check: ToolCheck) -> None:
        """Add a check result."""
        self.checks.append(check)

        if not check.available:
            if check.required:
                self.success = False
                self.errors.append(f"{check.name}: {check.message}")
            else:
                self.warnings.append(f"{check.name}: {check.message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "checks": [
                {
                    "name": c.name,
                    "available": c.available,
                    "version": c.version,
                    "required": c.required,
                    "message": c.message,
                }
                for c in self.checks
            ],
            "errors": self.errors,
            "warnings": self.warnings,
        }


class PreflightChecker:
    """Validates credentials and libraries before analysis.

    Usage:
        checker = PreflightChecker()
        result = checker.check_all(github_token, groq_api_key)
        if not result.success:
            raise typer.Exit(1)
    """

    def check_litellm(self) -> ToolCheck:
        """Check that LiteLLM is importable."""
        if importlib.util.find_spec("litellm") is None:
            return ToolCheck(
                name="litellm",
                available=False,
                message="Install with: pip install litellm",
            )

        from importlib.metadata import PackageNotFoundError, version

        try:
            litellm_version: str | None = version("litellm")
        except PackageNotFoundError:
            litellm_version = None

        return ToolCheck(
            name="litellm",
            available=True,
            version=litellm_version,
            message="LiteLLM available",
        )

    def check_github_token(self, token: str | None) -> ToolCheck:
        if token:
            return ToolCheck(
                name="github-token",
                available=True,
                required=False,
                message="GitHub token configured",
            )
        return ToolCheck(
            name="github-token",
            available=False,
            required=False,
            message=(
                f"GitHub API token is missing; requests are unauthenticated and rate limited. "
                f"Set {GITHUB_TOKEN_ENV} to raise the limit."
            ),
        )

    def check_groq_key(
        self,
        api_key: str | None,
        model: str | None = None,
        verify: bool = False,
    ) -> ToolCheck:
        """Check the Groq API key, optionally with a minimal live request."""
        if not api_key:
            return ToolCheck(
                name="groq-api-key",
                available=False,
                message=(
                    f"GROQ API key is missing; README generation will not work. "
                    f"Set {GROQ_API_KEY_ENV} (keys: https://console.groq.com/keys)."
                ),
            )
        if verify:
            return self._check_groq_connectivity(api_key, model)
        return ToolCheck(name="groq-api-key", available=True, message="Groq API key configured")

    def _check_groq_connectivity(self, api_key: str, model: str | None) -> ToolCheck:
        test_model = model or "mistral-saba-24b"

        try:
            import litellm

            litellm.completion(
                model=f"groq/{test_model}",
                messages=[{"role": "user", "content": "Say ok"}],
                max_tokens=5,
                api_key=api_key,
            )
        except ImportError:
            return ToolCheck(
                name="groq-api-key",
                available=False,
                message="LiteLLM not installed. Install with: pip install litellm",
            )
        except Exception as e:
            error_msg = str(e)
            if "invalid_api_key" in error_msg.lower() or "authentication" in error_msg.lower():
                message = f"Invalid API key. Check your {GROQ_API_KEY_ENV}."
            else:
                message = f"Groq API connection failed: {error_msg}"
            return ToolCheck(name="groq-api-key", available=False, message=message)

        return ToolCheck(
            name="groq-api-key",
            available=True,
            message=f"Groq API verified (model: {test_model})",
        )

    def check_all(
        self,
        github_token: str | None,
        groq_api_key: str | None,
        model: str | None = None,
        verify: bool = False,
    ) -> PreflightResult:
        """Run every check.

        Args:
            github_token: GitHub token (optional)
            groq_api_key: Groq API key (required)
            model: Model used for the live check
            verify: Make a minimal live request to Groq

        Returns:
            PreflightResult with all checks
        """
        result = PreflightResult()
        result.add_check(self.check_litellm())
        result.add_check(self.check_github_token(github_token))
        result.add_check(self.check_groq_key(groq_api_key, model=model, verify=verify))
        return result
