"""readmegen configuration system.

Configuration is YAML-based with CLI overrides for per-run choices.
Supports environment variable substitution (${VAR}) in config files.
Credentials default to the GITHUB_TOKEN and GROQ_API_KEY environment
variables when the config file does not set them.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.readmegen/config.yaml
3. ./readmegen.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from readmegen.models.llm_config import DEFAULT_MODEL, LLMConfig

GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
GROQ_API_KEY_ENV = "GROQ_API_KEY"

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class GitHubConfig:
    """GitHub API access.

    Attributes:
        token: Personal access token (optional; unauthenticated has lower rate limits)
        api_base: REST API base URL
        timeout: Request timeout in seconds
    """

    token: str | None = None
    api_base: str = "https://api.github.com"
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"GitHub timeout must be positive (got {self.timeout})")


@dataclass
class ReadmeConfig:
    """Defaults for what gets generated.

    Attributes:
        template: Style template key
        preset: Section preset (minimal, developer, complete); overrides defaults
        sections: Explicit list of enabled sections; overrides preset
        override_file: File holding custom instructions with placeholders
        output: Path the README is written to
    """

    template: str = "standard"
    preset: str | None = None
    sections: list[str] | None = None
    override_file: str | None = None
    output: str = "README.md"


@dataclass
class ReadmeGenConfig:
    """Top-level readmegen configuration.

    Attributes:
        github: GitHub API settings
        llm: Generation service settings
        readme: README defaults
    """

    github: GitHubConfig = field(default_factory=GitHubConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    readme: ReadmeConfig = field(default_factory=ReadmeConfig)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax. Example: ${GROQ_API_KEY} -> value of GROQ_API_KEY

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.readmegen/config.yaml
    2. ./readmegen.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".readmegen" / "config.yaml",
        start_path / "readmegen.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _env_or_none(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def load_config_from_dict(data: dict[str, Any]) -> ReadmeGenConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        ReadmeGenConfig instance
    """
    data = substitute_env_vars(data)

    config = ReadmeGenConfig()

    github_data = data.get("github") or {}
    config.github = GitHubConfig(
        token=github_data.get("token") or _env_or_none(GITHUB_TOKEN_ENV),
        api_base=github_data.get("api_base", config.github.api_base),
        timeout=float(github_data.get("timeout", config.github.timeout)),
    )

    llm_data = data.get("llm") or {}
    config.llm = LLMConfig(
        model=llm_data.get("model", DEFAULT_MODEL),
        api_key=llm_data.get("api_key") or _env_or_none(GROQ_API_KEY_ENV),
        api_base=llm_data.get("api_base"),
        temperature=float(llm_data.get("temperature", 0.7)),
        max_tokens=int(llm_data.get("max_tokens", 4096)),
        top_p=float(llm_data.get("top_p", 1.0)),
    )

    if "readme" in data:
        readme_data = data["readme"] or {}
        sections = readme_data.get("sections")
        config.readme = ReadmeConfig(
            template=readme_data.get("template", config.readme.template),
            preset=readme_data.get("preset"),
            sections=list(sections) if sections is not None else None,
            override_file=readme_data.get("override_file"),
            output=readme_data.get("output", config.readme.output),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> ReadmeGenConfig:
    """Load configuration from file.

    Credentials fall back to the environment even when no file is found.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        ReadmeGenConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = load_config_from_dict({})

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return f'''# readmegen configuration

# GitHub API access (token optional; unauthenticated requests are rate limited)
github:
  # token: "${{{GITHUB_TOKEN_ENV}}}"
  api_base: "https://api.github.com"
  timeout: 30

# Generation service (Groq). The API key defaults to ${GROQ_API_KEY_ENV}.
llm:
  model: "{DEFAULT_MODEL}"   # mistral-saba-24b, qwen-2.5-32b
  # api_key: "${{{GROQ_API_KEY_ENV}}}"
  temperature: 0.7
  max_tokens: 4096
  top_p: 1

# README defaults
readme:
  template: "standard"   # standard, minimal, detailed, developer, opensource, beginner, corporate
  # preset: "developer"  # minimal, developer, complete
  # sections: [features, installation, usage, license]
  # override_file: ".readmegen/override.md"
  output: "README.md"
'''
