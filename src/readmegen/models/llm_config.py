"""Generation service configuration.

READMEs are generated by Groq-hosted models reached through LiteLLM.
Sampling defaults (temperature 0.7, max_tokens 4096, top_p 1) match what the
generator has always sent.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ModelOption:
    """A selectable generation model.

    Attributes:
        id: Groq model identifier
        name: Display name
        enabled: Whether the model can be selected
    """

    id: str
    name: str
    enabled: bool = True


AVAILABLE_MODELS: tuple[ModelOption, ...] = (
    ModelOption("mistral-saba-24b", "Mistral Saba 24B"),
    ModelOption("qwen-2.5-32b", "Qwen 2.5 32B"),
    ModelOption("qwen-2.5-coder-32b", "Qwen 2.5 Coder 32B (Coming Soon)", enabled=False),
    ModelOption("qwen-qwq-32b", "Qwen QWQ 32B (Coming Soon)", enabled=False),
    ModelOption(
        "deepseek-r1-distill-qwen-32b",
        "DeepSeek R1 Distill Qwen 32B (Coming Soon)",
        enabled=False,
    ),
    ModelOption(
        "deepseek-r1-distill-llama-70b",
        "DeepSeek R1 Distill LLaMA 70B (Coming Soon)",
        enabled=False,
    ),
    ModelOption("gemma2-9b-it", "Gemma2 9B IT (Coming Soon)", enabled=False),
    ModelOption(
        "distil-whisper-large-v3-en",
        "Distil Whisper Large V3 EN (Coming Soon)",
        enabled=False,
    ),
)

DEFAULT_MODEL = "mistral-saba-24b"


def get_model_option(model_id: str) -> ModelOption | None:
    """Look up a model in the catalogue."""
    for option in AVAILABLE_MODELS:
        if option.id == model_id:
            return option
    return None


@dataclass
class LLMConfig:
    """Configuration for the generation service.

    Attributes:
        model: Groq model identifier
        api_key: Groq API key (required for generation, not for prompts)
        api_base: Optional API base URL override
        temperature: Sampling temperature
        max_tokens: Maximum response tokens
        top_p: Nucleus-sampling threshold
    """

    model: str = DEFAULT_MODEL
    api_key: str | None = None
    api_base: str | None = None
    temperature: float = field(default=0.7)
    max_tokens: int = field(default=4096)
    top_p: float = field(default=1.0)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.model or not self.model.strip():
            raise ValueError("Model identifier cannot be empty")
        self.model = self.model.strip()

        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be between 0 and 2. Got: {self.temperature}")

        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive. Got: {self.max_tokens}")

        if not 0.0 < self.top_p <= 1.0:
            raise ValueError(f"top_p must be in (0, 1]. Got: {self.top_p}")

    def validate(self) -> list[str]:
        """Validate configuration and return warnings.

        Returns:
            List of warning messages (empty if no warnings)
        """
        warnings: list[str] = []

        option = get_model_option(self.model)
        if option is None:
            warnings.append(f"Model '{self.model}' is not in the known model list")
        elif not option.enabled:
            warnings.append(f"Model '{self.model}' is not available yet")

        if self.max_tokens < 1000:
            warnings.append(
                f"max_tokens is set to {self.max_tokens}, which may truncate the README"
            )

        return warnings

    def to_dict(self) -> dict[str, str | int | float | None]:
        """Convert to dictionary for serialization."""
        return {
            "model": self.model,
            "api_key": self.api_key,
            "api_base": self.api_base,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str | int | float | None]) -> "LLMConfig":
        """Create LLMConfig from dictionary."""
        return cls(
            model=str(data.get("model") or DEFAULT_MODEL),
            api_key=data.get("api_key") if data.get("api_key") else None,  # type: ignore[arg-type]
            api_base=data.get("api_base") if data.get("api_base") else None,  # type: ignore[arg-type]
            temperature=float(data.get("temperature", 0.7)),  # type: ignore[arg-type]
            max_tokens=int(data.get("max_tokens", 4096)),  # type: ignore[arg-type]
            top_p=float(data.get("top_p", 1.0)),  # type: ignore[arg-type]
        )

    def get_litellm_model_name(self, model_id: str | None = None) -> str:
        """Get the model name in LiteLLM format (``groq/<model>``)."""
        return f"groq/{model_id or self.model}"
