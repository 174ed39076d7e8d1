"""Streaming README generation through LiteLLM.

The generation service is consumed as an async stream of text fragments.
Fragments are accumulated in arrival order; if the stream fails part-way the
text received so far travels with the raised GenerationServiceError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterable, AsyncIterator, Callable

import litellm

from readmegen.errors import GenerationServiceError, MissingCredentialError
from readmegen.models.llm_config import LLMConfig
from readmegen.renderers.filters import strip_code_fences

logger = logging.getLogger(__name__)

FragmentCallback = Callable[[str], None]


@dataclass
class StreamAccumulator:
    """Collects streamed fragments in arrival order.

    Attributes:
        fragments: Fragments received so far
    """

    fragments: list[str] = field(default_factory=list)

    def feed(self, fragment: str) -> None:
        """Append a fragment. Empty fragments are ignored."""
        if fragment:
            self.fragments.append(fragment)

    @property
    def text(self) -> str:
        """Concatenation of all fragments received so far."""
        return "".join(self.fragments)

    def normalized(self) -> str:
        """Accumulated text with any wrapping code fence removed."""
        return strip_code_fences(self.text)


@dataclass
class GenerationResult:
    """A completed generation.

    Attributes:
        text: Normalized README text
        raw_text: Text exactly as streamed
        model: Model that produced it
    """

    text: str
    raw_text: str
    model: str


def _fragment_text(chunk: Any) -> str:
    """Extract the text delta from a streamed chunk."""
    if isinstance(chunk, str):
        return chunk
    choices = getattr(chunk, "choices", None)
    if not choices:
        return ""
    delta = getattr(choices[0], "delta", None)
    return (getattr(delta, "content", None) or "") if delta is not None else ""


class GenerationStream:
    """Lazily consumed, cancellable stream of generated text fragments.

    Iterating yields each non-empty fragment once, in generation order.
    The stream is not restartable: once finished, failed or cancelled it
    yields nothing more.
    """

    def __init__(self, source: AsyncIterable[Any], model: str) -> None:
        """Wrap a chunk source.

        Args:
            source: Async iterable of LiteLLM chunks or plain strings
            model: Model identifier the stream belongs to
        """
        self.model = model
        self.accumulator = StreamAccumulator()
        self._iterator: AsyncIterator[Any] = source.__aiter__()
        self._finished = False
        self._cancelled = False

    @property
    def text(self) -> str:
        return self.accumulator.text

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __aiter__(self) -> "GenerationStream":
        return self

    async def __anext__(self) -> str:
        while True:
            if self._finished or self._cancelled:
                raise StopAsyncIteration

            try:
                chunk = await self._iterator.__anext__()
            except StopAsyncIteration:
                self._finished = True
                raise
            except Exception as e:
                self._finished = True
                logger.warning(
                    "Generation stream failed after %d fragments", len(self.accumulator.fragments)
                )
                raise GenerationServiceError(
                    f"Generation failed: {e}", partial_text=self.accumulator.text
                ) from e

            fragment = _fragment_text(chunk)
            if fragment:
                self.accumulator.feed(fragment)
                return fragment

    async def cancel(self) -> None:
        """Stop the stream; fragments still in flight are dropped."""
        already_done = self._cancelled or self._finished
        self._cancelled = True
        if already_done:
            return
        close = getattr(self._iterator, "aclose", None)
        if close is not None:
            await close()
        logger.debug("Generation stream cancelled (%d chars kept)", len(self.accumulator.text))

    async def collect(self, on_fragment: FragmentCallback | None = None) -> str:
        """Drain the stream and return the normalized text.

        Args:
            on_fragment: Called with each fragment as it arrives

        Raises:
            GenerationServiceError: If the stream fails (carries partial text)
        """
        async for fragment in self:
            if on_fragment is not None:
                on_fragment(fragment)
        return self.accumulator.normalized()


class GenerationClient:
    """README generation client backed by Groq through LiteLLM."""

    def __init__(self, config: LLMConfig) -> None:
        """Initialize the client.

        Args:
            config: Generation service configuration
        """
        self.config = config

    def _require_api_key(self) -> str:
        api_key = (self.config.api_key or "").strip()
        if not api_key:
            raise MissingCredentialError(
                "GROQ API key is missing. Set the GROQ_API_KEY environment variable "
                "or llm.api_key in the config file."
            )
        return api_key

    async def stream(self, instruction: str, model_id: str | None = None) -> GenerationStream:
        """Submit an instruction and return the response as a fragment stream.

        Args:
            instruction: Full generation instruction
            model_id: Model override (defaults to the configured model)

        Returns:
            GenerationStream over the response

        Raises:
            MissingCredentialError: If no API key is configured (no call is made)
            GenerationServiceError: If the service rejects the request
        """
        api_key = self._require_api_key()
        model = model_id or self.config.model

        completion_kwargs: dict[str, Any] = {
            "model": self.config.get_litellm_model_name(model),
            "messages": [{"role": "user", "content": instruction}],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
            "top_p": self.config.top_p,
            "stream": True,
            "api_key": api_key,
        }
        if self.config.api_base:
            completion_kwargs["api_base"] = self.config.api_base

        logger.debug("Requesting generation from %s (%d chars)", model, len(instruction))

        try:
            response = await litellm.acompletion(**completion_kwargs)
        except litellm.exceptions.AuthenticationError as e:
            raise GenerationServiceError(f"Authentication failed for Groq: {e}") from e
        except litellm.exceptions.RateLimitError as e:
            raise GenerationServiceError(f"Rate limit exceeded for Groq: {e}") from e
        except litellm.exceptions.APIConnectionError as e:
            raise GenerationServiceError(f"Connection failed to Groq: {e}") from e
        except Exception as e:
            raise GenerationServiceError(f"Generation request failed: {e}") from e

        return GenerationStream(response, model)

    async def generate(
        self,
        instruction: str,
        model_id: str | None = None,
        on_fragment: FragmentCallback | None = None,
    ) -> GenerationResult:
        """Generate a README and wait for the full text.

        Args:
            instruction: Full generation instruction
            model_id: Model override
            on_fragment: Called with each fragment as it arrives

        Returns:
            GenerationResult with normalized and raw text

        Raises:
            MissingCredentialError: If no API key is configured
            GenerationServiceError: If the request or the stream fails
        """
        stream = await self.stream(instruction, model_id)
        text = await stream.collect(on_fragment)

        logger.info("Generated %d characters with %s", len(text), stream.model)
        return GenerationResult(text=text, raw_text=stream.text, model=stream.model)


def create_client(config: LLMConfig) -> GenerationClient:
    """Create a generation client from configuration."""
    return GenerationClient(config)
