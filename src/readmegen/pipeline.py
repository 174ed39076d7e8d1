"""README generation session.

Sequences repository analysis, instruction composition and streamed
generation for one interactive session. All user choices live in an explicit
SessionState; each generation request gets a ticket so that fragments from a
superseded request are discarded instead of leaking into the display or the
history.
"""

import logging

from readmegen.errors import GenerationServiceError, NoRepositoryError
from readmegen.github.client import GitHubGateway
from readmegen.llm.client import FragmentCallback, GenerationClient
from readmegen.llm.prompts import build_instruction, compose_prompt, get_template_description
from readmegen.models.llm_config import get_model_option
from readmegen.models.repository import RepositoryAnalysis, RepositoryContext
from readmegen.models.session import SectionSelection, SessionState
from readmegen.renderers.badges import BadgeSet, compose_badges

logger = logging.getLogger(__name__)


class ReadmeSession:
    """Holds the active repository analysis and session state.

    A failed analysis leaves the previous analysis in place. A failed
    generation leaves the history untouched but keeps the partial text in
    ``current_text``.
    """

    def __init__(
        self,
        gateway: GitHubGateway,
        generator: GenerationClient,
        state: SessionState | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            gateway: Repository metadata gateway
            generator: Generation client
            state: Initial state (defaults to a fresh state)
        """
        self.gateway = gateway
        self.generator = generator
        self.state = state or SessionState()
        self.analysis: RepositoryAnalysis | None = None
        self.current_text = ""
        self.last_instruction = ""

    # -- state transitions ---------------------------------------------------

    def set_template(self, template: str) -> None:
        get_template_description(template)
        self.state.template = template

    def set_sections(self, sections: SectionSelection) -> None:
        self.state.sections = sections

    def apply_preset(self, preset_name: str) -> None:
        self.state.sections = SectionSelection.preset(preset_name)

    def set_model(self, model_id: str) -> None:
        option = get_model_option(model_id)
        if option is not None and not option.enabled:
            raise ValueError(f"Model '{model_id}' is not available yet")
        self.state.model = model_id

    def set_override(self, text: str, enabled: bool = True) -> None:
        self.state.override_text = text
        self.state.override_enabled = enabled

    def select_version(self, index: int) -> bool:
        """Show a previously generated version. Out-of-range indices are ignored."""
        if not self.state.history.select(index):
            return False
        self.current_text = self.state.history.current or ""
        return True

    # -- analysis ------------------------------------------------------------

    @property
    def context(self) -> RepositoryContext:
        if self.analysis is None:
            raise NoRepositoryError("Please analyze a repository first")
        return self.analysis.context

    async def analyze(self, url: str) -> RepositoryAnalysis:
        """Fetch and analyze a repository, making it the active subject.

        Raises:
            InvalidUrlError: If the URL is malformed
            RepositoryLookupError: If the repository cannot be fetched
        """
        analysis = await self.gateway.fetch_repository(url)
        self.analysis = analysis
        logger.info(
            "Analyzed %s: %s",
            analysis.context.full_name,
            ", ".join(analysis.context.frameworks) or "no frameworks detected",
        )
        return analysis

    # -- instruction ---------------------------------------------------------

    def badges(self) -> BadgeSet:
        return compose_badges(self.context)

    def default_override_text(self) -> str:
        """Return the derived instruction as a starting point for an override."""
        return compose_prompt(
            self.context, self.badges(), self.state.template, self.state.sections
        )

    def build_instruction(self) -> str:
        """Compose the instruction for the current state.

        Raises:
            NoRepositoryError: If no repository has been analyzed
        """
        context = self.context
        instruction = build_instruction(
            context,
            compose_badges(context),
            self.state.template,
            self.state.sections,
            override_text=self.state.override_text,
            override_enabled=self.state.override_enabled,
        )
        self.last_instruction = instruction
        return instruction

    # -- generation ----------------------------------------------------------

    def _next_ticket(self) -> int:
        self.state.ticket += 1
        return self.state.ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self.state.ticket

    async def generate(self, on_fragment: FragmentCallback | None = None) -> str | None:
        """Generate a README for the active repository.

        Args:
            on_fragment: Called with each fragment while this request is current

        Returns:
            The normalized README, or None if a newer request superseded this one

        Raises:
            NoRepositoryError: If no repository has been analyzed
            MissingCredentialError: If no generation key is configured
            GenerationServiceError: If generation fails (partial text kept)
        """
        ticket = self._next_ticket()
        instruction = self.build_instruction()
        self.current_text = ""

        stream = await self.generator.stream(instruction, self.state.model)

        try:
            async for fragment in stream:
                if not self.is_current(ticket):
                    logger.debug("Discarding superseded generation %d", ticket)
                    await stream.cancel()
                    return None
                self.current_text = stream.text
                if on_fragment is not None:
                    on_fragment(fragment)
        except GenerationServiceError as e:
            if not self.is_current(ticket):
                logger.debug("Dropping failure of superseded generation %d: %s", ticket, e)
                return None
            self.current_text = e.partial_text
            raise

        if not self.is_current(ticket):
            return None

        text = stream.accumulator.normalized()
        self.current_text = text
        index = self.state.history.append(text)
        logger.info("README generated (version %d, %d chars)", index + 1, len(text))
        return text
