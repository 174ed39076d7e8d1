"""Interactive session state.

Everything a user can choose between analysis and generation (template,
sections, model, override text) plus the generated-version history lives in
SessionState, which round-trips through plain dictionaries.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from readmegen.models.llm_config import DEFAULT_MODEL

SECTION_IDS: tuple[str, ...] = (
    "features",
    "installation",
    "usage",
    "contributing",
    "license",
    "badges",
    "screenshots",
    "testing",
    "roadmap",
    "acknowledgements",
    "faq",
    "troubleshooting",
    "architecture",
    "requirements",
    "api_docs",
)

_DEFAULT_DISABLED = frozenset({"faq", "troubleshooting", "architecture", "api_docs"})

SECTION_PRESETS: dict[str, frozenset[str]] = {
    "minimal": frozenset({"features", "installation", "usage", "license"}),
    "developer": frozenset(
        {"features", "installation", "usage", "api_docs", "architecture", "testing", "license"}
    ),
    "complete": frozenset(SECTION_IDS),
}


def _check_section(section_id: str) -> None:
    if section_id not in SECTION_IDS:
        raise ValueError(f"Unknown section '{section_id}'. Valid: {', '.join(SECTION_IDS)}")


@dataclass(frozen=True)
class SectionSelection:
    """Enabled state for every README section.

    Operations return a new selection; the receiver is never modified.
    """

    enabled: dict[str, bool] = field(
        default_factory=lambda: {s: s not in _DEFAULT_DISABLED for s in SECTION_IDS}
    )

    def __post_init__(self) -> None:
        for section_id in self.enabled:
            _check_section(section_id)
        # Sections missing from a partial mapping count as disabled
        normalized = {s: bool(self.enabled.get(s, False)) for s in SECTION_IDS}
        object.__setattr__(self, "enabled", normalized)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "SectionSelection":
        """Build a selection with exactly ``names`` enabled."""
        wanted = set(names)
        for name in wanted:
            _check_section(name)
        return cls({s: s in wanted for s in SECTION_IDS})

    @classmethod
    def preset(cls, preset_name: str) -> "SectionSelection":
        """Build a selection from a named preset (minimal, developer, complete)."""
        if preset_name not in SECTION_PRESETS:
            raise ValueError(
                f"Unknown preset '{preset_name}'. Valid: {', '.join(SECTION_PRESETS)}"
            )
        return cls.from_names(SECTION_PRESETS[preset_name])

    def is_enabled(self, section_id: str) -> bool:
        _check_section(section_id)
        return self.enabled[section_id]

    def enabled_ids(self) -> list[str]:
        """Return enabled section ids in declaration order."""
        return [s for s in SECTION_IDS if self.enabled[s]]

    def with_section(self, section_id: str, value: bool) -> "SectionSelection":
        _check_section(section_id)
        return SectionSelection({**self.enabled, section_id: value})

    def toggle(self, section_id: str) -> "SectionSelection":
        return self.with_section(section_id, not self.is_enabled(section_id))

    def select_all(self) -> "SectionSelection":
        return SectionSelection({s: True for s in SECTION_IDS})

    def deselect_all(self) -> "SectionSelection":
        return SectionSelection({s: False for s in SECTION_IDS})

    def to_dict(self) -> dict[str, bool]:
        return {s: self.enabled[s] for s in SECTION_IDS}


@dataclass
class GenerationHistory:
    """Append-only list of generated README versions for one session.

    Attributes:
        entries: Generated documents, oldest first
        selected_index: Index of the version on display (-1 when empty)
    """

    entries: list[str] = field(default_factory=list)
    selected_index: int = -1

    def append(self, text: str) -> int:
        """Add a version and select it. Returns its index."""
        self.entries.append(text)
        self.selected_index = len(self.entries) - 1
        return self.selected_index

    def select(self, index: int) -> bool:
        """Select a stored version; out-of-range indices are ignored."""
        if 0 <= index < len(self.entries):
            self.selected_index = index
            return True
        return False

    @property
    def current(self) -> str | None:
        if self.selected_index < 0:
            return None
        return self.entries[self.selected_index]

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class SessionState:
    """Serializable state of one interactive session.

    Attributes:
        template: README style template key
        sections: Enabled sections
        model: Generation model id
        override_enabled: Whether the custom instruction block is used
        override_text: Custom instruction text (may contain placeholders)
        history: Generated README versions
        ticket: Identifier of the latest generation request
    """

    template: str = "standard"
    sections: SectionSelection = field(default_factory=SectionSelection)
    model: str = DEFAULT_MODEL
    override_enabled: bool = False
    override_text: str = ""
    history: GenerationHistory = field(default_factory=GenerationHistory)
    ticket: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "template": self.template,
            "sections": self.sections.to_dict(),
            "model": self.model,
            "override_enabled": self.override_enabled,
            "override_text": self.override_text,
            "history": list(self.history.entries),
            "selected_index": self.history.selected_index,
            "ticket": self.ticket,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionState":
        sections_data = data.get("sections")
        sections = SectionSelection(dict(sections_data)) if sections_data else SectionSelection()
        history = GenerationHistory(
            entries=list(data.get("history", [])),
            selected_index=int(data.get("selected_index", -1)),
        )
        return cls(
            template=data.get("template", "standard"),
            sections=sections,
            model=data.get("model", DEFAULT_MODEL),
            override_enabled=bool(data.get("override_enabled", False)),
            override_text=data.get("override_text", ""),
            history=history,
            ticket=int(data.get("ticket", 0)),
        )
