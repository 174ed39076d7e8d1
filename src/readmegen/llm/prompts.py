"""Prompt construction for README generation.

The instruction sent to the model is assembled from the repository context,
its badge markup, a style template and the enabled sections. A user
override block can be layered on top; it never replaces the derived
instruction.
"""

from datetime import datetime

from readmegen.analyzers.rules import README_REFERENCE_LIMIT
from readmegen.models.repository import RepositoryContext
from readmegen.models.session import SectionSelection
from readmegen.renderers.badges import BadgeSet

# =============================================================================
# Style Templates
# =============================================================================

TEMPLATES: dict[str, str] = {
    "standard": "Standard professional README",
    "minimal": "Minimal README with essential sections only",
    "detailed": "Comprehensive README with all sections",
    "developer": "Developer-focused with technical details",
    "opensource": "Open-source focused with contribution guidelines",
    "beginner": "Beginner-friendly with detailed explanations",
    "corporate": "Corporate style with formal language",
}

DEFAULT_TEMPLATE = "standard"


def get_template_description(template: str) -> str:
    """Return the style description for a template key.

    Raises:
        ValueError: If the template is unknown
    """
    try:
        return TEMPLATES[template]
    except KeyError:
        raise ValueError(
            f"Unknown template '{template}'. Valid: {', '.join(TEMPLATES)}"
        ) from None


# =============================================================================
# Section List
# =============================================================================

FIXED_SECTION_LINES: tuple[str, ...] = (
    "Title with attractive formatting and badges",
    "Brief Overview/Introduction with key value proposition",
)

# Canonical order of optional sections in the instruction. "badges" and "faq"
# are selectable but have no line of their own.
SECTION_LINES: tuple[tuple[str, str], ...] = (
    ("features", "Features (detailed but concise bullet points)"),
    ("requirements", "Requirements and Prerequisites"),
    ("installation", "Installation (step-by-step instructions with code blocks)"),
    ("usage", "Usage (with code examples and explanations)"),
    ("screenshots", "Screenshots/Demo (placeholders with instructions)"),
    ("api_docs", "API Documentation"),
    ("architecture", "Architecture Overview"),
    ("testing", "Testing Instructions"),
    ("troubleshooting", "Troubleshooting and FAQs"),
    ("roadmap", "Roadmap/Future Enhancements"),
    ("contributing", "Contributing Guidelines"),
    ("acknowledgements", "Acknowledgements (including contributors: {contributors})"),
    ("license", "License Information"),
)

FORMATTING_INSTRUCTIONS: tuple[str, ...] = (
    "Do NOT include triple backticks at the beginning or end of your response",
    "Make it detailed, professional, extremely well-formatted in Markdown",
    "Include appropriate emojis for section headers if suitable for the template style",
    "If this is a coding project, include code snippets showing usage examples",
    "For installation, be specific about prerequisites and commands",
    "Organize everything logically and make the README comprehensive but easy to navigate",
    "Use proper Markdown formatting throughout the document",
)

TRUNCATION_MARKER = "...(truncated)"

# =============================================================================
# Override Placeholders
# =============================================================================

PLACEHOLDERS: tuple[str, ...] = (
    "{{REPO_NAME}}",
    "{{OWNER}}",
    "{{DESCRIPTION}}",
    "{{LANGUAGES}}",
    "{{FRAMEWORKS}}",
    "{{DEPENDENCIES}}",
    "{{BADGES}}",
    "{{TEMPLATE}}",
)

OVERRIDE_HEADER = "ADDITIONAL CUSTOM INSTRUCTIONS:"


def build_section_lines(context: RepositoryContext, sections: SectionSelection) -> list[str]:
    """Build the numbered section list.

    Title and overview are always 1 and 2; enabled optional sections follow
    in canonical order, numbered consecutively.
    """
    lines = [f"{i}. {text}" for i, text in enumerate(FIXED_SECTION_LINES, start=1)]
    number = len(lines) + 1

    for section_id, text in SECTION_LINES:
        if not sections.is_enabled(section_id):
            continue
        if section_id == "acknowledgements":
            logins = ", ".join(c.login for c in context.contributors)
            text = text.format(contributors=logins)
        lines.append(f"{number}. {text}")
        number += 1

    return lines


def build_readme_reference(context: RepositoryContext) -> str:
    """Return the existing-README reference block, or an empty string."""
    if not context.has_readme:
        return ""

    excerpt = context.readme_content[:README_REFERENCE_LIMIT]
    if len(context.readme_content) > README_REFERENCE_LIMIT:
        excerpt += TRUNCATION_MARKER

    return (
        "\n\nThe repository already has a README with the following content "
        f"that you can use as a reference:\n\n{excerpt}"
    )


def format_date(value: str | None) -> str:
    """Render an ISO-8601 timestamp as a locale date (``%x``)."""
    if not value:
        return "Unknown"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return "Unknown"
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%x")


def compose_prompt(
    context: RepositoryContext,
    badges: BadgeSet,
    template: str,
    sections: SectionSelection,
) -> str:
    """Compose the README generation instruction.

    Args:
        context: Repository context
        badges: Badge set to place at the top of the README
        template: Style template key (see TEMPLATES)
        sections: Enabled sections

    Returns:
        Instruction text
    """
    description = get_template_description(template)
    section_lines = build_section_lines(context, sections)
    formatting = "\n".join(
        f"{i}. {text}" for i, text in enumerate(FORMATTING_INSTRUCTIONS, start=1)
    )

    return (
        "You are a professional technical writer creating a comprehensive README.md file "
        f"for a GitHub repository. Create a {description} with the following information:\n"
        "\n"
        f"Repository Name: {context.name}\n"
        f"Owner: {context.owner}\n"
        f"Description: {context.description}\n"
        f"Programming Languages: {', '.join(context.languages)}\n"
        f"Frameworks/Libraries: {', '.join(context.frameworks)}\n"
        f"Dependencies: {', '.join(context.dependencies)}\n"
        f"Key Files: {', '.join(context.files)}\n"
        f"Stars: {context.stars}\n"
        f"Forks: {context.forks}\n"
        f"Open Issues: {context.open_issues}\n"
        f"Topics: {', '.join(context.topics)}\n"
        f"License: {context.license or 'Not specified'}\n"
        f"Created: {format_date(context.created_at)}\n"
        f"Last Updated: {format_date(context.updated_at)}\n"
        "\n"
        "Include these badges at the top of the README:\n"
        f"{badges.markup}\n"
        "\n"
        "Please include the following sections:\n"
        + "\n".join(section_lines)
        + build_readme_reference(context)
        + "\n\nIMPORTANT FORMATTING INSTRUCTIONS:\n"
        + formatting
    )


def substitute_placeholders(
    text: str,
    context: RepositoryContext,
    badges: BadgeSet,
    template: str,
) -> str:
    """Replace override placeholders with repository values.

    Each placeholder is replaced at its first occurrence only, in the fixed
    PLACEHOLDERS order. Unknown ``{{...}}`` tokens are left as they are.
    """
    values = {
        "{{REPO_NAME}}": context.name,
        "{{OWNER}}": context.owner,
        "{{DESCRIPTION}}": context.description,
        "{{LANGUAGES}}": ", ".join(context.languages),
        "{{FRAMEWORKS}}": ", ".join(context.frameworks),
        "{{DEPENDENCIES}}": ", ".join(context.dependencies),
        "{{BADGES}}": badges.markup,
        "{{TEMPLATE}}": get_template_description(template),
    }
    for placeholder in PLACEHOLDERS:
        text = text.replace(placeholder, values[placeholder], 1)
    return text


def apply_override(
    base_prompt: str,
    override_text: str | None,
    context: RepositoryContext,
    badges: BadgeSet,
    template: str,
    enabled: bool = True,
) -> str:
    """Layer a user override block on top of the derived instruction.

    The override is appended only when enabled and not blank.
    """
    if not enabled or not override_text or not override_text.strip():
        return base_prompt

    custom = substitute_placeholders(override_text, context, badges, template)
    return f"{base_prompt}\n\n{OVERRIDE_HEADER}\n{custom}"


def build_instruction(
    context: RepositoryContext,
    badges: BadgeSet,
    template: str,
    sections: SectionSelection,
    override_text: str | None = None,
    override_enabled: bool = False,
) -> str:
    """Compose the full instruction, including any enabled override block."""
    base = compose_prompt(context, badges, template, sections)
    return apply_override(base, override_text, context, badges, template, override_enabled)
