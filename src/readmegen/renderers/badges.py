"""shields.io badge markup for the top of a generated README.

Badge order is fixed: license, stars, forks, issues, top languages,
frameworks, CI/CD, documentation.
"""

from dataclasses import dataclass
from typing import Iterator
from urllib.parse import quote

from readmegen.analyzers.rules import (
    DEFAULT_LANGUAGE_COLOR,
    LANGUAGE_COLORS,
    MAX_TOP_LANGUAGES,
)
from readmegen.models.repository import RepositoryContext

SHIELDS_BASE = "https://img.shields.io"
CICD_BADGE = f"![CI/CD]({SHIELDS_BASE}/badge/CI%2FCD-Configured-success)"
DOCS_BADGE = f"![Docs]({SHIELDS_BASE}/badge/Documentation-Available-success)"


@dataclass(frozen=True)
class BadgeSet:
    """Ordered badge markup strings."""

    badges: tuple[str, ...] = ()

    @property
    def markup(self) -> str:
        """All badges joined by single spaces."""
        return " ".join(self.badges)

    def __iter__(self) -> Iterator[str]:
        return iter(self.badges)

    def __len__(self) -> int:
        return len(self.badges)

    def __str__(self) -> str:
        return self.markup


def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(value, safe="!~*'()")


def get_language_color(language: str) -> str:
    """Return the badge color for a language (gray when unknown)."""
    return LANGUAGE_COLORS.get(language, DEFAULT_LANGUAGE_COLOR)


def framework_slug(framework: str) -> str:
    """Strip periods and spaces so a framework name fits a badge URL."""
    return framework.replace(".", "").replace(" ", "")


def top_languages(language_stats: dict[str, int], limit: int = MAX_TOP_LANGUAGES) -> list[str]:
    """Return the ``limit`` largest languages by byte count.

    Ties keep the provider's order.
    """
    ranked = sorted(language_stats.items(), key=lambda item: item[1], reverse=True)
    return [language for language, _ in ranked[:limit]]


def license_badge(license_name: str) -> str:
    label = encode_uri_component(license_name.replace(" ", "_"))
    return (
        f"[![License]({SHIELDS_BASE}/badge/License-{label}-blue.svg)]"
        "(https://opensource.org/licenses/)"
    )


def stats_badges(owner: str, name: str) -> list[str]:
    slug = f"{owner}/{name}"
    repo_url = f"https://github.com/{slug}"
    return [
        f"[![GitHub stars]({SHIELDS_BASE}/github/stars/{slug}.svg)]({repo_url}/stargazers)",
        f"[![GitHub forks]({SHIELDS_BASE}/github/forks/{slug}.svg)]({repo_url}/network)",
        f"[![GitHub issues]({SHIELDS_BASE}/github/issues/{slug}.svg)]({repo_url}/issues)",
    ]


def language_badge(language: str) -> str:
    color = get_language_color(language)
    return (
        f"![{language}]({SHIELDS_BASE}/badge/{encode_uri_component(language)}-{color}"
        f"?style=flat&logo={encode_uri_component(language.lower())}&logoColor=white)"
    )


def framework_badge(framework: str) -> str:
    slug = framework_slug(framework)
    return (
        f"![{framework}]({SHIELDS_BASE}/badge/{encode_uri_component(slug)}-informational"
        f"?style=flat&logo={encode_uri_component(slug.lower())}&logoColor=white)"
    )


def compose_badges(context: RepositoryContext) -> BadgeSet:
    """Build the badge set for a repository.

    Args:
        context: Repository context

    Returns:
        BadgeSet in the fixed badge order
    """
    badges: list[str] = []

    if context.license:
        badges.append(license_badge(context.license))

    badges.extend(stats_badges(context.owner, context.name))
    badges.extend(language_badge(lang) for lang in top_languages(context.language_stats))
    badges.extend(framework_badge(fw) for fw in context.frameworks)

    if context.has_cicd:
        badges.append(CICD_BADGE)

    if context.has_documentation:
        badges.append(DOCS_BADGE)

    return BadgeSet(tuple(badges))
