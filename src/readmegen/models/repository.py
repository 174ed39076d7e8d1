"""Repository entities built from GitHub API payloads.

RawRepositoryData carries the provider responses exactly as received;
RepositoryContext is the canonical record derived from them by
``readmegen.analyzers.facts.build_context``.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Release:
    """A published release.

    Attributes:
        name: Release title (may be None when the release is untitled)
        tag: Git tag name
        date: Publication timestamp (ISO-8601)
    """

    name: str | None
    tag: str
    date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "tag": self.tag, "date": self.date}


@dataclass(frozen=True)
class Contributor:
    """A repository contributor.

    Attributes:
        login: GitHub login
        contributions: Number of contributions
        url: Profile URL
    """

    login: str
    contributions: int = 0
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"login": self.login, "contributions": self.contributions, "url": self.url}


@dataclass(frozen=True)
class RepositoryContext:
    """Canonical derived-fact record describing one analyzed repository.

    Sequences are tuples in provider order. ``frameworks`` is in detection
    order and never holds duplicates. ``readme_content`` is non-empty exactly
    when ``has_readme`` is True.
    """

    # Identity
    name: str
    owner: str
    description: str = ""
    homepage: str | None = None
    license: str | None = None
    topics: tuple[str, ...] = ()
    default_branch: str = "main"

    # Classification
    languages: tuple[str, ...] = ()
    language_stats: dict[str, int] = field(default_factory=dict, hash=False)
    frameworks: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()

    # Structure
    files: tuple[str, ...] = ()

    # Activity
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    open_issues: int = 0
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None
    releases: tuple[Release, ...] = ()
    contributors: tuple[Contributor, ...] = ()

    # Flags
    has_cicd: bool = False
    has_documentation: bool = False
    has_readme: bool = False
    is_template: bool = False
    is_archived: bool = False
    has_issues: bool = True
    has_wiki: bool = False

    # Content
    readme_content: str = ""

    def __post_init__(self) -> None:
        if bool(self.readme_content) != self.has_readme:
            raise ValueError("readme_content must be set if and only if has_readme is True")

    @property
    def full_name(self) -> str:
        """Return ``owner/name``."""
        return f"{self.owner}/{self.name}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "name": self.name,
            "owner": self.owner,
            "description": self.description,
            "homepage": self.homepage,
            "license": self.license,
            "topics": list(self.topics),
            "default_branch": self.default_branch,
            "languages": list(self.languages),
            "language_stats": dict(self.language_stats),
            "frameworks": list(self.frameworks),
            "dependencies": list(self.dependencies),
            "dev_dependencies": list(self.dev_dependencies),
            "files": list(self.files),
            "stars": self.stars,
            "forks": self.forks,
            "watchers": self.watchers,
            "open_issues": self.open_issues,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "pushed_at": self.pushed_at,
            "releases": [r.to_dict() for r in self.releases],
            "contributors": [c.to_dict() for c in self.contributors],
            "has_cicd": self.has_cicd,
            "has_documentation": self.has_documentation,
            "has_readme": self.has_readme,
            "is_template": self.is_template,
            "is_archived": self.is_archived,
            "has_issues": self.has_issues,
            "has_wiki": self.has_wiki,
        }


@dataclass
class RawRepositoryData:
    """Provider payloads for one repository, before any derivation.

    Secondary payloads hold their degraded defaults when the lookup failed.

    Attributes:
        owner: Repository owner parsed from the URL
        repo: Repository record (``GET /repos/{owner}/{repo}``)
        languages: Language -> byte count mapping
        contents: Top-level content listing entries
        releases: Release records (empty on failure)
        contributors: Contributor records (empty on failure)
        branch_protection: Branch protection record (None when absent)
        readme: Content record for the README (None when absent)
        manifest_path: Name of the manifest file that was fetched
        manifest: Content record for the manifest (None when absent)
    """

    owner: str
    repo: dict[str, Any]
    languages: dict[str, int] = field(default_factory=dict)
    contents: list[dict[str, Any]] = field(default_factory=list)
    releases: list[dict[str, Any]] = field(default_factory=list)
    contributors: list[dict[str, Any]] = field(default_factory=list)
    branch_protection: dict[str, Any] | None = None
    readme: dict[str, Any] | None = None
    manifest_path: str | None = None
    manifest: dict[str, Any] | None = None


@dataclass(frozen=True)
class RepositoryAnalysis:
    """Result of analyzing a repository.

    Branch protection is tracked next to the context rather than inside it.
    """

    context: RepositoryContext
    has_branch_protection: bool = False
