"""Repository fact extraction.

Turns raw GitHub payloads into a RepositoryContext: detected frameworks,
CI/CD and documentation presence, dependency lists and decoded README text.
Nothing here performs I/O.
"""

import base64
import binascii
import json
import logging
import re
from typing import Any, Iterable

from readmegen.analyzers.rules import (
    CICD_MARKERS,
    DEPENDENCY_FRAMEWORKS,
    DOCUMENTATION_MARKERS,
    FILE_FRAMEWORK_RULES,
    MANIFEST_FILES,
    MAX_CONTRIBUTORS,
    MAX_RELEASES,
    README_NAMES,
)
from readmegen.errors import RepositoryLookupError
from readmegen.models.repository import (
    Contributor,
    RawRepositoryData,
    Release,
    RepositoryContext,
)

logger = logging.getLogger(__name__)

_REQUIREMENT_NAME = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)")


def detect_frameworks(
    file_names: Iterable[str],
    dependency_names: Iterable[str],
) -> list[str]:
    """Detect frameworks from top-level file names and dependency names.

    File rules are evaluated first, in table order, then dependencies in the
    order given. A framework is reported at most once.

    Args:
        file_names: Top-level file and directory names
        dependency_names: Declared dependency names

    Returns:
        Framework names in detection order
    """
    names = set(file_names)
    frameworks: list[str] = []

    for rule in FILE_FRAMEWORK_RULES:
        if rule.matches(names) and rule.framework not in frameworks:
            frameworks.append(rule.framework)

    for dependency in dependency_names:
        framework = DEPENDENCY_FRAMEWORKS.get(dependency)
        if framework and framework not in frameworks:
            frameworks.append(framework)

    return frameworks


def detect_cicd(file_names: Iterable[str]) -> bool:
    """Return True if any top-level entry is a known CI configuration marker."""
    return any(name in CICD_MARKERS for name in file_names)


def detect_documentation(file_names: Iterable[str]) -> bool:
    """Return True if any top-level entry is a known documentation marker."""
    return any(name in DOCUMENTATION_MARKERS for name in file_names)


def find_readme(contents: list[dict[str, Any]]) -> str | None:
    """Return the path of the first top-level README entry, if any."""
    for entry in contents:
        name = str(entry.get("name", ""))
        if name.lower() in README_NAMES:
            return entry.get("path") or name
    return None


def select_manifest(file_names: Iterable[str]) -> str | None:
    """Return the first supported dependency manifest present in the listing."""
    names = set(file_names)
    for manifest in MANIFEST_FILES:
        if manifest in names:
            return manifest
    return None


def decode_content(payload: dict[str, Any] | None) -> str | None:
    """Decode a GitHub content record to text.

    Args:
        payload: Content record with ``content`` and ``encoding`` keys

    Returns:
        Decoded text, or None when the payload is absent or undecodable
    """
    if not payload:
        return None

    content = payload.get("content")
    if not content:
        return None

    encoding = payload.get("encoding", "base64")
    if encoding != "base64":
        return str(content)

    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.warning("Could not decode %s: %s", payload.get("path", "content"), e)
        return None


def parse_manifest(
    path: str | None,
    payload: dict[str, Any] | None,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Extract dependency names from a manifest content record.

    Supports ``package.json`` (dependencies / devDependencies keys) and
    ``requirements.txt`` (distribution names, all treated as runtime
    dependencies). Never raises.

    Returns:
        Tuple of (dependencies, dev_dependencies)
    """
    text = decode_content(payload)
    if not path or text is None:
        return (), ()

    try:
        if path.endswith("package.json"):
            return _parse_package_json(text)
        if path.endswith("requirements.txt"):
            return _parse_requirements_txt(text), ()
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning("Failed to parse %s: %s", path, e)
        return (), ()

    logger.debug("Unsupported manifest: %s", path)
    return (), ()


def _parse_package_json(text: str) -> tuple[tuple[str, ...], tuple[str, ...]]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("package.json is not an object")
    return (
        _dependency_names(data, "dependencies"),
        _dependency_names(data, "devDependencies"),
    )


def _dependency_names(data: dict[str, Any], key: str) -> tuple[str, ...]:
    section = data.get(key)
    if section is None:
        return ()
    if not isinstance(section, dict):
        raise ValueError(f"package.json '{key}' is not an object")
    return tuple(name for name in section if isinstance(name, str))


def _parse_requirements_txt(text: str) -> tuple[str, ...]:
    names: list[str] = []
    for line in text.splitlines():
        line = line.strip()

        # Comments, blank lines and pip options (-r, -e, --index-url)
        if not line or line.startswith(("#", "-")):
            continue

        match = _REQUIREMENT_NAME.match(line)
        if match:
            name = match.group(1).lower()
            if name not in names:
                names.append(name)
    return tuple(names)


def _as_count(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


def build_context(raw: RawRepositoryData) -> RepositoryContext:
    """Build the canonical repository context from raw payloads.

    Args:
        raw: Provider payloads for one repository

    Returns:
        RepositoryContext with all derived facts

    Raises:
        RepositoryLookupError: If the repository record itself is missing
    """
    repo = raw.repo
    if not repo or not repo.get("name"):
        raise RepositoryLookupError("Repository record is missing or incomplete")

    file_names = [str(entry.get("name", "")) for entry in raw.contents]

    dependencies, dev_dependencies = parse_manifest(raw.manifest_path, raw.manifest)
    frameworks = detect_frameworks(file_names, dependencies)

    readme_content = decode_content(raw.readme) or ""

    license_info = repo.get("license")
    license_name = license_info.get("name") if isinstance(license_info, dict) else None

    releases = tuple(
        Release(name=r.get("name"), tag=r.get("tag_name", ""), date=r.get("published_at"))
        for r in raw.releases[:MAX_RELEASES]
    )
    contributors = tuple(
        Contributor(
            login=c.get("login", ""),
            contributions=_as_count(c.get("contributions")),
            url=c.get("html_url"),
        )
        for c in raw.contributors[:MAX_CONTRIBUTORS]
    )

    context = RepositoryContext(
        name=repo["name"],
        owner=raw.owner,
        description=repo.get("description") or "",
        homepage=repo.get("homepage") or None,
        license=license_name,
        topics=tuple(repo.get("topics") or ()),
        default_branch=repo.get("default_branch") or "main",
        languages=tuple(raw.languages),
        language_stats=dict(raw.languages),
        frameworks=tuple(frameworks),
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
        files=tuple(file_names),
        stars=_as_count(repo.get("stargazers_count")),
        forks=_as_count(repo.get("forks_count")),
        watchers=_as_count(repo.get("watchers_count")),
        open_issues=_as_count(repo.get("open_issues_count")),
        created_at=repo.get("created_at"),
        updated_at=repo.get("updated_at"),
        pushed_at=repo.get("pushed_at"),
        releases=releases,
        contributors=contributors,
        has_cicd=detect_cicd(file_names),
        has_documentation=detect_documentation(file_names),
        has_readme=bool(readme_content),
        is_template=bool(repo.get("is_template", False)),
        is_archived=bool(repo.get("archived", False)),
        has_issues=bool(repo.get("has_issues", True)),
        has_wiki=bool(repo.get("has_wiki", False)),
        readme_content=readme_content,
    )

    logger.debug(
        "Built context for %s: %d languages, %d frameworks, %d dependencies",
        context.full_name,
        len(context.languages),
        len(context.frameworks),
        len(context.dependencies),
    )

    return context
