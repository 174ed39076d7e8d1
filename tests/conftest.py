"""Shared pytest fixtures for readmegen tests.

Fixtures are organized by category:
- Environment fixtures: Isolation from real credentials and config files
- Payload fixtures: Raw GitHub API data
- Context fixtures: Pre-built repository contexts for renderers and prompts
"""

from dataclasses import replace
from pathlib import Path

import pytest

from readmegen.models.repository import (
    Contributor,
    RawRepositoryData,
    Release,
    RepositoryContext,
)
from tests.fixtures import (
    OWNER,
    contents_listing,
    contributors,
    encode_content,
    package_json,
    releases,
    repo_record,
)

# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials out of every test."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GROQ_API_KEY", raising=False)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory so no config file is discovered."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def raw_data() -> RawRepositoryData:
    """Return raw payloads for a React project with CI and docs."""
    return RawRepositoryData(
        owner=OWNER,
        repo=repo_record(),
        languages={"JavaScript": 1000, "Python": 200},
        contents=contents_listing(
            "package.json", "README.md", "Dockerfile", ".github/workflows", "docs"
        ),
        releases=releases(3),
        contributors=contributors(2),
        branch_protection={"url": "https://api.github.com/protection"},
        readme=encode_content("# Demo\n\nOld readme.", "README.md"),
        manifest_path="package.json",
        manifest=encode_content(
            package_json({"react": "^18.0.0", "express": "^4.0.0"}, {"jest": "^29.0.0"}),
            "package.json",
        ),
    )


# =============================================================================
# Context Fixtures
# =============================================================================


@pytest.fixture
def demo_context() -> RepositoryContext:
    """Return the demo/alice context used across badge and prompt tests."""
    return RepositoryContext(
        name="demo",
        owner="alice",
        description="A demo project",
        license="MIT",
        topics=("demo",),
        languages=("JavaScript", "Python"),
        language_stats={"JavaScript": 1000, "Python": 200},
        frameworks=("React",),
        dependencies=("react", "express"),
        files=("package.json", "src"),
        stars=42,
        forks=7,
        open_issues=3,
        created_at="2023-01-15T10:00:00Z",
        updated_at="2024-06-01T12:30:00Z",
        releases=(Release(name="First", tag="v1.0.0"),),
        contributors=(Contributor(login="alice", contributions=10), Contributor(login="bob")),
        has_cicd=True,
        has_documentation=False,
    )


@pytest.fixture
def readme_context(demo_context: RepositoryContext) -> RepositoryContext:
    """Return the demo context with an existing README."""
    return replace(demo_context, has_readme=True, readme_content="# Demo\n\nExisting docs.")
