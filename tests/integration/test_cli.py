"""Integration tests for readmegen CLI commands."""

import json
from pathlib import Path
from typing import Any, AsyncIterator
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from readmegen import __version__
from readmegen.cli import app
from readmegen.errors import RepositoryLookupError
from readmegen.models.repository import RepositoryAnalysis, RepositoryContext

runner = CliRunner()

DEMO_URL = "https://github.com/alice/demo"


class FakeGateway:
    """Stands in for GitHubGateway; serves one analysis."""

    analysis: RepositoryAnalysis | None = None
    closed = 0

    def __init__(self, config: Any = None) -> None:
        self.config = config

    async def fetch_repository(self, url: str) -> RepositoryAnalysis:
        if self.analysis is None or url != DEMO_URL:
            raise RepositoryLookupError("Repository not found: alice/missing", 404)
        return self.analysis

    async def aclose(self) -> None:
        FakeGateway.closed += 1


async def fragments(*parts: str, fail_after: bool = False) -> AsyncIterator[str]:
    for part in parts:
        yield part
    if fail_after:
        raise ConnectionError("stream dropped")


@pytest.fixture
def fake_gateway(demo_context: RepositoryContext):
    FakeGateway.analysis = RepositoryAnalysis(context=demo_context, has_branch_protection=True)
    FakeGateway.closed = 0
    with patch("readmegen.github.client.GitHubGateway", FakeGateway):
        yield FakeGateway


@pytest.fixture
def groq_key(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    return "gsk-test"


class TestGlobalOptions:
    """Tests for the app callback."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"readmegen {__version__}" in result.output

    def test_missing_config_file(self, workdir: Path) -> None:
        result = runner.invoke(app, ["--config", "nope.yaml", "check"])

        assert result.exit_code != 0


class TestCheck:
    """Tests for `readmegen check`."""

    def test_missing_groq_key_fails(self, workdir: Path) -> None:
        result = runner.invoke(app, ["check", "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout[result.stdout.index("{") :])
        assert data["success"] is False
        assert any("groq-api-key" in e for e in data["errors"])

    def test_missing_token_warns(self, workdir: Path, groq_key: str) -> None:
        result = runner.invoke(app, ["check"])

        assert result.exit_code == 2
        assert "WARNINGS" in result.output

    def test_all_present(self, workdir: Path, groq_key: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp-test")

        result = runner.invoke(app, ["check"])

        assert result.exit_code == 0
        assert "All preflight checks passed" in result.output


class TestInit:
    """Tests for `readmegen init`."""

    def test_creates_config(self, workdir: Path) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (workdir / ".readmegen" / "config.yaml").exists()

    def test_refuses_overwrite(self, workdir: Path) -> None:
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1

    def test_force_overwrite(self, workdir: Path) -> None:
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0


class TestAnalyze:
    """Tests for `readmegen analyze`."""

    def test_summary(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        result = runner.invoke(app, ["analyze", DEMO_URL])

        assert result.exit_code == 0, result.output
        assert "alice/demo" in result.output
        assert "React" in result.output
        assert fake_gateway.closed == 1

    def test_json(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        result = runner.invoke(app, ["analyze", DEMO_URL, "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout[result.stdout.index("{") :])
        assert data["name"] == "demo"
        assert data["frameworks"] == ["React"]
        assert data["has_branch_protection"] is True

    def test_lookup_failure(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        result = runner.invoke(app, ["analyze", "https://github.com/alice/missing"])

        assert result.exit_code == 1
        assert fake_gateway.closed == 1


class TestPrompt:
    """Tests for `readmegen prompt`."""

    def test_prints_instruction(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        result = runner.invoke(
            app,
            ["prompt", DEMO_URL, "--template", "minimal", "-s", "features", "-s", "license"],
        )

        assert result.exit_code == 0, result.output
        assert "Create a Minimal README with essential sections only" in result.output
        assert "3. Features (detailed but concise bullet points)\n4. License Information" in result.output

    def test_preset_and_skip(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        result = runner.invoke(
            app, ["prompt", DEMO_URL, "--preset", "minimal", "--skip-section", "usage"]
        )

        assert result.exit_code == 0
        assert "Usage (with code examples" not in result.output
        assert "Installation (step-by-step" in result.output

    def test_override_file(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        override = workdir / "override.md"
        override.write_text("Target audience: {{OWNER}}'s team")

        result = runner.invoke(app, ["prompt", DEMO_URL, "--override-file", str(override)])

        assert result.exit_code == 0
        assert "ADDITIONAL CUSTOM INSTRUCTIONS:\nTarget audience: alice's team" in result.output

    def test_unknown_section(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        result = runner.invoke(app, ["prompt", DEMO_URL, "-s", "changelog"])

        assert result.exit_code == 1

    def test_config_defaults(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        (workdir / "readmegen.yaml").write_text("readme:\n  template: corporate\n")

        result = runner.invoke(app, ["prompt", DEMO_URL])

        assert result.exit_code == 0
        assert "Corporate style with formal language" in result.output

    def test_missing_override_file_in_config(
        self, workdir: Path, fake_gateway: type[FakeGateway]
    ) -> None:
        """Test a configured override file that does not exist exits cleanly."""
        (workdir / "readmegen.yaml").write_text("readme:\n  override_file: nope.md\n")

        result = runner.invoke(app, ["prompt", DEMO_URL])

        assert result.exit_code == 1
        assert not isinstance(result.exception, FileNotFoundError)


class TestGenerate:
    """Tests for `readmegen generate`."""

    def test_writes_readme(
        self, workdir: Path, fake_gateway: type[FakeGateway], groq_key: str
    ) -> None:
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = fragments("```markdown\n# Demo", "\n\nBody\n```")
            result = runner.invoke(app, ["generate", DEMO_URL])

        assert result.exit_code == 0, result.output
        assert (workdir / "README.md").read_text() == "# Demo\n\nBody"
        assert "# Demo" in result.output
        assert mock_completion.call_args.kwargs["model"] == "groq/mistral-saba-24b"

    def test_output_and_model(
        self, workdir: Path, fake_gateway: type[FakeGateway], groq_key: str
    ) -> None:
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = fragments("# Demo")
            result = runner.invoke(
                app,
                ["generate", DEMO_URL, "-o", "docs/README.md", "--model", "qwen-2.5-32b"],
            )

        assert result.exit_code == 0, result.output
        assert (workdir / "docs" / "README.md").read_text() == "# Demo"
        assert mock_completion.call_args.kwargs["model"] == "groq/qwen-2.5-32b"

    def test_dry_run_writes_nothing(
        self, workdir: Path, fake_gateway: type[FakeGateway], groq_key: str
    ) -> None:
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = fragments("# Demo")
            result = runner.invoke(app, ["generate", DEMO_URL, "--dry-run", "--no-stream"])

        assert result.exit_code == 0
        assert "# Demo" in result.output
        assert not (workdir / "README.md").exists()

    def test_missing_key(self, workdir: Path, fake_gateway: type[FakeGateway]) -> None:
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            result = runner.invoke(app, ["generate", DEMO_URL])

        assert result.exit_code == 1
        mock_completion.assert_not_called()
        assert not (workdir / "README.md").exists()

    def test_disabled_model_rejected(
        self, workdir: Path, fake_gateway: type[FakeGateway], groq_key: str
    ) -> None:
        result = runner.invoke(app, ["generate", DEMO_URL, "--model", "gemma2-9b-it"])

        assert result.exit_code == 1

    def test_stream_failure_keeps_partial(
        self, workdir: Path, fake_gateway: type[FakeGateway], groq_key: str
    ) -> None:
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = fragments("# Par", "tial", fail_after=True)
            result = runner.invoke(app, ["generate", DEMO_URL])

        assert result.exit_code == 1
        assert "# Partial" in result.output
        assert not (workdir / "README.md").exists()

    def test_missing_override_file_in_config(
        self, workdir: Path, fake_gateway: type[FakeGateway], groq_key: str
    ) -> None:
        (workdir / "readmegen.yaml").write_text("readme:\n  override_file: nope.md\n")

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            result = runner.invoke(app, ["generate", DEMO_URL])

        assert result.exit_code == 1
        assert not isinstance(result.exception, FileNotFoundError)
        mock_completion.assert_not_called()
