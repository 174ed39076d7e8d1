"""readmegen CLI interface.

Commands:
- check: Validate credentials and libraries
- init: Write a default configuration file
- analyze: Show the facts derived from a repository
- prompt: Print the generation instruction for a repository
- generate: Generate a README for a repository

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines
- --version: Show version and exit
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from readmegen import __version__
from readmegen.config import ReadmeGenConfig, create_default_config, load_config
from readmegen.errors import GenerationServiceError, ReadmeGenError
from readmegen.models.session import SectionSelection, SessionState
from readmegen.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="readmegen",
    help="Generate README files for GitHub repositories with AI",
    add_completion=False,
    no_args_is_help=True,
)

_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"readmegen {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress info messages (warnings and errors only)"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Enable CI mode with JSON log output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """readmegen - AI README generator for GitHub repositories."""
    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        loaded = load_config(config_path=config)
        if loaded.config_path:
            _logger.debug(f"Loaded config from: {loaded.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)

    ctx.obj = loaded


def _config(ctx: typer.Context) -> ReadmeGenConfig:
    return ctx.obj if isinstance(ctx.obj, ReadmeGenConfig) else load_config(auto_discover=False)


# =============================================================================
# Shared options
# =============================================================================

TemplateOption = Annotated[
    str | None,
    typer.Option("--template", "-t", help="Style template (standard, minimal, detailed, ...)"),
]
PresetOption = Annotated[
    str | None,
    typer.Option("--preset", "-p", help="Section preset: minimal, developer, complete"),
]
SectionOption = Annotated[
    list[str] | None,
    typer.Option("--section", "-s", help="Enable only these sections (repeatable)"),
]
SkipSectionOption = Annotated[
    list[str] | None,
    typer.Option("--skip-section", help="Disable a section (repeatable)"),
]
OverrideOption = Annotated[
    Path | None,
    typer.Option(
        "--override-file",
        help="Custom instructions appended to the prompt ({{REPO_NAME}}, {{BADGES}}, ...)",
        exists=True,
        dir_okay=False,
    ),
]
ModelOption = Annotated[
    str | None,
    typer.Option("--model", "-m", help="Generation model id"),
]


def build_session_state(
    config: ReadmeGenConfig,
    template: str | None = None,
    preset: str | None = None,
    sections: list[str] | None = None,
    skip_sections: list[str] | None = None,
    override_file: Path | None = None,
    model: str | None = None,
) -> SessionState:
    """Combine config defaults and CLI options into a session state.

    Precedence for sections: --section, then --preset, then config
    sections, then config preset, then the default selection.
    """
    readme = config.readme

    if sections:
        selection = SectionSelection.from_names(sections)
    elif preset:
        selection = SectionSelection.preset(preset)
    elif readme.sections is not None:
        selection = SectionSelection.from_names(readme.sections)
    elif readme.preset:
        selection = SectionSelection.preset(readme.preset)
    else:
        selection = SectionSelection()

    for section_id in skip_sections or []:
        selection = selection.with_section(section_id, False)

    override_path = override_file or (Path(readme.override_file) if readme.override_file else None)
    override_text = override_path.read_text(encoding="utf-8") if override_path else ""

    return SessionState(
        template=template or readme.template,
        sections=selection,
        model=model or config.llm.model,
        override_enabled=bool(override_text.strip()),
        override_text=override_text,
    )


def _make_session(config: ReadmeGenConfig, state: SessionState):
    from readmegen.github.client import GitHubGateway
    from readmegen.llm.client import create_client
    from readmegen.pipeline import ReadmeSession

    session = ReadmeSession(
        gateway=GitHubGateway(config.github),
        generator=create_client(config.llm),
        state=state,
    )
    session.set_template(state.template)
    return session


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON")] = False,
    verify: Annotated[
        bool,
        typer.Option("--verify", help="Make a minimal live request to Groq"),
    ] = False,
) -> None:
    """Validate credentials and libraries.

    Exit codes:
        0: Everything available
        1: A required prerequisite is missing
        2: Only optional prerequisites missing (warnings)
    """
    from readmegen.utils.preflight import PreflightChecker

    config = _config(ctx)
    result = PreflightChecker().check_all(
        github_token=config.github.token,
        groq_api_key=config.llm.api_key,
        model=config.llm.model,
        verify=verify,
    )

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo("\n🔍 Preflight Check Results\n")
        for check_result in result.checks:
            status = "✅" if check_result.available else "❌"
            version_str = f" ({check_result.version})" if check_result.version else ""
            required_str = " [required]" if check_result.required else " [optional]"
            typer.echo(f"  {status} {check_result.name}{version_str}{required_str}")
            typer.echo(f"     └─ {check_result.message}")
        typer.echo()

    if result.errors:
        if not json_output:
            typer.echo("❌ Preflight check FAILED")
            for error in result.errors:
                typer.echo(f"   • {error}")
        raise typer.Exit(1)
    if result.warnings:
        if not json_output:
            typer.echo("⚠️  Preflight check passed with WARNINGS")
            for warning in result.warnings:
                typer.echo(f"   • {warning}")
        raise typer.Exit(2)
    if not json_output:
        typer.echo("✅ All preflight checks passed")
    raise typer.Exit(0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing config")] = False,
) -> None:
    """Write a default configuration to ./.readmegen/config.yaml."""
    config_dir = Path(".readmegen")
    config_dir.mkdir(exist_ok=True)
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config())
    _logger.info(f"Created config: {config_file}")
    typer.echo(f"\n✅ readmegen configuration initialized: {config_file}")
    raise typer.Exit(0)


# =============================================================================
# analyze command
# =============================================================================


@app.command()
def analyze(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="GitHub repository URL")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the facts derived from a repository."""
    config = _config(ctx)
    session = _make_session(config, SessionState())

    async def run() -> None:
        try:
            await session.analyze(url)
        finally:
            await session.gateway.aclose()

    try:
        asyncio.run(run())
    except ReadmeGenError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    analysis = session.analysis
    context = analysis.context

    if json_output:
        data = context.to_dict()
        data["has_branch_protection"] = analysis.has_branch_protection
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"\n📦 {context.full_name}")
    if context.description:
        typer.echo(f"   {context.description}")
    typer.echo(f"   Languages:   {', '.join(context.languages) or '-'}")
    typer.echo(f"   Frameworks:  {', '.join(context.frameworks) or '-'}")
    typer.echo(f"   Stars: {context.stars}  Forks: {context.forks}  Issues: {context.open_issues}")
    typer.echo(f"   License:     {context.license or 'Not specified'}")
    typer.echo(f"   CI/CD:       {'yes' if context.has_cicd else 'no'}")
    typer.echo(f"   Docs:        {'yes' if context.has_documentation else 'no'}")
    typer.echo(f"   README:      {'yes' if context.has_readme else 'no'}")
    typer.echo(f"   Protected:   {'yes' if analysis.has_branch_protection else 'no'}")
    if context.releases:
        typer.echo(f"   Releases:    {', '.join(r.tag for r in context.releases)}")
    if context.contributors:
        typer.echo(f"   Contributors: {', '.join(c.login for c in context.contributors)}")


# =============================================================================
# prompt command
# =============================================================================


@app.command()
def prompt(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="GitHub repository URL")],
    template: TemplateOption = None,
    preset: PresetOption = None,
    section: SectionOption = None,
    skip_section: SkipSectionOption = None,
    override_file: OverrideOption = None,
) -> None:
    """Print the generation instruction for a repository."""
    config = _config(ctx)

    try:
        state = build_session_state(
            config, template, preset, section, skip_section, override_file
        )
        session = _make_session(config, state)
    except (ValueError, OSError) as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    async def run() -> str:
        try:
            await session.analyze(url)
        finally:
            await session.gateway.aclose()
        return session.build_instruction()

    try:
        instruction = asyncio.run(run())
    except ReadmeGenError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(instruction)


# =============================================================================
# generate command
# =============================================================================


@app.command()
def generate(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="GitHub repository URL")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (overrides config)"),
    ] = None,
    template: TemplateOption = None,
    preset: PresetOption = None,
    section: SectionOption = None,
    skip_section: SkipSectionOption = None,
    override_file: OverrideOption = None,
    model: ModelOption = None,
    stream: Annotated[
        bool,
        typer.Option("--stream/--no-stream", help="Echo the README to stdout as it arrives"),
    ] = True,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the README without writing a file"),
    ] = False,
) -> None:
    """Generate a README for a repository.

    Exit codes:
        0: README generated
        1: Error (invalid URL, lookup failure, missing key, generation failure)
    """
    config = _config(ctx)
    output_path = output or Path(config.readme.output)

    try:
        state = build_session_state(
            config, template, preset, section, skip_section, override_file, model
        )
        session = _make_session(config, state)
        session.set_model(state.model)
    except (ValueError, OSError) as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    for warning in config.llm.validate():
        _logger.warning(warning)

    def echo_fragment(fragment: str) -> None:
        typer.echo(fragment, nl=False)

    async def run() -> str | None:
        try:
            await session.analyze(url)
        finally:
            await session.gateway.aclose()
        _logger.info(f"Generating README with {state.model}...")
        return await session.generate(on_fragment=echo_fragment if stream else None)

    try:
        text = asyncio.run(run())
    except GenerationServiceError as e:
        if stream and e.partial_text:
            typer.echo()
        _logger.error(str(e))
        if e.partial_text:
            _logger.warning(f"Kept {len(e.partial_text)} characters generated before the failure")
            if not stream:
                typer.echo(e.partial_text)
        raise typer.Exit(1)
    except ReadmeGenError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    if text is None:
        _logger.warning("Generation was superseded; nothing written")
        raise typer.Exit(1)

    if stream:
        typer.echo()
    elif dry_run:
        typer.echo(text)

    if dry_run:
        _logger.info("Dry run complete - no files written")
        raise typer.Exit(0)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    _logger.structured(
        logging.INFO,
        "README written",
        path=str(output_path),
        chars=len(text),
        model=state.model,
        version=len(session.state.history),
    )
    typer.echo(f"\n📄 README written to: {output_path}")
    raise typer.Exit(0)


if __name__ == "__main__":
    app()
