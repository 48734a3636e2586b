"""Command-line interface for Lens Reviewer."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lens_reviewer import __version__
from lens_reviewer.agents.definitions import (
    AgentDefinition,
    DefinitionError,
    UnknownAgentError,
    all_definitions,
    get_definition,
    load_definitions,
)
from lens_reviewer.agents.llm import LLMGeneralReviewer
from lens_reviewer.agents.llm_client import LLMClient, LLMConfig
from lens_reviewer.collect import GitError, changed_files, iter_source_files, load_sources
from lens_reviewer.config import Config, load_config, validate_config
from lens_reviewer.formatter import MarkdownFormatter, format_report_as_json
from lens_reviewer.lenses import get_domain
from lens_reviewer.models.review import Report
from lens_reviewer.orchestrator.pipeline import PipelineConfig, ReviewPipeline
from lens_reviewer.orchestrator.registry import CapabilityRegistry

# Diagnostics go to stderr so stdout carries only the report
console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_extra_definitions(config: Config) -> dict[str, AgentDefinition]:
    if not config.review.agents_dir:
        return {}
    return load_definitions(Path(config.review.agents_dir))


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """Lens Reviewer - layered domain review with general-review delegation."""
    setup_logging(verbose)


@cli.command("review")
@click.argument("paths", nargs=-1, type=click.Path(exists=True))
@click.option("--agent", "agent_name", help="Agent definition to run")
@click.option("--changed", is_flag=True, help="Review files git reports as modified")
@click.option("--base", default="HEAD", show_default=True, help="Git ref for --changed")
@click.option("--output", type=click.Choice(["markdown", "json"]), help="Report format")
@click.option("--no-delegate", is_flag=True, help="Skip delegation; use the local general review")
@click.option("--delegate", "delegate_target", help="Capability to delegate to (plugin:agent)")
@click.option("--fail-on-findings", is_flag=True, help="Exit 1 when the report has findings")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def review(
    paths: tuple[str, ...],
    agent_name: str | None,
    changed: bool,
    base: str,
    output: str | None,
    no_delegate: bool,
    delegate_target: str | None,
    fail_on_findings: bool,
    config_path: str | None,
) -> None:
    """Review source files with a domain reviewer agent.

    PATHS may be files or directories; with --changed, git's modified and
    untracked files in the current directory are reviewed instead.
    """
    report = asyncio.run(
        review_async(
            paths=list(paths),
            agent_name=agent_name,
            changed=changed,
            base=base,
            output=output,
            no_delegate=no_delegate,
            delegate_target=delegate_target,
            config_path=Path(config_path) if config_path else None,
        )
    )
    if fail_on_findings and report.has_findings:
        sys.exit(1)


def build_registry(config: Config, client: LLMClient | None) -> CapabilityRegistry:
    """Registry with the LLM capability registered when a client is available."""
    registry = CapabilityRegistry()
    if client is not None:
        registry.register(
            config.llm.capability,
            LLMGeneralReviewer(client, name=config.llm.capability),
        )
    return registry


async def review_async(
    paths: list[str],
    agent_name: str | None = None,
    changed: bool = False,
    base: str = "HEAD",
    output: str | None = None,
    no_delegate: bool = False,
    delegate_target: str | None = None,
    config_path: Path | None = None,
) -> Report:
    """Async implementation of the review command."""
    config = load_config(config_path)
    errors = validate_config(config)
    if errors:
        for error in errors:
            console.print(f"[red]Config error:[/red] {error}")
        sys.exit(1)

    try:
        definition = get_definition(
            agent_name or config.review.default_agent,
            _load_extra_definitions(config),
        )
    except (DefinitionError, UnknownAgentError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    domain = get_domain(definition.domain)
    try:
        if changed:
            candidates = [
                p for p in changed_files(Path.cwd(), base) if p.suffix.lower() in domain.suffixes
            ]
        else:
            candidates = iter_source_files(
                paths or ["."], domain.suffixes, recursive=config.review.recursive
            )
    except GitError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    files = load_sources(candidates, root=Path.cwd())
    if not files:
        console.print(f"[yellow]No {domain.name} files to review[/yellow]")

    console.print(
        f"🔍 Reviewing {len(files)} files with [bold]{definition.name}[/bold]..."
    )

    pipeline_config = PipelineConfig(
        delegation_enabled=config.delegation.enabled and not no_delegate,
        target_override=delegate_target or config.delegation.target,
        delegate_timeout_seconds=config.delegation.timeout_seconds,
    )

    client = None
    if config.llm.enabled and pipeline_config.delegation_enabled:
        client = LLMClient(
            LLMConfig(
                api_key=config.llm.api_key,
                base_url=config.llm.base_url,
                model=config.llm.model,
                timeout=config.llm.timeout_seconds,
            )
        )
    try:
        pipeline = ReviewPipeline(
            definition,
            registry=build_registry(config, client),
            config=pipeline_config,
        )
        report = await pipeline.run(files)
    finally:
        if client is not None:
            await client.close()

    general = report.general_source if report.delegated else "local fallback"
    console.print(
        f"✅ Review complete: {len(report.domain_findings)} domain, "
        f"{len(report.general_findings)} general findings (general review: {general})"
    )

    output_format = output or config.output.format
    if output_format == "json":
        click.echo(json.dumps(format_report_as_json(report), indent=2))
    else:
        formatter = MarkdownFormatter(include_metadata=config.output.include_metadata)
        click.echo(formatter.format_report(report), nl=False)

    return report


@cli.group("agents")
def agents_group() -> None:
    """Agent definition commands."""
    pass


@agents_group.command("list")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def agents_list(config_path: str | None) -> None:
    """List available reviewer agents."""
    config = load_config(Path(config_path) if config_path else None)
    try:
        definitions = all_definitions(_load_extra_definitions(config))
    except DefinitionError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    table = Table(title="Reviewer Agents")
    table.add_column("Name")
    table.add_column("Domain")
    table.add_column("Lenses")
    table.add_column("Delegate")

    for definition in definitions.values():
        table.add_row(
            definition.name,
            definition.domain,
            ", ".join(definition.lenses),
            definition.delegate or "-",
        )

    Console().print(table)


@agents_group.command("show")
@click.argument("name")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def agents_show(name: str, config_path: str | None) -> None:
    """Show an agent's lenses and their checks."""
    config = load_config(Path(config_path) if config_path else None)
    try:
        definition = get_definition(name, _load_extra_definitions(config))
    except (DefinitionError, UnknownAgentError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    out = Console()
    out.print(f"\n[bold]{definition.name}[/bold] ({definition.domain})")
    if definition.description:
        out.print(definition.description)
    out.print(f"Delegates to: {definition.delegate or 'nothing (local review only)'}\n")

    domain = get_domain(definition.domain)
    table = Table(title="Checklist")
    table.add_column("Lens")
    table.add_column("Rule")
    table.add_column("Confidence", justify="right")
    table.add_column("Check")
    for lens_name in definition.lenses:
        for check in domain.get_lens(lens_name).checks:
            table.add_row(lens_name, check.rule_id, str(check.confidence), check.description)
    out.print(table)


@cli.group("config")
def config_group() -> None:
    """Configuration commands."""
    pass


@config_group.command("validate")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def config_validate(config_path: str | None) -> None:
    """Validate configuration file."""
    try:
        config = load_config(Path(config_path) if config_path else None)
        errors = validate_config(config)

        if errors:
            console.print("[red]Configuration is invalid:[/red]")
            for error in errors:
                console.print(f"  • {error}")
            sys.exit(1)
        else:
            console.print("[green]✓ Configuration is valid[/green]")
    except Exception as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)


@config_group.command("show")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def config_show(config_path: str | None) -> None:
    """Show current configuration."""
    config = load_config(Path(config_path) if config_path else None)
    out = Console()

    out.print("\n[bold]Current Configuration[/bold]\n")
    out.print(f"[bold]Default agent:[/bold] {config.review.default_agent}")
    out.print(f"[bold]Agents dir:[/bold] {config.review.agents_dir or '-'}")
    out.print(
        f"[bold]Delegation:[/bold] {'enabled' if config.delegation.enabled else 'disabled'}"
        f" (target: {config.delegation.target or 'per agent'},"
        f" timeout: {config.delegation.timeout_seconds}s)"
    )
    llm_state = "configured" if config.llm.enabled else "no API key"
    out.print(
        f"[bold]LLM capability:[/bold] {config.llm.capability} -> "
        f"{config.llm.base_url} ({config.llm.model}, {llm_state})"
    )
    out.print(f"[bold]Output:[/bold] {config.output.format}")


if __name__ == "__main__":
    cli()
