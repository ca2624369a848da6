"""Command-line interface for Cost Guard.

Provides CLI commands for inspecting AWS projects, connecting them to
cost controls, and checking templates against the project budget.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import CONFIG_FILENAME, CostControlConfig, get_resource_limits, load_settings
from .connector import ConnectResult, ProjectConnector
from .estimation import (
    DeploymentValidation,
    apply_required_tags,
    estimate_basic_costs,
    find_default_template,
    load_template,
    validate_budget,
    validate_deployment,
)
from .exceptions import CostGuardError
from .inspection import ProjectProfile, inspect_project

app = typer.Typer(
    name="costguard",
    help="Cost Guard - AWS cost controls for existing projects",
    rich_markup_mode="rich",
)
console = Console()

EXIT_OVER_BUDGET = 3


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Cost Guard - AWS cost controls for existing projects."""
    configure_logging("DEBUG" if verbose else "WARNING")


@app.command()
def inspect(
    path: Path = typer.Argument(Path("."), help="Project directory"),
    as_json: bool = typer.Option(False, "--json", help="Print the profile as JSON"),
) -> None:
    """Inspect a project and show what cost controls would be based on."""
    try:
        profile = inspect_project(str(path))
        if as_json:
            console.print_json(json.dumps(profile.to_dict()))
        else:
            _display_profile(profile)

    except CostGuardError as e:
        console.print(f"[bold red]❌ Inspection failed: {e}[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]💥 Unexpected error: {e}[/bold red]")
        sys.exit(1)


@app.command()
def connect(
    path: Path = typer.Argument(Path("."), help="Project directory"),
    env: str | None = typer.Option(None, help="Environment (dev/staging/qa/prod)"),
    config_path: Path | None = typer.Option(None, "--config", help="Settings YAML file"),
    budget: int | None = typer.Option(None, help="Monthly budget in USD (overrides the estimate)"),
    cost_center: str | None = typer.Option(None, help="CostCenter tag value"),
    owner: str | None = typer.Option(None, help="Owner tag value"),
    alert_email: str | None = typer.Option(None, help="Budget alert email"),
    dry_run: bool = typer.Option(False, help="Show the result without writing files"),
) -> None:
    """Connect an existing project to cost controls."""
    console.print("[bold blue]🔗 Connecting project to cost controls...[/bold blue]")

    try:
        settings = load_settings(
            path,
            config_path,
            environment=env,
            budget=budget,
            cost_center=cost_center,
            owner=owner,
            alert_email=alert_email,
        )
        if logging.getLogger().level > logging.DEBUG:
            logging.getLogger().setLevel(settings.log_level)

        result = ProjectConnector(path, settings).connect(dry_run=dry_run)

        _display_profile(result.profile)
        _display_connect_result(result)

        if dry_run:
            console.print("[bold yellow]🧪 Dry run: no files were written[/bold yellow]")
        else:
            console.print("[bold green]🎉 Cost controls successfully connected![/bold green]")
            console.print(f"1. Review {CONFIG_FILENAME}")
            console.print("2. Run: npm run deploy-with-cost-controls (or costguard estimate)")
            console.print("✅ Your existing code remains unchanged!")

    except CostGuardError as e:
        console.print(f"[bold red]❌ Connection failed: {e}[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]💥 Unexpected error: {e}[/bold red]")
        sys.exit(1)


@app.command()
def estimate(
    template: Path | None = typer.Argument(None, help="CloudFormation template (JSON or YAML)"),
    config_file: Path = typer.Option(Path(CONFIG_FILENAME), help="Cost controls config file"),
    env: str | None = typer.Option(None, help="Override the configured environment"),
    budget: int | None = typer.Option(None, help="Override the configured budget"),
    output_format: str = typer.Option("table", "--format", help="Output format (table/json)"),
    block_exit: bool = typer.Option(False, help="Exit non-zero when guardrails fail"),
) -> None:
    """Estimate monthly cost of a template and check it against the budget."""
    if output_format not in ("table", "json"):
        console.print("[bold red]❌ Output format must be table or json[/bold red]")
        sys.exit(1)

    try:
        config = _load_estimate_config(config_file, env, budget)

        template = template or find_default_template(Path.cwd())
        if template is None:
            _basic_estimate(config, block_exit)
            return

        validation = validate_deployment(load_template(template), config)

        if output_format == "json":
            payload = {"template": str(template), "environment": config.environment, **validation.to_dict()}
            console.print_json(json.dumps(payload))
        else:
            _display_validation(validation, str(template), config)

        if not validation.is_valid and block_exit:
            sys.exit(EXIT_OVER_BUDGET)

    except CostGuardError as e:
        console.print(f"[bold red]❌ Estimation failed: {e}[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]💥 Unexpected error: {e}[/bold red]")
        sys.exit(1)


@app.command()
def tag(
    template: Path = typer.Argument(..., help="CloudFormation template (JSON or YAML)"),
    output: Path | None = typer.Option(None, help="Output file (defaults to <template>.tagged.json)"),
    config_file: Path = typer.Option(Path(CONFIG_FILENAME), help="Cost controls config file"),
) -> None:
    """Write a copy of a template with the mandatory cost tags applied."""
    try:
        config = CostControlConfig.from_file(config_file)
        data = load_template(template)
        if data.get("Resources") is None:
            data["Resources"] = {}
        apply_required_tags(data["Resources"], config)

        output = output or template.with_suffix(".tagged.json")
        output.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        console.print(f"[bold green]🏷️  Tagged template written to: {output}[/bold green]")

    except CostGuardError as e:
        console.print(f"[bold red]❌ Tagging failed: {e}[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]💥 Unexpected error: {e}[/bold red]")
        sys.exit(1)


def _load_estimate_config(config_file: Path, env: str | None, budget: int | None) -> CostControlConfig:
    config = CostControlConfig.from_file(config_file)
    if env and env != config.environment:
        config.environment = env
        config.resource_limits = get_resource_limits(env)
    if budget is not None:
        config.budget = budget
    return config


def _basic_estimate(config: CostControlConfig, block_exit: bool) -> None:
    """Fallback when no template is available."""
    if Path("cdk.json").exists():
        console.print("💡 CDK project detected. Run `cdk synth` for detailed cost estimation.")
    else:
        console.print("⚠️  No template.yaml, template.yml or template.json found")

    # Previously synthesized CDK output still gives the keyword heuristic something to read
    synthesized = "\n".join(
        p.read_text(encoding="utf-8", errors="replace") for p in sorted(Path("cdk.out").glob("*.template.json"))
    )
    check = validate_budget(estimate_basic_costs(synthesized), config.budget)
    status = "✅" if check.is_valid else "⚠️"
    console.print(f"💰 Estimated monthly cost: ${check.estimated_cost:.2f}")
    console.print(f"📊 Budget status: {status} {check.message}")
    if not check.is_valid and block_exit:
        sys.exit(EXIT_OVER_BUDGET)


def _display_profile(profile: ProjectProfile) -> None:
    """Display inspection results table."""
    table = Table(title="Project Analysis")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Project Name", profile.project_name)
    table.add_row("Project Type", profile.project_type.value)
    table.add_row("Infrastructure", profile.infrastructure)
    table.add_row("Resource Patterns", str(len(profile.resource_mentions)))
    table.add_row("Default Budget", f"${profile.budget_estimate_usd}/month")
    table.add_row("Alert Email", profile.alert_email)

    console.print(table)


def _display_connect_result(result: ConnectResult) -> None:
    config = result.config
    console.print(f"   Environment: {config.environment}")
    console.print(f"   Budget: ${config.budget}/month")
    console.print(f"   Deploy command: {result.deploy_command or 'not detected'}")
    for name in result.written:
        console.print(f"   📝 Wrote {name}")


def _display_validation(validation: DeploymentValidation, template: str, config: CostControlConfig) -> None:
    """Display template cost breakdown and guardrail results."""
    table = Table(title=f"Cost Estimate: {template} ({config.environment})")
    table.add_column("Resource", style="cyan")
    table.add_column("Monthly Cost", style="green")

    for resource_id, cost in validation.resource_costs.items():
        table.add_row(resource_id, f"${cost:.2f}")
    table.add_row("[bold]Total[/bold]", f"[bold]${validation.estimated_cost:.2f}[/bold]")

    console.print(table)
    console.print(f"🎯 Budget: ${config.budget}/month (daily ≈ ${validation.estimated_cost / 30:.2f})")

    for violation in validation.violations:
        console.print(f"[bold red]⛔ {violation.type}: {violation.message}[/bold red]")
    for warning in validation.warnings:
        console.print(f"[yellow]⚠️  {warning}[/yellow]")
    for recommendation in validation.recommendations:
        console.print(f"💡 {recommendation}")

    if validation.is_valid:
        console.print("[bold green]✅ Template passes cost guardrails[/bold green]")


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
