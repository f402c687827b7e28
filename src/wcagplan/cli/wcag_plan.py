"""WCAG Plan (wcag-plan) - conformance assessment and remediation roadmaps."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console

from .. import __version__
from ..errors import WcagPlanError

console = Console(stderr=True)

LEVEL_CHOICE = click.Choice(["A", "AA", "AAA"])


def _load(ctx: click.Context, input_path: str) -> tuple[dict, list, list]:
    """Resolve config and load batches; exits 1 on bad config or bad input."""
    from ..compliance.hierarchy import load_criteria_tables
    from ..compliance.loader import load_batches
    from ..core.config import get_effective_config, get_target_level
    from ..models.evaluation import flatten_batches

    config = get_effective_config(Path(ctx.obj["project"]), ctx.obj.get("overrides"))
    try:
        load_criteria_tables(config["wcag"]["version"])
        get_target_level(config)
        batches = load_batches(Path(input_path))
    except WcagPlanError as exc:
        console.print(f"  [red]ERROR[/red] {exc}")
        ctx.exit(1)
    evaluations = flatten_batches(batches)
    console.print(
        f"  [dim]Loaded {len(evaluations)} evaluations from {len(batches)} batch(es)[/dim]"
    )
    return config, batches, evaluations


def _target(config: dict, target: str | None) -> str:
    return target or config["wcag"]["target_level"]


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.version_option(__version__, prog_name="wcag-plan")
@click.pass_context
@click.option("--project", "-p", type=click.Path(exists=True), default=".", help="Project path")
@click.option("--wcag-version", type=str, help="WCAG version override")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def plan_cli(ctx: click.Context, project: str, wcag_version: str | None, verbose: bool) -> None:
    """WCAG Plan - assess conformance and plan remediation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["project"] = project
    ctx.obj["overrides"] = {"wcag": {"version": wcag_version}} if wcag_version else None


@plan_cli.command()
@click.pass_context
@click.argument("input_path", type=click.Path(exists=True))
@click.option("--target", "-t", type=LEVEL_CHOICE, help="Target level for --ci")
@click.option("--ci", is_flag=True, help="CI mode: exit 1 when the target level is not met")
def assess(ctx: click.Context, input_path: str, target: str | None, ci: bool) -> None:
    """Report the conformance level the evaluations achieve."""
    from ..core.assessor import assess_level, get_pass_rate, is_compliant_for_level

    config, _, evaluations = _load(ctx, input_path)
    version = config["wcag"]["version"]
    target_level = _target(config, target)

    level = assess_level(evaluations, version)
    meets_target = is_compliant_for_level(evaluations, target_level, version)
    _echo_json({
        "level": level.value,
        "targetLevel": target_level,
        "meetsTarget": meets_target,
        "passRate": round(get_pass_rate(evaluations), 1),
    })

    if meets_target:
        console.print(f"  [green]PASS[/green] WCAG {version} level {level.value}")
    else:
        console.print(f"  [yellow]WARN[/yellow] Level {level.value} is below target {target_level}")

    if ci:
        sys.exit(0 if meets_target else 1)


@plan_cli.command()
@click.pass_context
@click.argument("input_path", type=click.Path(exists=True))
@click.option("--target", "-t", type=LEVEL_CHOICE)
def gaps(ctx: click.Context, input_path: str, target: str | None) -> None:
    """List unmet criteria for the target level, highest priority first."""
    from ..core.config import get_policy
    from ..core.gaps import find_gaps

    config, _, evaluations = _load(ctx, input_path)
    result = find_gaps(
        evaluations,
        _target(config, target),
        version=config["wcag"]["version"],
        policy=get_policy(config),
    )
    _echo_json([g.model_dump(mode="json") for g in result])


@plan_cli.command()
@click.pass_context
@click.argument("input_path", type=click.Path(exists=True))
@click.option("--target", "-t", type=LEVEL_CHOICE)
def roadmap(ctx: click.Context, input_path: str, target: str | None) -> None:
    """Build a phased remediation roadmap with timeline and budget."""
    from ..core.config import get_policy
    from ..core.roadmap import build_roadmap

    config, _, evaluations = _load(ctx, input_path)
    result = build_roadmap(
        evaluations,
        _target(config, target),
        now=datetime.now(),
        version=config["wcag"]["version"],
        policy=get_policy(config),
    )
    _echo_json(result.model_dump(mode="json"))
    console.print("  [dim]Budget and timeline figures are planning estimates.[/dim]")


@plan_cli.command()
@click.pass_context
@click.argument("input_path", type=click.Path(exists=True))
@click.option("--subject", "-s", type=str, help="Site or application being certified")
@click.option("--auditor", "-a", type=str, help="Auditor name")
@click.option("--body", type=str, help="Certifying body")
@click.option("--target", "-t", type=LEVEL_CHOICE)
def certify(
    ctx: click.Context,
    input_path: str,
    subject: str | None,
    auditor: str | None,
    body: str | None,
    target: str | None,
) -> None:
    """Issue a compliance certificate."""
    from ..core.certificate import generate_certificate

    config, batches, evaluations = _load(ctx, input_path)
    certificate = generate_certificate(
        evaluations,
        subject or config["project"].get("subject") or config["project"].get("name", ""),
        auditor or config["certification"].get("auditor", ""),
        body or config["certification"]["body"],
        now=datetime.now(),
        target_level=_target(config, target),
        version=config["wcag"]["version"],
        batches=batches,
    )
    _echo_json(certificate.model_dump(mode="json"))
    colour = "green" if certificate.status.value == "approved" else "red"
    console.print(f"  [{colour}]{certificate.status.value.upper()}[/{colour}] {certificate.id}")


@plan_cli.command()
@click.pass_context
@click.argument("input_path", type=click.Path(exists=True))
@click.option("--target", "-t", type=LEVEL_CHOICE)
@click.option("--subject", "-s", type=str, help="Include a certificate for this subject")
@click.option("--auditor", "-a", type=str, default="", help="Auditor name")
def report(
    ctx: click.Context,
    input_path: str,
    target: str | None,
    subject: str | None,
    auditor: str,
) -> None:
    """Print the combined roadmap and certificate report."""
    from ..core.certificate import generate_certificate
    from ..core.config import get_policy
    from ..core.report import build_compliance_report
    from ..core.roadmap import build_roadmap

    config, batches, evaluations = _load(ctx, input_path)
    version = config["wcag"]["version"]
    target_level = _target(config, target)
    now = datetime.now()

    plan = build_roadmap(evaluations, target_level, now=now, version=version, policy=get_policy(config))
    certificate = None
    if subject:
        certificate = generate_certificate(
            evaluations,
            subject,
            auditor or config["certification"].get("auditor", ""),
            config["certification"]["body"],
            now=now,
            target_level=target_level,
            version=version,
            batches=batches,
        )
    _echo_json(build_compliance_report(plan, now=now, certification=certificate, version=version))


@plan_cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Initialize WCAG Plan configuration in a project."""
    from ..core.config import initialize_project

    config_path = initialize_project(Path(ctx.obj["project"]))
    console.print(f"  [green]Initialized[/green] {config_path}")


def main() -> None:
    plan_cli()


if __name__ == "__main__":
    main()
