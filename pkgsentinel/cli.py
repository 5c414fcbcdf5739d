"""CLI entry point: pkgsentinel.

Subcommands:
    pkgsentinel scan ~/code                      # Table of projects and their exposure
    pkgsentinel scan ~/code --json               # Same, as JSON
    pkgsentinel upgrade ~/code apps/web          # Bump + install one project
    pkgsentinel commit ~/code apps/web           # git add/commit/push the fix
    pkgsentinel checkout ~/code apps/web --production
    pkgsentinel serve --port 8000                # HTTP API
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import sys
from pathlib import Path

import click

from pkgsentinel.core.config import Settings, load_settings
from pkgsentinel.core.logging import setup_logging
from pkgsentinel.engines.project_scanner.models import ProjectStatus
from pkgsentinel.engines.project_scanner.scanner import ProjectScanner
from pkgsentinel.engines.remediation.executor import ActionResult, RemediationExecutor
from pkgsentinel.exceptions import ScanError


def _unknown(value: object) -> str:
    return "?" if value is None else str(value)


def _format_status(status: ProjectStatus) -> list[str]:
    lines = [f"  {status.display_path}  [{status.package_manager.value}]"]
    branch = f"    branch: {_unknown(status.current_branch)}"
    branch += f"  uncommitted: {_unknown(status.uncommitted_file_count)}"
    if status.default_branch:
        branch += f"  {status.default_branch}: -{_unknown(status.commits_behind_default)}"
    if status.production_branch:
        branch += f"  {status.production_branch}: -{_unknown(status.commits_behind_production)}"
    lines.append(branch)
    if status.manifest_error:
        lines.append(f"    manifest error: {status.manifest_error}")
    for name, spec in status.declared_versions.items():
        if status.vulnerable_flags.get(name):
            target = status.proposed_safe_versions.get(name, "?")
            lines.append(f"    [!] {name} {spec} -> {target}")
        else:
            lines.append(f"    [+] {name} {spec}")
    return lines


def _run_scan(settings: Settings, root: str) -> list[ProjectStatus]:
    try:
        return asyncio.run(ProjectScanner(settings).scan(root))
    except ScanError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _find_project(statuses: list[ProjectStatus], root: str, project: str) -> ProjectStatus:
    """Match *project* against display paths, manifest paths or project directories."""
    wanted = {project, project.rstrip("/"), f"{project.rstrip('/')}/package.json"}
    as_path = (Path(root) / project).expanduser().resolve()
    for status in statuses:
        if status.display_path in wanted or status.path == str(as_path):
            return status
        if str(status.directory) in (str(as_path), project):
            return status
    click.echo(f"Error: no project matching '{project}' under {root}", err=True)
    sys.exit(1)


def _report(result: ActionResult) -> None:
    if result.success:
        click.echo(result.message)
    else:
        click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """PkgSentinel: find and fix projects exposed to the React/Next.js RSC advisories."""
    setup_logging("DEBUG" if verbose else None)
    ctx.obj = load_settings()


@main.command("scan")
@click.argument("root", default=".")
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Directory depth bound")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def scan(settings: Settings, root: str, max_depth: int | None, as_json: bool) -> None:
    """Scan ROOT for package.json projects."""
    if max_depth is not None:
        settings = dataclasses.replace(settings, max_depth=max_depth)
    statuses = _run_scan(settings, root)

    if as_json:
        click.echo(json.dumps([s.to_dict() for s in statuses], indent=2))
        return
    if not statuses:
        click.echo("No projects found.")
        return

    vulnerable = sum(1 for s in statuses if s.is_vulnerable)
    click.echo(f"Found {len(statuses)} project(s), {vulnerable} vulnerable\n")
    for status in statuses:
        for line in _format_status(status):
            click.echo(line)
        click.echo()


@main.command("upgrade")
@click.argument("root")
@click.argument("project")
@click.pass_obj
def upgrade(settings: Settings, root: str, project: str) -> None:
    """Bump vulnerable dependencies of PROJECT and reinstall."""
    status = _find_project(_run_scan(settings, root), root, project)
    _report(asyncio.run(RemediationExecutor(settings).upgrade(status)))


@main.command("commit")
@click.argument("root")
@click.argument("project")
@click.pass_obj
def commit(settings: Settings, root: str, project: str) -> None:
    """Commit and push all changes of PROJECT."""
    status = _find_project(_run_scan(settings, root), root, project)
    _report(asyncio.run(RemediationExecutor(settings).commit_and_push(status)))


@main.command("checkout")
@click.argument("root")
@click.argument("project")
@click.option("--production", is_flag=True, help="Use the production branch instead of main/master")
@click.pass_obj
def checkout(settings: Settings, root: str, project: str, production: bool) -> None:
    """Check out and pull the default (or production) branch of PROJECT."""
    status = _find_project(_run_scan(settings, root), root, project)
    executor = RemediationExecutor(settings)
    if production:
        _report(asyncio.run(executor.checkout_production(status)))
    else:
        _report(asyncio.run(executor.checkout_default(status)))


@main.command("serve")
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
def serve(host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("pkgsentinel.api:create_app", factory=True, host=host, port=port)


if __name__ == "__main__":
    main()
