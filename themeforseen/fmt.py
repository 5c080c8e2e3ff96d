"""CLI output formatting helpers using click.style."""

import click

from themeforseen.detect import default_css_path
from themeforseen.models import ProjectInfo


def success(msg: str) -> None:
    """Green checkmark prefix."""
    click.echo(click.style(" [*] ", fg="green") + msg)


def warn(msg: str) -> None:
    """Yellow warning prefix."""
    click.echo(click.style(" [!] ", fg="yellow") + msg)


def error(msg: str) -> None:
    """Red error prefix, writes to stderr."""
    click.echo(click.style(" [x] ", fg="red") + msg, err=True)


def dim(msg: str) -> None:
    click.echo(click.style(msg, dim=True))


def _row(label: str, value: str) -> None:
    click.echo("  " + click.style(f"{label:<14}", dim=True) + value)


def describe_target(project: ProjectInfo) -> str:
    target = project.css_target
    if target is None:
        return click.style(f"Will create {default_css_path(project.type)}", fg="yellow")
    if target.is_inline:
        return click.style(f"<style> in {target.path}", bold=True)
    return click.style(target.path, bold=True)


def project_report(project: ProjectInfo) -> None:
    """Print the detection summary used by both ``serve`` and ``detect``."""
    _row("Project type:", click.style(project.type.value, bold=True))
    _row("CSS target:", describe_target(project))
    if project.css_files:
        _row("CSS files:", ", ".join(project.css_files))
    if project.has_tailwind:
        _row("Tailwind:", click.style("detected", fg="green"))


def banner(url: str, project: ProjectInfo) -> None:
    """Startup banner printed before the server begins accepting requests."""
    click.echo()
    click.echo("  " + click.style("ThemeForseen Dev Server", fg="yellow", bold=True))
    click.echo()
    _row("Server:", click.style(url, bold=True))
    project_report(project)
    click.echo()
    dim("  Click the lightning bolt in ThemeForseen to apply themes directly!")
    dim("  Press Ctrl+C to stop")
    click.echo()
