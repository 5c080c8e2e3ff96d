"""ThemeForseen CLI entry point using Click.

Commands:
    theme-forseen                                  — same as ``serve``
    theme-forseen serve [--port N] [--host H]      — start the dev server
    theme-forseen detect [--json]                  — print what would be written where
    theme-forseen config show                      — show effective settings
    theme-forseen config set-target PATH [--inline] — pin the CSS target
    theme-forseen config clear-target              — go back to auto-detection
    theme-forseen --version                        — print the version

The server lets ThemeForseen's lightning-bolt button write CSS variables
straight into the project's stylesheet.  It detects the project type
(Next.js, Vite, Astro, ...) and picks the CSS file on its own.
"""

import json
from pathlib import Path

import click

from themeforseen import __version__
from themeforseen.paths import project_root


def _get_root(ctx: click.Context) -> Path:
    """Resolve the project root from context or default."""
    return project_root(ctx.obj.get("root_override") if ctx.obj else None)


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-v", "--version", message="%(version)s")
@click.option(
    "--root", "root_override", type=click.Path(path_type=Path, file_okay=False), default=None,
    envvar="THEMEFORSEEN_ROOT",
    help="Project root to detect and write into (default: current directory).",
)
@click.pass_context
def main(ctx: click.Context, root_override: Path | None) -> None:
    """ThemeForseen dev server — apply themes and fonts to your project's CSS."""
    ctx.ensure_object(dict)
    ctx.obj["root_override"] = root_override
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


# ──────────────────────────────────────────────────────────────
# theme-forseen serve
# ──────────────────────────────────────────────────────────────

@main.command()
@click.option("--port", type=click.IntRange(1, 65535), default=None, help="Port to listen on (default: 3847).")
@click.option("--host", default=None, help="Interface to bind (default: 127.0.0.1).")
@click.option(
    "--log-level", default=None,
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Log verbosity (default: info).",
)
@click.pass_context
def serve(ctx: click.Context, port: int | None, host: str | None, log_level: str | None) -> None:
    """Start the dev server."""
    from themeforseen import fmt
    from themeforseen.config import load_settings
    from themeforseen.logging_setup import configure_logging
    from themeforseen.server import PortInUseError, bind_socket, serve as serve_app
    from themeforseen.web import create_app

    root = _get_root(ctx)
    settings = load_settings(root)
    port = port or settings.port
    host = host or settings.host
    level = (log_level or settings.log_level).upper()
    configure_logging(level)

    try:
        sock = bind_socket(host, port)
    except PortInUseError:
        fmt.error(f"Port {port} is already in use.")
        click.echo("Another ThemeForseen server may be running.", err=True)
        raise SystemExit(1)

    app = create_app(root, log_level=level)
    project = app.state.project.info

    fmt.banner(f"http://localhost:{port}", project)
    serve_app(app, sock, log_level=level)


# ──────────────────────────────────────────────────────────────
# theme-forseen detect
# ──────────────────────────────────────────────────────────────

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print the detection result as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the detected project type and CSS target without starting the server."""
    from themeforseen import fmt
    from themeforseen.config import load_settings
    from themeforseen.detect import detect_project

    root = _get_root(ctx)
    project = detect_project(root)
    pinned = load_settings(root).target
    if pinned is not None:
        project.css_target = pinned

    if as_json:
        click.echo(json.dumps(project.to_dict(), indent=2))
        return

    click.echo(f"Project root:   {root}")
    fmt.project_report(project)
    if pinned is not None:
        fmt.warn("CSS target pinned in config; auto-detection is overridden.")


# ──────────────────────────────────────────────────────────────
# theme-forseen config show / set-target / clear-target
# ──────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Manage the per-project .themeforseen.yaml."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective settings."""
    from themeforseen.config import load_settings

    settings = load_settings(_get_root(ctx))
    target = settings.target
    click.echo(f"Port:       {settings.port}")
    click.echo(f"Host:       {settings.host}")
    click.echo(f"Log level:  {settings.log_level}")
    click.echo(f"Target:     {f'{target.kind}:{target.path}' if target else '(auto-detect)'}")


@config.command("set-target")
@click.argument("path")
@click.option("--inline", is_flag=True, help="PATH is an HTML file; write into its first <style>.")
@click.pass_context
def config_set_target(ctx: click.Context, path: str, inline: bool) -> None:
    """Pin the CSS target to PATH (relative to the project root)."""
    from themeforseen import fmt
    from themeforseen.config import set_target
    from themeforseen.models import FILE, INLINE, CssTarget

    root = _get_root(ctx)
    target = CssTarget(INLINE if inline else FILE, path)
    set_target(root, target)
    fmt.success(f"Target set to: {target.kind}:{target.path}")


@config.command("clear-target")
@click.pass_context
def config_clear_target(ctx: click.Context) -> None:
    """Remove a pinned target and go back to auto-detection."""
    from themeforseen import fmt
    from themeforseen.config import set_target

    set_target(_get_root(ctx), None)
    fmt.success("Target cleared; auto-detection is back on.")


if __name__ == "__main__":
    main()
