from pathlib import Path
from typing import Annotated

import typer

app = typer.Typer(add_completion=False)


@app.command()
def version() -> None:
    """Print version."""
    from md_render import __version__

    typer.echo(__version__)


@app.command()
def render(
    inputs: Annotated[
        list[Path] | None,
        typer.Argument(
            help="Markdown files to render (default: read stdin; `-` also means stdin).",
            show_default=False,
        ),
    ] = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            dir_okay=False,
            help="Write HTML to this file (single input only).",
        ),
    ] = None,
    stdout: Annotated[
        bool,
        typer.Option("--stdout", help="Write HTML to stdout instead of files next to the inputs."),
    ] = False,
    encoding: Annotated[
        str | None,
        typer.Option(help="Text encoding for input and output (default: from config, utf-8)."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            dir_okay=False,
            help="Settings YAML (default: $MD_RENDER_CONFIG, ./.md-render.yaml or ~/.config/md-render/config.yaml).",
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
) -> None:
    """Render Markdown files (or stdin) to HTML."""
    from md_render.entrypoints.render_files import configure_logging, run_render

    configure_logging(verbose=verbose)
    run_render(
        inputs=list(inputs or []),
        output=output,
        to_stdout=stdout,
        encoding=encoding,
        config_path=config,
    )


@app.command("config")
def show_config(
    *,
    config: Annotated[
        Path | None,
        typer.Option(
            dir_okay=False,
            help="Settings YAML (default: $MD_RENDER_CONFIG, ./.md-render.yaml or ~/.config/md-render/config.yaml).",
        ),
    ] = None,
) -> None:
    """Show the resolved settings and where they were loaded from."""
    from md_render.entrypoints.render_files import run_show_config

    run_show_config(config_path=config)


def main() -> None:
    app()
