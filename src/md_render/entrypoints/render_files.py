from __future__ import annotations

import logging
from pathlib import Path

import typer

from md_render.cli_config import LoadedSettings, RenderConfigError, RenderSettings, load_render_settings
from md_render.engine import render

logger = logging.getLogger(__name__)

_STDIN = Path("-")


def configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def run_render(
    *,
    inputs: list[Path],
    output: Path | None,
    to_stdout: bool,
    encoding: str | None,
    config_path: Path | None,
) -> None:
    settings = _load_settings(config_path=config_path, encoding=encoding).settings

    if output is not None and len(inputs) > 1:
        typer.echo("--output can only be used with a single input.", err=True)
        raise typer.Exit(code=2)
    if output is not None and to_stdout:
        typer.echo("--output and --stdout are mutually exclusive.", err=True)
        raise typer.Exit(code=2)

    for source in inputs or [_STDIN]:
        if source == _STDIN:
            markdown = _read_stdin(settings=settings)
        else:
            markdown = _read_markdown(source, settings=settings)

        html = settings.apply_newlines(render(markdown))
        logger.debug("Rendered %s: %d -> %d characters", source, len(markdown), len(html))

        if to_stdout or (output is None and source == _STDIN):
            typer.echo(html.encode(settings.encoding), nl=False)
            continue

        target = output if output is not None else _default_target(source, settings=settings)
        _write_html(target, html, settings=settings)
        typer.echo(f"Wrote {target}")


def run_show_config(*, config_path: Path | None) -> None:
    loaded = _load_settings(config_path=config_path, encoding=None)
    lines = [f"Source: {loaded.source}"]
    for key, value in loaded.settings.model_dump(mode="json").items():
        lines.append(f"  {key}: {value!r}")
    typer.echo("\n".join(lines))


def _load_settings(*, config_path: Path | None, encoding: str | None) -> LoadedSettings:
    try:
        return load_render_settings(path=config_path, overrides={"encoding": encoding})
    except RenderConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _read_stdin(*, settings: RenderSettings) -> str:
    # Bytes keep CRLF and lone CR line breaks intact.
    data = typer.get_binary_stream("stdin").read()
    try:
        return data.decode(settings.encoding)
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"Cannot decode stdin as {settings.encoding}: {exc}") from exc


def _read_markdown(path: Path, *, settings: RenderSettings) -> str:
    try:
        with path.open(encoding=settings.encoding, newline="") as handle:
            return handle.read()
    except OSError as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"Cannot decode {path} as {settings.encoding}: {exc}") from exc


def _default_target(source: Path, *, settings: RenderSettings) -> Path:
    target = source.with_suffix(settings.output_suffix)
    if target == source:
        raise typer.BadParameter(f"Refusing to overwrite input {source}; pass --output or --stdout.")
    return target


def _write_html(path: Path, html: str, *, settings: RenderSettings) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=settings.encoding, newline="") as handle:
        handle.write(html)
