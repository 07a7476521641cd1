from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from md_render import __version__
from md_render.entrypoints.cli import app


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    config_path = tmp_path / "md-render-config.yaml"
    monkeypatch.setenv("MD_RENDER_CONFIG", str(config_path))
    return config_path


def test_cli_version() -> None:
    result = CliRunner().invoke(app, ["version"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == __version__


def test_cli_render_writes_html_next_to_input(tmp_path: Path) -> None:
    source = tmp_path / "note.md"
    source.write_bytes(b"# Title\r\n\r\n__bold__ and _it_\r\n")

    result = CliRunner().invoke(app, ["render", str(source)])

    assert result.exit_code == 0, result.output
    target = tmp_path / "note.html"
    assert f"Wrote {target}" in result.stdout
    assert target.read_bytes() == b"<h1>Title</h1>\r\n\r\n<strong>bold</strong> and <em>it</em>\r\n"


def test_cli_render_to_stdout(tmp_path: Path) -> None:
    first = tmp_path / "a.md"
    second = tmp_path / "b.md"
    first.write_text("_a_", encoding="utf-8")
    second.write_text("[b](c)", encoding="utf-8")

    result = CliRunner().invoke(app, ["render", "--stdout", str(first), str(second)])

    assert result.exit_code == 0, result.output
    assert result.stdout == '<em>a</em><a href="c">b</a>'
    assert not (tmp_path / "a.html").exists()


def test_cli_render_reads_stdin() -> None:
    result = CliRunner().invoke(app, ["render"], input="a __b__ c")
    assert result.exit_code == 0, result.output
    assert result.stdout == "a <strong>b</strong> c"


def test_cli_render_stdin_keeps_crlf_line_breaks() -> None:
    result = CliRunner().invoke(app, ["render"], input=b"# H\r\n\r\n_i_\ra")
    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == b"<h1>H</h1>\r\n\r\n<em>i</em>\ra"


def test_cli_render_stdin_uses_configured_encoding() -> None:
    result = CliRunner().invoke(app, ["render", "--encoding", "latin-1"], input="_caf\xe9_".encode("latin-1"))
    assert result.exit_code == 0, result.output
    assert result.stdout_bytes == "<em>caf\xe9</em>".encode("latin-1")


def test_cli_render_undecodable_stdin_is_bad_parameter() -> None:
    result = CliRunner().invoke(app, ["render"], input=b"\xff\xfe\xfa")
    assert result.exit_code == 2


def test_cli_render_stdin_dash_with_output(tmp_path: Path) -> None:
    target = tmp_path / "out" / "page.html"
    result = CliRunner().invoke(app, ["render", "-", "--output", str(target)], input="_x_")
    assert result.exit_code == 0, result.output
    assert target.read_text(encoding="utf-8") == "<em>x</em>"


def test_cli_render_output_requires_single_input(tmp_path: Path) -> None:
    first = tmp_path / "a.md"
    second = tmp_path / "b.md"
    first.write_text("a", encoding="utf-8")
    second.write_text("b", encoding="utf-8")

    result = CliRunner().invoke(app, ["render", str(first), str(second), "--output", str(tmp_path / "x.html")])

    assert result.exit_code == 2
    assert not (tmp_path / "x.html").exists()


def test_cli_render_missing_input_is_bad_parameter(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["render", str(tmp_path / "missing.md")])
    assert result.exit_code == 2


def test_cli_render_refuses_to_overwrite_input(tmp_path: Path) -> None:
    source = tmp_path / "page.html"
    source.write_text("_a_", encoding="utf-8")

    result = CliRunner().invoke(app, ["render", str(source)])

    assert result.exit_code == 2
    assert source.read_text(encoding="utf-8") == "_a_"


def test_cli_render_uses_config_suffix_and_newlines(tmp_path: Path, _isolated_config: Path) -> None:
    _isolated_config.write_text("output_suffix: .htm\nnewline: lf\n", encoding="utf-8")
    source = tmp_path / "doc.md"
    source.write_bytes(b"_a_\r\n\r\nb")

    result = CliRunner().invoke(app, ["render", str(source)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "doc.htm").read_bytes() == b"<em>a</em>\n\nb"


def test_cli_render_encoding_option(tmp_path: Path) -> None:
    source = tmp_path / "latin.md"
    source.write_bytes("_caf\xe9_".encode("latin-1"))

    result = CliRunner().invoke(app, ["render", "--encoding", "latin-1", str(source)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "latin.html").read_bytes() == "<em>caf\xe9</em>".encode("latin-1")


def test_cli_render_undecodable_input_is_bad_parameter(tmp_path: Path) -> None:
    source = tmp_path / "bad.md"
    source.write_bytes(b"\xff\xfe\xfa")
    result = CliRunner().invoke(app, ["render", str(source)])
    assert result.exit_code == 2


def test_cli_render_invalid_config_is_bad_parameter(tmp_path: Path, _isolated_config: Path) -> None:
    _isolated_config.write_text("unknown_key: 1\n", encoding="utf-8")
    source = tmp_path / "a.md"
    source.write_text("a", encoding="utf-8")

    result = CliRunner().invoke(app, ["render", str(source)])

    assert result.exit_code == 2
    assert not (tmp_path / "a.html").exists()


def test_cli_config_shows_resolved_settings(_isolated_config: Path) -> None:
    _isolated_config.write_text("newline: crlf\n", encoding="utf-8")

    result = CliRunner().invoke(app, ["config"])

    assert result.exit_code == 0, result.output
    assert f"Source: {_isolated_config}" in result.stdout
    assert "newline: 'crlf'" in result.stdout
    assert "encoding: 'utf-8'" in result.stdout


def test_cli_config_reports_defaults() -> None:
    result = CliRunner().invoke(app, ["config"])
    assert result.exit_code == 0, result.output
    assert "Source: defaults" in result.stdout


def test_cli_config_picks_up_project_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("MD_RENDER_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".md-render.yaml").write_text("output_suffix: .xhtml\n", encoding="utf-8")

    result = CliRunner().invoke(app, ["config"])

    assert result.exit_code == 0, result.output
    assert f"Source: {tmp_path / '.md-render.yaml'}" in result.stdout
    assert "output_suffix: '.xhtml'" in result.stdout
