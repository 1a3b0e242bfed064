"""Tests for the command line front end."""

import json
from pathlib import Path

import pyperclip

from hook_map import cli

SAMPLE_PLUGIN = Path(__file__).parent / "fixtures" / "sample-plugin"


def test_writes_json_file(tmp_path, capsys) -> None:
    output = tmp_path / "report.json"
    code = cli.main([str(SAMPLE_PLUGIN), "--output", str(output), "--quiet"])

    assert code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["summary"]["total"] == 4
    err = capsys.readouterr().err
    assert "Found 4 hooks (3 actions, 1 filters)." in err
    assert "1 file(s) could not be parsed" in err


def test_output_directory_gets_default_name(tmp_path) -> None:
    code = cli.main([str(SAMPLE_PLUGIN), "-f", "markdown", "-o", str(tmp_path), "-q"])
    assert code == 0
    report = tmp_path / "sample-plugin-hooks.md"
    assert report.read_text(encoding="utf-8").startswith("# Hooks for: sample-plugin")


def test_missing_extension_is_appended(tmp_path) -> None:
    cli.main([str(SAMPLE_PLUGIN), "-o", str(tmp_path / "report"), "-q", "--name", "demo"])
    data = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert data["source"] == "demo"


def test_hook_type_and_prefix_flags(tmp_path) -> None:
    output = tmp_path / "filters.json"
    cli.main([
        str(SAMPLE_PLUGIN), "-o", str(output), "-q",
        "--hook-type", "filter", "--platform-prefix", "sample_,shop_",
    ])
    data = json.loads(output.read_text(encoding="utf-8"))
    assert [(h["name"], h["is_core"]) for h in data["hooks"]] == [("sample_order_data", "yes")]


def test_missing_root_exits_with_error(tmp_path, capsys) -> None:
    code = cli.main([str(tmp_path / "nope"), "-q"])
    assert code == 1
    assert "not found" in capsys.readouterr().err


def test_no_hooks_is_a_warning(tmp_path, capsys) -> None:
    (tmp_path / "plain.php").write_text("<?php\necho 'hi';\n", encoding="utf-8")
    code = cli.main([str(tmp_path), "-q"])
    assert code == 0
    assert "No hooks found" in capsys.readouterr().err


def test_clipboard_output(monkeypatch, capsys) -> None:
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)
    code = cli.main([str(SAMPLE_PLUGIN), "-q"])
    assert code == 0
    assert json.loads(copied[0])["summary"]["total"] == 4
    assert "copied to clipboard" in capsys.readouterr().err


def test_clipboard_failure_falls_back_to_stdout(monkeypatch, capsys) -> None:
    def fail(_text):
        raise pyperclip.PyperclipException("no clipboard")

    monkeypatch.setattr(pyperclip, "copy", fail)
    code = cli.main([str(SAMPLE_PLUGIN), "-q", "-f", "markdown"])
    assert code == 0
    captured = capsys.readouterr()
    assert captured.out.startswith("# Hooks for: sample-plugin")
    assert "Falling back" in captured.err


def test_html_format(tmp_path) -> None:
    code = cli.main([str(SAMPLE_PLUGIN), "--format", "html", "-o", str(tmp_path), "-q"])
    assert code == 0
    page = (tmp_path / "sample-plugin-hooks.html").read_text(encoding="utf-8")
    assert page.startswith("<!DOCTYPE html>")
    assert 'data-name="sample_order_data" data-type="filter"' in page
