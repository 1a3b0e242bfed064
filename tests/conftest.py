from pathlib import Path

import pytest
from tree_sitter import Parser

from hook_map.config import ScanOptions
from hook_map.extractor import Extractor, php_language


@pytest.fixture()
def parse_php():
    """Parse PHP source text into a tree-sitter tree."""
    parser = Parser(php_language())

    def _parse(text: str):
        return parser.parse(text.encode("utf-8"))

    return _parse


@pytest.fixture()
def extractor() -> Extractor:
    return Extractor(ScanOptions(include_docblocks=True))


@pytest.fixture()
def make_project(tmp_path):
    """Write {relative_path: source} into a temporary project directory."""

    def _make(files: dict) -> Path:
        for rel_path, text in files.items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return tmp_path

    return _make
