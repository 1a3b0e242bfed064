from typing import List, Optional, Union

import tree_sitter_php
from tree_sitter import Language, Parser

from .config import ScanOptions, CONTEXT_RADIUS, is_platform_hook
from .models import (
    ContextLine,
    FileExtraction,
    HookDeclaration,
    HookSubscription,
    ParseFailure,
)
from .visitor import visit

# ==============================================================================
# GRAMMAR
# ==============================================================================

_php_language: Optional[Language] = None


def php_language() -> Language:
    """PHP grammar that also accepts inline HTML around <?php ?> blocks."""
    global _php_language
    if _php_language is None:
        _php_language = Language(tree_sitter_php.language_php())
    return _php_language


# ==============================================================================
# UTILITY FUNCTIONS
# ==============================================================================

def split_lines(text: str) -> List[str]:
    """Split on newlines the way the parser counts rows."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r") for line in lines]


def context_window(lines: List[str], line_number: int,
                   radius: int = CONTEXT_RADIUS) -> List[ContextLine]:
    """Lines around line_number (1-based), clamped to the file."""
    if not lines:
        return [ContextLine(line_number, "", True)]

    start = max(1, line_number - radius)
    end = min(len(lines), line_number + radius)
    if start > end:
        start = end = min(max(1, line_number), len(lines))

    return [
        ContextLine(n, lines[n - 1], n == line_number)
        for n in range(start, end + 1)
    ]


# ==============================================================================
# EXTRACTION
# ==============================================================================

class Extractor:
    """Parses one file at a time and turns visitor output into hook records."""

    def __init__(self, options: Optional[ScanOptions] = None):
        self.options = options or ScanOptions()
        self.parser = Parser(php_language())

    def extract(self, rel_path: str, text: str) -> Union[FileExtraction, ParseFailure]:
        try:
            source = text.encode("utf-8")
        except UnicodeEncodeError as e:
            return ParseFailure(rel_path, "cannot encode source: " + str(e))

        tree = self.parser.parse(source)
        if tree.root_node.has_error:
            error_line = first_error_line(tree.root_node)
            return ParseFailure(rel_path, "syntax error near line " + str(error_line))

        raw_hooks, raw_listeners = visit(tree, self.options.include_docblocks)
        lines = split_lines(text)

        extraction = FileExtraction(file=rel_path)

        for raw in raw_hooks:
            extraction.hooks.append(HookDeclaration(
                name=raw.name,
                kind=raw.kind,
                file=rel_path,
                line=raw.line,
                function_call=raw.function_call,
                is_platform_hook=is_platform_hook(raw.name, self.options.platform_prefixes),
                docblock=raw.docblock,
                context=context_window(lines, raw.line),
            ))

        for raw in raw_listeners:
            extraction.subscriptions.append(HookSubscription(
                target_name=raw.hook_name,
                kind=raw.kind,
                callback=raw.callback,
                priority=raw.priority,
                accepted_args=raw.accepted_args,
                file=rel_path,
                line=raw.line,
            ))

        return extraction


def first_error_line(root) -> int:
    """1-based line of the first ERROR or missing node."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return root.start_point[0] + 1
