import os
import sys
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import ScanOptions, SOURCE_EXTENSIONS
from .extractor import Extractor
from .models import (
    HookDeclaration,
    HookSubscription,
    ParseFailure,
    ScanResult,
    SourceNotFoundError,
)
from .relationships import bind_subscribers, infer_relationships


def log(message: str, options: ScanOptions) -> None:
    if options.verbose:
        print(message, file=sys.stderr)


# ==============================================================================
# SOURCE ENUMERATION
# ==============================================================================

def should_ignore_dir(dirname: str, exclude_dirs: Sequence[str]) -> bool:
    return dirname in exclude_dirs or dirname.startswith(".")


def find_php_files(root: str, exclude_dirs: Sequence[str] = ()) -> List[str]:
    """Relative paths of PHP files under root, sorted so scans are repeatable."""
    found = []
    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(d, exclude_dirs))

        for filename in files:
            if filename.lower().endswith(SOURCE_EXTENSIONS):
                full_path = os.path.join(current, filename)
                rel_path = os.path.relpath(full_path, root).replace("\\", "/")
                found.append(rel_path)

    return sorted(found)


def read_source(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        return f.read()


# ==============================================================================
# SCAN
# ==============================================================================

def scan_sources(sources: Iterable[Tuple[str, str]],
                 options: Optional[ScanOptions] = None,
                 failures: Optional[List[ParseFailure]] = None) -> ScanResult:
    """Run the whole engine over (relative_path, text) pairs."""
    options = options or ScanOptions()
    extractor = Extractor(options)

    # Shares the caller's list so read errors and parse errors stay in file order
    result = ScanResult(failures=failures if failures is not None else [])
    hooks: List[HookDeclaration] = []
    subscriptions: List[HookSubscription] = []

    for rel_path, text in sources:
        result.files_scanned += 1
        extraction = extractor.extract(rel_path, text)

        if isinstance(extraction, ParseFailure):
            log("[WARNING] Skipping " + rel_path + ": " + extraction.reason, options)
            result.failures.append(extraction)
            continue

        for hook in extraction.hooks:
            if options.accepts_kind(hook.kind.value):
                hooks.append(hook)
        subscriptions.extend(extraction.subscriptions)

    log("Found " + str(len(hooks)) + " hooks and " + str(len(subscriptions)) +
        " listeners in " + str(result.files_scanned) + " files.", options)

    if hooks:
        log("Binding listeners...", options)
        bind_subscribers(hooks, subscriptions)

        log("Identifying related hooks...", options)
        infer_relationships(hooks, options)

    result.hooks = hooks
    return result


def scan_directory(root: str, options: Optional[ScanOptions] = None) -> ScanResult:
    """Scan every PHP file below root."""
    options = options or ScanOptions()

    if not os.path.isdir(root):
        raise SourceNotFoundError(root)

    log("Scanning " + root + "...", options)
    rel_paths = find_php_files(root, options.exclude_dirs)
    log("Found " + str(len(rel_paths)) + " PHP files.", options)

    failures: List[ParseFailure] = []
    unreadable_count = 0

    def sources():
        nonlocal unreadable_count
        for rel_path in rel_paths:
            try:
                text = read_source(os.path.join(root, rel_path))
            except OSError as e:
                log("[WARNING] Cannot read " + rel_path + ": " + str(e), options)
                failures.append(ParseFailure(rel_path, "unreadable: " + str(e)))
                unreadable_count += 1
                continue
            yield rel_path, text

    log("Parsing...", options)
    result = scan_sources(sources(), options, failures)
    result.files_scanned += unreadable_count
    return result
