import argparse
import os
import sys

import pyperclip

from .config import (
    ScanOptions,
    DEFAULT_PLATFORM_PREFIXES,
    EXCLUDE_DIRECTORIES,
    HOOK_TYPES,
    split_prefixes,
)
from .formatters import to_html, to_json, to_markdown
from .models import SourceNotFoundError
from .scanner import scan_directory

# ==============================================================================
# CONFIGURATION
# ==============================================================================
OUTPUT_FORMATS = {
    "html": "html",
    "json": "json",
    "markdown": "md",
}


# ==============================================================================
# ARGUMENT PARSING
# ==============================================================================

def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="hook-map",
        description="Discover WordPress action and filter hooks in a plugin or theme",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan a plugin and copy the JSON report to the clipboard
  hook-map wp-content/plugins/akismet

  # Include docblocks and write Markdown to a file
  hook-map wp-content/plugins/akismet --include-docblocks --format markdown --output akismet.md

  # Searchable HTML reference
  hook-map wp-content/plugins/akismet --format html --output akismet.html

  # Actions only, written into a directory as <name>-hooks.json
  hook-map wp-content/themes/storefront --hook-type action --output ./reports/

  # Treat a different set of prefixes as core hooks
  hook-map my-plugin --platform-prefix wp_,woocommerce_
        """
    )

    parser.add_argument(
        "root",
        type=str,
        help="Directory of the plugin or theme to scan"
    )

    parser.add_argument(
        "--format", "-f",
        choices=sorted(OUTPUT_FORMATS),
        default="json",
        help="Output format (default: json)"
    )

    parser.add_argument(
        "--hook-type", "-t",
        choices=HOOK_TYPES,
        default="all",
        help="Type of hooks to report (default: all)"
    )

    parser.add_argument(
        "--include-docblocks", "-d",
        action="store_true",
        help="Capture the doc comment above each hook call"
    )

    parser.add_argument(
        "--platform-prefix", "-p",
        type=str,
        nargs="+",
        default=None,
        help="Hook name prefixes treated as core hooks, space or comma separated "
             "(default: " + ",".join(DEFAULT_PLATFORM_PREFIXES) + ")"
    )

    parser.add_argument(
        "--exclude-dir", "-x",
        type=str,
        nargs="+",
        default=[],
        help="Extra directory names to skip (always skipped: " + ", ".join(sorted(EXCLUDE_DIRECTORIES)) + ")"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file or directory (if specified, writes to file instead of clipboard)"
    )

    parser.add_argument(
        "--name", "-n",
        type=str,
        default=None,
        help="Name used in the report title and default file name (default: root directory name)"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only print errors and the final summary"
    )

    return parser.parse_args(argv)


# ==============================================================================
# OUTPUT
# ==============================================================================

def resolve_output_path(output: str, source_name: str, ext: str) -> str:
    """Directory -> <name>-hooks.<ext>; a path without the extension gets it appended."""
    if os.path.isdir(output) or output.endswith(("/", "\\")):
        return os.path.join(output, source_name + "-hooks." + ext)
    if not output.lower().endswith("." + ext):
        return output + "." + ext
    return output


def write_output(content: str, output_path: str) -> None:
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(content)


# ==============================================================================
# MAIN
# ==============================================================================

def main(argv=None) -> int:
    args = parse_arguments(argv)

    root = args.root
    source_name = args.name or os.path.basename(os.path.normpath(os.path.abspath(root)))

    prefixes = DEFAULT_PLATFORM_PREFIXES
    if args.platform_prefix is not None:
        prefixes = split_prefixes(args.platform_prefix)

    options = ScanOptions(
        hook_type=args.hook_type,
        include_docblocks=args.include_docblocks,
        platform_prefixes=prefixes,
        exclude_dirs=tuple(sorted(EXCLUDE_DIRECTORIES | set(args.exclude_dir))),
        verbose=not args.quiet,
    )

    try:
        result = scan_directory(root, options)
    except SourceNotFoundError as e:
        print("Error: " + str(e), file=sys.stderr)
        return 1

    if result.failures:
        print("[WARNING] " + str(len(result.failures)) + " file(s) could not be parsed.", file=sys.stderr)

    if result.is_empty:
        print("[WARNING] No hooks found in " + source_name + ".", file=sys.stderr)
        return 0

    if args.format == "markdown":
        output = to_markdown(result, source_name)
    elif args.format == "html":
        output = to_html(result, source_name)
    else:
        output = to_json(result, source_name)
    ext = OUTPUT_FORMATS[args.format]

    if args.output:
        output_path = resolve_output_path(args.output, source_name, ext)
        try:
            write_output(output, output_path)
        except OSError as e:
            print("Error: cannot write " + output_path + ": " + str(e), file=sys.stderr)
            return 1
        print("Output saved to: " + output_path, file=sys.stderr)
    else:
        try:
            pyperclip.copy(output)
            print("Output copied to clipboard!", file=sys.stderr)
        except pyperclip.PyperclipException as e:
            print("Error copying to clipboard: " + str(e), file=sys.stderr)
            print("Falling back to printing output...", file=sys.stderr)
            print(output)

    print(
        "Found " + str(result.total) + " hooks (" + str(result.action_count) +
        " actions, " + str(result.filter_count) + " filters).",
        file=sys.stderr
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
