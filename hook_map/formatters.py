import html
import json
from typing import List

from .docblock import parse_docblock
from .models import HookDeclaration, HookKind, ScanResult


# ==============================================================================
# JSON
# ==============================================================================

def hook_to_dict(hook: HookDeclaration) -> dict:
    return {
        "name": hook.name,
        "type": hook.kind.value,
        "is_core": "yes" if hook.is_platform_hook else "no",
        "file": hook.file,
        "line_number": hook.line,
        "function_call": hook.function_call,
        "docblock": hook.docblock,
        "context": [
            {
                "line": c.number,
                "text": c.text,
                "highlight": c.is_highlighted,
            }
            for c in hook.context
        ],
        "context_start": hook.context_start,
        "related_hooks": [
            {
                "name": r.name,
                "type": r.kind.value,
                "relationship": r.basis.value,
            }
            for r in hook.related
        ],
        "listeners": [
            {
                "callback": s.callback,
                "type": s.kind.value,
                "priority": s.priority,
                "accepted_args": s.accepted_args,
                "file": s.file,
                "line": s.line,
            }
            for s in hook.subscribers
        ],
    }


def result_to_dict(result: ScanResult, source_name: str) -> dict:
    return {
        "source": source_name,
        "summary": {
            "total": result.total,
            "actions": result.action_count,
            "filters": result.filter_count,
            "hooks_with_listeners": result.with_subscribers_count,
        },
        "hooks": [hook_to_dict(h) for h in result.hooks],
        "parse_failures": [
            {"file": f.file, "reason": f.reason}
            for f in result.failures
        ],
    }


def to_json(result: ScanResult, source_name: str) -> str:
    return json.dumps(result_to_dict(result, source_name), indent=2)


# ==============================================================================
# MARKDOWN
# ==============================================================================

def to_markdown(result: ScanResult, source_name: str) -> str:
    """Readable reference grouped into actions and filters, each sorted by name."""
    actions = sorted((h for h in result.hooks if h.kind == HookKind.ACTION), key=lambda h: h.name)
    filters = sorted((h for h in result.hooks if h.kind == HookKind.FILTER), key=lambda h: h.name)

    lines = [
        "# Hooks for: " + source_name,
        "",
        "This document lists all hooks (actions and filters) found in " + source_name + ".",
        "",
        "## Summary",
        "",
        "- Total Hooks: " + str(result.total),
        "- Actions: " + str(result.action_count),
        "- Filters: " + str(result.filter_count),
        "- Hooks with listeners: " + str(result.with_subscribers_count),
        "",
    ]

    if actions:
        lines.append("## Actions")
        lines.append("")
        for hook in actions:
            lines.extend(format_hook_markdown(hook))

    if filters:
        lines.append("## Filters")
        lines.append("")
        for hook in filters:
            lines.extend(format_hook_markdown(hook))

    return "\n".join(lines)


def format_hook_markdown(hook: HookDeclaration) -> List[str]:
    lines = [
        "### `" + hook.name + "`",
        "- **File:** `" + hook.file + "`",
        "- **Line:** " + str(hook.line),
        "- **Function:** `" + hook.function_call + "`",
        "- **Core hook:** " + ("yes" if hook.is_platform_hook else "no"),
    ]

    if hook.docblock:
        lines.append("- **DocBlock:**")
        lines.append("```php")
        lines.append(hook.docblock)
        lines.append("```")

        doc = parse_docblock(hook.docblock)
        if doc.summary:
            lines.append("- **Summary:** " + doc.summary)
        if doc.description:
            lines.append("- **Description:** " + doc.description)
        if doc.params:
            lines.append("- **Parameters:**")
            for param in doc.params:
                lines.append("  - `" + param.name + "` (" + (param.type or "mixed") + "): " + param.description)
        if doc.returns:
            lines.append("- **Returns:** " + (doc.returns.type or "mixed") + " - " + doc.returns.description)

    if hook.subscribers:
        lines.append("- **Listeners:**")
        for sub in hook.subscribers:
            lines.append(
                "  - `" + sub.callback + "` (priority " + str(sub.priority) +
                ", " + str(sub.accepted_args) + " args) in `" + sub.file +
                "` line " + str(sub.line)
            )

    if hook.related:
        lines.append("- **Related hooks:**")
        for edge in hook.related:
            lines.append("  - `" + edge.name + "` (" + edge.kind.value + ", " + edge.basis.value + ")")

    lines.append("")
    return lines


# ==============================================================================
# HTML
# ==============================================================================

HTML_STYLE = """
body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; line-height: 1.5; max-width: 1200px; margin: 0 auto; padding: 20px; color: #333; }
.filters { margin: 20px 0; display: flex; gap: 15px; flex-wrap: wrap; }
.filters input, .filters select { padding: 8px; border: 1px solid #ddd; border-radius: 4px; }
.stats { font-size: 0.9em; opacity: 0.7; }
table { width: 100%; border-collapse: collapse; table-layout: fixed; }
th { background: #f5f5f5; padding: 10px; text-align: left; border-bottom: 2px solid #ddd; }
th:first-child { width: 40%; }
td { padding: 10px; border-bottom: 1px solid #ddd; vertical-align: top; word-wrap: break-word; }
.hook-name { font-weight: bold; font-family: monospace; }
.badge { display: inline-block; padding: 2px 6px; border-radius: 4px; font-size: 0.8em; margin-right: 5px; }
.action { background-color: #e7f5ff; color: #0066cc; }
.filter { background-color: #f3f0ff; color: #5f3dc4; }
.core { background-color: #e6fcf5; color: #099268; }
.plugin { background-color: #fff9db; color: #e67700; }
.hook-meta, .docblock, .listeners, .related-hooks { font-size: 0.9em; margin: 10px 0; }
.context-code { background-color: #f5f5f5; padding: 10px; border-radius: 4px; font-family: monospace; white-space: pre; overflow-x: auto; display: none; }
.context-line-highlight { background-color: #ffeb3b; display: block; }
.view-context-btn { font-size: 12px; margin: 5px 0; cursor: pointer; }
"""

HTML_SCRIPT = """
function toggleContext(button) {
    var code = button.nextElementSibling;
    var hidden = code.style.display !== "block";
    code.style.display = hidden ? "block" : "none";
    button.textContent = hidden ? "Hide Source Context" : "View Source Context";
}
function applyFilters() {
    var search = document.getElementById("search").value.toLowerCase();
    var type = document.getElementById("type-filter").value;
    var core = document.getElementById("core-filter").value;
    var shown = 0;
    document.querySelectorAll("tr.hook-row").forEach(function (row) {
        var visible = row.dataset.name.toLowerCase().indexOf(search) !== -1
            && (type === "all" || row.dataset.type === type)
            && (core === "all" || row.dataset.core === core);
        row.style.display = visible ? "" : "none";
        if (visible) { shown++; }
    });
    document.getElementById("shown-count").textContent = shown;
}
document.getElementById("search").addEventListener("input", applyFilters);
document.getElementById("type-filter").addEventListener("change", applyFilters);
document.getElementById("core-filter").addEventListener("change", applyFilters);
document.querySelectorAll(".related-hook-link").forEach(function (link) {
    link.addEventListener("click", function (event) {
        event.preventDefault();
        document.getElementById("search").value = link.dataset.hookName;
        applyFilters();
    });
});
applyFilters();
"""


def _e(text) -> str:
    return html.escape(str(text), quote=True)


def to_html(result: ScanResult, source_name: str) -> str:
    """Standalone page with a searchable hooks table, in discovery order."""
    lines = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="UTF-8">',
        "<title>" + _e(source_name) + " Hooks Reference</title>",
        "<style>" + HTML_STYLE + "</style>",
        "</head>",
        "<body>",
        "<h1>" + _e(source_name) + " Hooks Reference</h1>",
        '<div class="filters">',
        '<input type="text" id="search" placeholder="Search hooks..." autocomplete="off">',
        '<select id="type-filter">',
        '<option value="all">All Types</option>',
        '<option value="action">Actions</option>',
        '<option value="filter">Filters</option>',
        "</select>",
        '<select id="core-filter">',
        '<option value="all">All Sources</option>',
        '<option value="yes">WordPress Core</option>',
        '<option value="no">Plugin Specific</option>',
        "</select>",
        "</div>",
        '<div class="stats"><span id="shown-count">' + str(result.total) + "</span> of "
        '<span id="total-count">' + str(result.total) + "</span> hooks shown ("
        + str(result.action_count) + " actions, " + str(result.filter_count) + " filters)</div>",
        '<table id="hooks-table">',
        "<thead><tr><th>Hook</th><th>Details</th></tr></thead>",
        "<tbody>",
    ]

    for hook in result.hooks:
        lines.extend(format_hook_html(hook))

    lines.extend([
        "</tbody>",
        "</table>",
        "<script>" + HTML_SCRIPT + "</script>",
        "</body>",
        "</html>",
    ])
    return "\n".join(lines)


def format_hook_html(hook: HookDeclaration) -> List[str]:
    kind = hook.kind.value
    core = "yes" if hook.is_platform_hook else "no"

    lines = [
        '<tr class="hook-row" data-name="' + _e(hook.name) + '" data-type="' + kind +
        '" data-core="' + core + '">',
        '<td data-column="Hook">',
        '<div class="hook-name">' + _e(hook.name) + "</div>",
        '<div><span class="badge ' + kind + '">' + kind + "</span>"
        '<span class="badge ' + ("core" if hook.is_platform_hook else "plugin") + '">' +
        ("Core" if hook.is_platform_hook else "Plugin") + "</span></div>",
    ]

    if hook.context:
        lines.append('<button class="view-context-btn" onclick="toggleContext(this)">View Source Context</button>')
        lines.append('<div class="context-code">')
        for c in hook.context:
            css = "context-line-highlight" if c.is_highlighted else "context-line"
            lines.append('<div class="' + css + '">' + str(c.number) + ": " + _e(c.text) + "</div>")
        lines.append("</div>")

    lines.extend([
        "</td>",
        '<td data-column="Details">',
        '<div class="hook-meta">',
        "<div><strong>File:</strong> " + _e(hook.file) + "</div>",
        "<div><strong>Line:</strong> " + str(hook.line) + "</div>",
        "<div><strong>Function:</strong> " + _e(hook.function_call) + "</div>",
        "</div>",
    ])

    doc = parse_docblock(hook.docblock)
    if doc:
        lines.append('<div class="docblock">')
        if doc.summary:
            lines.append("<p>" + _e(doc.summary) + "</p>")
        if doc.description:
            lines.append("<p>" + _e(doc.description) + "</p>")
        if doc.params:
            lines.append("<table class=\"param-table\"><thead><tr><th>Name</th><th>Type</th><th>Description</th></tr></thead><tbody>")
            for param in doc.params:
                lines.append(
                    "<tr><td>" + _e(param.name) + "</td><td>" + _e(param.type or "mixed") +
                    "</td><td>" + _e(param.description) + "</td></tr>"
                )
            lines.append("</tbody></table>")
        if doc.returns:
            lines.append(
                "<div><strong>Returns:</strong> " + _e(doc.returns.type or "mixed") +
                " - " + _e(doc.returns.description) + "</div>"
            )
        lines.append("</div>")

    if hook.subscribers:
        lines.append('<div class="listeners"><h4>Listeners</h4><ul>')
        for sub in hook.subscribers:
            lines.append(
                "<li><code>" + _e(sub.callback) + "</code> (priority " + str(sub.priority) +
                ", " + str(sub.accepted_args) + " args) in " + _e(sub.file) +
                " line " + str(sub.line) + "</li>"
            )
        lines.append("</ul></div>")

    if hook.related:
        lines.append('<div class="related-hooks"><h4>Related Hooks</h4><ul class="related-hooks-list">')
        for edge in hook.related:
            lines.append(
                '<li><a href="#" class="related-hook-link" data-hook-name="' + _e(edge.name) + '">'
                '<span class="badge ' + edge.kind.value + '">' + edge.kind.value + "</span>"
                '<span class="related-hook-name">' + _e(edge.name) + "</span></a> "
                '<span class="relationship-type">(' + _e(edge.basis.value.capitalize()) + ")</span></li>"
            )
        lines.append("</ul></div>")

    lines.append("</td>")
    lines.append("</tr>")
    return lines
