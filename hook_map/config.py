from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

# ==============================================================================
# CONFIGURATION
# ==============================================================================

# 1. DECLARATION FUNCTIONS: calls that fire a hook, mapped to the hook kind
DECLARATION_FUNCTIONS: Dict[str, str] = {
    "do_action": "action",
    "do_action_ref_array": "action",
    "apply_filters": "filter",
    "apply_filters_ref_array": "filter",
}

# 2. SUBSCRIPTION FUNCTIONS: calls that register a callback on a hook
SUBSCRIPTION_FUNCTIONS: Dict[str, str] = {
    "add_action": "action",
    "add_filter": "filter",
}

# 3. LISTENER DEFAULTS: used when priority / accepted args are absent or non-literal
DEFAULT_PRIORITY = 10
DEFAULT_ACCEPTED_ARGS = 1

# 4. PLATFORM PREFIXES: hook names starting with these are built-in platform hooks
DEFAULT_PLATFORM_PREFIXES = (
    "wp_", "pre_", "post_", "after_", "before_", "the_", "admin_",
)

# 5. CONTEXT WINDOW: lines shown on each side of a hook call
CONTEXT_RADIUS = 2

# 6. NAMING PATTERNS: prefix groups whose members name paired hooks
NAMING_PATTERN_GROUPS: Tuple[Tuple[str, ...], ...] = (
    ("before_", "after_"),
    ("pre_", "post_"),
    ("start_", "end_"),
    ("begin_", "complete_"),
    ("init_", "process_", "complete_"),
    ("wp_ajax_", "wp_ajax_nopriv_"),
)

# 7. COMMON STEMS: generic verbs that hint two hooks belong together
COMMON_STEMS = (
    "save", "update", "delete", "create", "render", "display", "load", "process",
)

# 8. RELATIONSHIP THRESHOLDS
PROXIMITY_RANGE = 15        # same-file hooks within this many lines are candidates
CLOSE_PROXIMITY_RANGE = 5   # ... and plain proximity needs this close
MIN_SHARED_STEM_TOKENS = 2
MIN_SHARED_PROXIMITY_TOKENS = 1
MAX_RELATED_HOOKS = 5

# 9. SOURCE ENUMERATION
SOURCE_EXTENSIONS = (".php",)
EXCLUDE_DIRECTORIES = {
    ".git", ".svn", ".hg", "node_modules", ".idea", ".vscode",
}

HOOK_TYPES = ("all", "action", "filter")


@dataclass
class ScanOptions:
    """Per-run settings for a scan. Defaults come from the constants above."""
    hook_type: str = "all"
    include_docblocks: bool = False
    platform_prefixes: Sequence[str] = DEFAULT_PLATFORM_PREFIXES
    exclude_dirs: Sequence[str] = tuple(sorted(EXCLUDE_DIRECTORIES))
    verbose: bool = False

    # Relationship heuristics
    naming_pattern_groups: Sequence[Sequence[str]] = NAMING_PATTERN_GROUPS
    common_stems: Sequence[str] = COMMON_STEMS
    proximity_range: int = PROXIMITY_RANGE
    close_proximity_range: int = CLOSE_PROXIMITY_RANGE
    min_shared_stem_tokens: int = MIN_SHARED_STEM_TOKENS
    min_shared_proximity_tokens: int = MIN_SHARED_PROXIMITY_TOKENS
    max_related: int = MAX_RELATED_HOOKS

    def __post_init__(self):
        if self.hook_type not in HOOK_TYPES:
            raise ValueError(
                "Invalid hook type '" + str(self.hook_type) + "'. "
                "Use one of: " + ", ".join(HOOK_TYPES)
            )
        if isinstance(self.platform_prefixes, str):
            self.platform_prefixes = (self.platform_prefixes,)
        self.platform_prefixes = tuple(self.platform_prefixes)

    def accepts_kind(self, kind_value: str) -> bool:
        return self.hook_type == "all" or self.hook_type == kind_value


def is_platform_hook(name: str, prefixes: Sequence[str]) -> bool:
    """True if the hook name starts with any of the platform prefixes."""
    for prefix in prefixes:
        if name.startswith(prefix):
            return True
    return False


def split_prefixes(values: List[str]) -> Tuple[str, ...]:
    """Flatten comma-separated command line values into a prefix tuple."""
    prefixes = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part and part not in prefixes:
                prefixes.append(part)
    return tuple(prefixes)
