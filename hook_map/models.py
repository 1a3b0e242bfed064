from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ==============================================================================
# ERRORS
# ==============================================================================

class HookMapError(Exception):
    """Base class for scan errors."""


class SourceNotFoundError(HookMapError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, root: str):
        self.root = root
        super().__init__("Source directory '" + root + "' not found.")


# ==============================================================================
# DATA STRUCTURES
# ==============================================================================

class HookKind(Enum):
    ACTION = "action"
    FILTER = "filter"


class RelationshipBasis(Enum):
    NAMING_PATTERN = "naming pattern"
    PROXIMITY_AND_NAMING = "proximity and naming"
    COMMON_STEM = "common word stem"
    PROXIMITY = "proximity"

    @property
    def strength(self) -> int:
        return RELATIONSHIP_STRENGTH[self]


RELATIONSHIP_STRENGTH = {
    RelationshipBasis.NAMING_PATTERN: 3,
    RelationshipBasis.PROXIMITY_AND_NAMING: 2,
    RelationshipBasis.COMMON_STEM: 1,
    RelationshipBasis.PROXIMITY: 0,
}


@dataclass(frozen=True)
class RawHook:
    """A declaration call site as seen by the visitor, before file context is added."""
    name: str
    kind: HookKind
    line: int
    function_call: str
    docblock: Optional[str] = None


@dataclass(frozen=True)
class RawListener:
    """A subscription call site as seen by the visitor."""
    hook_name: str
    kind: HookKind
    callback: str
    priority: int
    accepted_args: int
    line: int


@dataclass(frozen=True)
class ContextLine:
    number: int
    text: str
    is_highlighted: bool = False


@dataclass(frozen=True)
class HookSubscription:
    target_name: str
    kind: HookKind
    callback: str
    priority: int
    accepted_args: int
    file: str
    line: int


@dataclass(frozen=True)
class RelationshipEdge:
    name: str
    kind: HookKind
    basis: RelationshipBasis


@dataclass
class HookDeclaration:
    name: str
    kind: HookKind
    file: str
    line: int
    function_call: str
    is_platform_hook: bool = False
    docblock: Optional[str] = None
    context: List[ContextLine] = field(default_factory=list)

    # Filled in by the relationship analyzer
    related: List[RelationshipEdge] = field(default_factory=list)
    subscribers: List[HookSubscription] = field(default_factory=list)

    @property
    def context_start(self) -> int:
        return self.context[0].number if self.context else self.line

    @property
    def tokens(self) -> List[str]:
        """Non-empty underscore-delimited parts of the name."""
        return [part for part in self.name.split("_") if part]


@dataclass(frozen=True)
class ParseFailure:
    file: str
    reason: str


@dataclass
class FileExtraction:
    file: str
    hooks: List[HookDeclaration] = field(default_factory=list)
    subscriptions: List[HookSubscription] = field(default_factory=list)


@dataclass
class ScanResult:
    hooks: List[HookDeclaration] = field(default_factory=list)
    failures: List[ParseFailure] = field(default_factory=list)
    files_scanned: int = 0

    @property
    def total(self) -> int:
        return len(self.hooks)

    @property
    def action_count(self) -> int:
        return sum(1 for h in self.hooks if h.kind == HookKind.ACTION)

    @property
    def filter_count(self) -> int:
        return sum(1 for h in self.hooks if h.kind == HookKind.FILTER)

    @property
    def with_subscribers_count(self) -> int:
        return sum(1 for h in self.hooks if h.subscribers)

    @property
    def is_empty(self) -> bool:
        return not self.hooks
