"""Static discovery of WordPress hooks and the listeners attached to them."""

from .config import ScanOptions, is_platform_hook
from .models import (
    HookDeclaration,
    HookKind,
    HookMapError,
    HookSubscription,
    ParseFailure,
    RelationshipBasis,
    RelationshipEdge,
    ScanResult,
    SourceNotFoundError,
)
from .scanner import scan_directory, scan_sources

__version__ = "0.1.0"
