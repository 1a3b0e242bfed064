"""
relationships.py - Correlates hooks after every file has been extracted.

Two passes over the whole collection:
  1. bind_subscribers: attach add_action/add_filter calls to the hooks they target.
  2. infer_relationships: propose related hooks from naming conventions and
     source proximity.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Set

from .config import ScanOptions
from .models import (
    HookDeclaration,
    HookSubscription,
    RelationshipBasis,
    RelationshipEdge,
)


# ==============================================================================
# LISTENER BINDING
# ==============================================================================

def bind_subscribers(hooks: List[HookDeclaration],
                     subscriptions: List[HookSubscription]) -> None:
    """Attach subscriptions to every declaration with the same name, lowest priority first."""
    by_name: Dict[str, List[HookSubscription]] = defaultdict(list)
    for sub in subscriptions:
        by_name[sub.target_name].append(sub)

    for hook in hooks:
        # sorted() is stable, so equal priorities keep discovery order
        hook.subscribers = sorted(by_name.get(hook.name, []), key=lambda s: s.priority)


# ==============================================================================
# RELATIONSHIP INFERENCE
# ==============================================================================

def infer_relationships(hooks: List[HookDeclaration],
                        options: Optional[ScanOptions] = None) -> None:
    """Fill in `related` for every hook."""
    options = options or ScanOptions()

    name_table: Dict[str, List[int]] = defaultdict(list)
    for index, hook in enumerate(hooks):
        name_table[hook.name].append(index)

    token_sets = [set(hook.tokens) for hook in hooks]

    # Computed for every hook before any is assigned, so no pass sees partial results
    all_related = []
    for index in range(len(hooks)):
        candidates: List[RelationshipEdge] = []
        candidates.extend(_naming_pattern_matches(index, hooks, name_table, options))
        candidates.extend(_common_stem_matches(index, hooks, token_sets, options))
        candidates.extend(_proximity_matches(index, hooks, token_sets, options))
        all_related.append(rank_related(candidates, options.max_related))

    for hook, related in zip(hooks, all_related):
        hook.related = related


def rank_related(candidates: List[RelationshipEdge], limit: int) -> List[RelationshipEdge]:
    """Strongest first, one edge per related name, at most `limit` edges."""
    ordered = sorted(candidates, key=lambda e: e.basis.strength, reverse=True)

    unique: List[RelationshipEdge] = []
    seen: Set[str] = set()
    for edge in ordered:
        if edge.name in seen:
            continue
        unique.append(edge)
        seen.add(edge.name)
        if len(unique) >= limit:
            break
    return unique


def _edge(hook: HookDeclaration, basis: RelationshipBasis) -> RelationshipEdge:
    return RelationshipEdge(name=hook.name, kind=hook.kind, basis=basis)


def _naming_pattern_matches(index: int, hooks: List[HookDeclaration],
                            name_table: Dict[str, List[int]],
                            options: ScanOptions) -> List[RelationshipEdge]:
    """before_x <-> after_x, pre_x <-> post_x, and the other configured prefix groups."""
    hook_name = hooks[index].name
    matches = []

    for group in options.naming_pattern_groups:
        for prefix in group:
            if not hook_name.startswith(prefix):
                continue
            base_name = hook_name[len(prefix):]

            for other_prefix in group:
                if other_prefix == prefix:
                    continue
                for j in name_table.get(other_prefix + base_name, []):
                    if j != index:
                        matches.append(_edge(hooks[j], RelationshipBasis.NAMING_PATTERN))

    return matches


def _common_stem_matches(index: int, hooks: List[HookDeclaration],
                         token_sets: List[Set[str]],
                         options: ScanOptions) -> List[RelationshipEdge]:
    hook_name = hooks[index].name
    matches = []

    for stem in options.common_stems:
        if stem not in hook_name:
            continue
        for j, other in enumerate(hooks):
            if j == index or other.name == hook_name or stem not in other.name:
                continue
            shared = token_sets[index] & token_sets[j]
            if len(shared) >= options.min_shared_stem_tokens:
                matches.append(_edge(other, RelationshipBasis.COMMON_STEM))

    return matches


def _proximity_matches(index: int, hooks: List[HookDeclaration],
                       token_sets: List[Set[str]],
                       options: ScanOptions) -> List[RelationshipEdge]:
    hook = hooks[index]
    matches = []

    for j, other in enumerate(hooks):
        if j == index or other.file != hook.file:
            continue
        distance = abs(other.line - hook.line)
        if distance > options.proximity_range:
            continue

        shared = token_sets[index] & token_sets[j]
        if len(shared) >= options.min_shared_proximity_tokens:
            matches.append(_edge(other, RelationshipBasis.PROXIMITY_AND_NAMING))
        elif distance <= options.close_proximity_range:
            matches.append(_edge(other, RelationshipBasis.PROXIMITY))

    return matches
