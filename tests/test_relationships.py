"""Tests for listener binding and relationship inference."""

from typing import List

from hook_map.config import ScanOptions
from hook_map.models import (
    HookDeclaration,
    HookKind,
    HookSubscription,
    RelationshipBasis,
    RelationshipEdge,
)
from hook_map.relationships import bind_subscribers, infer_relationships, rank_related


def hook(name: str, line: int, file: str = "a.php", kind: HookKind = HookKind.ACTION) -> HookDeclaration:
    return HookDeclaration(name=name, kind=kind, file=file, line=line, function_call="do_action")


def sub(target: str, callback: str, priority: int = 10) -> HookSubscription:
    return HookSubscription(
        target_name=target,
        kind=HookKind.ACTION,
        callback=callback,
        priority=priority,
        accepted_args=1,
        file="b.php",
        line=1,
    )


def related_of(hooks: List[HookDeclaration], name: str):
    for h in hooks:
        if h.name == name:
            return [(e.name, e.basis) for e in h.related]
    raise KeyError(name)


# ------------------------------------------------------------------
# Listener binding
# ------------------------------------------------------------------


def test_subscribers_sorted_by_priority_stable() -> None:
    hooks = [hook("save_post", 1)]
    subs = [
        sub("save_post", "late", 20),
        sub("save_post", "first_default", 10),
        sub("save_post", "early", 5),
        sub("save_post", "second_default", 10),
        sub("other", "unrelated", 1),
    ]
    bind_subscribers(hooks, subs)
    assert [s.callback for s in hooks[0].subscribers] == [
        "early", "first_default", "second_default", "late",
    ]


def test_unmatched_hook_gets_empty_list() -> None:
    hooks = [hook("lonely", 1)]
    bind_subscribers(hooks, [sub("other", "cb")])
    assert hooks[0].subscribers == []


def test_every_declaration_with_the_name_is_bound() -> None:
    hooks = [hook("dup", 1, "a.php"), hook("dup", 5, "b.php")]
    bind_subscribers(hooks, [sub("dup", "cb")])
    assert [len(h.subscribers) for h in hooks] == [1, 1]


# ------------------------------------------------------------------
# Relationship inference
# ------------------------------------------------------------------


def test_before_after_naming_pattern_both_directions() -> None:
    hooks = [hook("before_save", 10), hook("after_save", 12)]
    infer_relationships(hooks)
    assert related_of(hooks, "before_save") == [("after_save", RelationshipBasis.NAMING_PATTERN)]
    assert related_of(hooks, "after_save") == [("before_save", RelationshipBasis.NAMING_PATTERN)]


def test_naming_pattern_across_files() -> None:
    hooks = [hook("pre_import", 1, "a.php"), hook("post_import", 400, "b.php")]
    infer_relationships(hooks)
    assert related_of(hooks, "pre_import") == [("post_import", RelationshipBasis.NAMING_PATTERN)]


def test_three_member_group() -> None:
    hooks = [
        hook("init_upload", 1, "a.php"),
        hook("process_upload", 100, "b.php"),
        hook("complete_upload", 200, "c.php"),
    ]
    infer_relationships(hooks)
    assert related_of(hooks, "process_upload") == [
        ("init_upload", RelationshipBasis.NAMING_PATTERN),
        ("complete_upload", RelationshipBasis.NAMING_PATTERN),
    ]


def test_ajax_nopriv_pair() -> None:
    hooks = [hook("wp_ajax_vote", 1, "a.php"), hook("wp_ajax_nopriv_vote", 90, "b.php")]
    infer_relationships(hooks)
    assert related_of(hooks, "wp_ajax_vote") == [("wp_ajax_nopriv_vote", RelationshipBasis.NAMING_PATTERN)]


def test_common_stem_needs_two_shared_tokens() -> None:
    hooks = [
        hook("shop_save_cart", 1, "a.php"),
        hook("shop_save_order", 1, "b.php"),
        hook("blog_save_post", 1, "c.php"),
    ]
    infer_relationships(hooks)
    assert related_of(hooks, "shop_save_cart") == [("shop_save_order", RelationshipBasis.COMMON_STEM)]
    assert related_of(hooks, "blog_save_post") == []


def test_proximity_without_shared_tokens() -> None:
    hooks = [hook("alpha", 10), hook("beta_gamma", 13)]
    infer_relationships(hooks)
    assert related_of(hooks, "alpha") == [("beta_gamma", RelationshipBasis.PROXIMITY)]


def test_proximity_with_shared_token() -> None:
    hooks = [hook("alpha_one", 10), hook("alpha_two", 13)]
    infer_relationships(hooks)
    assert related_of(hooks, "alpha_one") == [("alpha_two", RelationshipBasis.PROXIMITY_AND_NAMING)]


def test_proximity_windows() -> None:
    hooks = [
        hook("alpha", 100),
        hook("beta", 106),        # too far for plain proximity
        hook("alpha_far", 115),   # shares a token, exactly at the edge
        hook("alpha_gone", 116),  # beyond the proximity range
        hook("gamma", 100, "other.php"),
    ]
    infer_relationships(hooks)
    assert related_of(hooks, "alpha") == [("alpha_far", RelationshipBasis.PROXIMITY_AND_NAMING)]


def test_related_is_capped_deduplicated_and_ordered() -> None:
    hooks = [hook("before_save_item", 50), hook("after_save_item", 51)]
    hooks += [hook("item_" + str(i), 50 + i) for i in range(2, 10)]
    hooks += [hook("x" + str(i), 45 + i) for i in range(0, 3)]
    infer_relationships(hooks)

    for h in hooks:
        names = [e.name for e in h.related]
        strengths = [e.basis.strength for e in h.related]
        assert len(h.related) <= 5
        assert len(names) == len(set(names))
        assert strengths == sorted(strengths, reverse=True)

    first = hooks[0].related
    assert first[0] == RelationshipEdge("after_save_item", HookKind.ACTION, RelationshipBasis.NAMING_PATTERN)
    assert len(first) == 5


def test_rank_related_keeps_strongest_occurrence() -> None:
    edges = [
        RelationshipEdge("b", HookKind.ACTION, RelationshipBasis.PROXIMITY),
        RelationshipEdge("a", HookKind.FILTER, RelationshipBasis.COMMON_STEM),
        RelationshipEdge("b", HookKind.ACTION, RelationshipBasis.NAMING_PATTERN),
        RelationshipEdge("c", HookKind.ACTION, RelationshipBasis.COMMON_STEM),
    ]
    ranked = rank_related(edges, 2)
    assert [(e.name, e.basis) for e in ranked] == [
        ("b", RelationshipBasis.NAMING_PATTERN),
        ("a", RelationshipBasis.COMMON_STEM),
    ]


def test_thresholds_are_configurable() -> None:
    hooks = [hook("alpha", 10), hook("beta", 18)]
    infer_relationships(hooks, ScanOptions(close_proximity_range=10))
    assert related_of(hooks, "alpha") == [("beta", RelationshipBasis.PROXIMITY)]


def test_inference_is_deterministic() -> None:
    def build():
        hs = [hook("before_run", 1), hook("after_run", 3), hook("run_load", 5), hook("load_run", 7, "b.php")]
        infer_relationships(hs)
        return [h.related for h in hs]

    assert build() == build()


def test_empty_name_parts_are_not_shared_tokens() -> None:
    hooks = [hook("alpha__one", 1), hook("beta__two", 10)]
    assert hooks[0].tokens == ["alpha", "one"]

    infer_relationships(hooks)
    # 9 lines apart: only a shared token could relate them
    assert related_of(hooks, "alpha__one") == []
    assert related_of(hooks, "beta__two") == []
