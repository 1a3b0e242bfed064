"""
visitor.py - Finds hook declarations and subscriptions in a PHP syntax tree.

Works on tree-sitter nodes produced by the PHP grammar. The walk is a pure
function of the tree: every call returns fresh lists, nothing is carried over
from one file to the next.
"""

import re
from typing import List, Optional, Tuple

from .config import (
    DECLARATION_FUNCTIONS,
    SUBSCRIPTION_FUNCTIONS,
    DEFAULT_PRIORITY,
    DEFAULT_ACCEPTED_ARGS,
)
from .models import HookKind, RawHook, RawListener

# ==============================================================================
# NODE TYPES
# ==============================================================================

CALL_NODE = "function_call_expression"
CALLEE_NAME_NODES = {"name", "qualified_name"}

SINGLE_QUOTED_NODES = {"string"}
DOUBLE_QUOTED_NODES = {"encapsed_string"}
STRING_PART_NODES = {"string_content", "string_value", "escape_sequence"}
INTEGER_NODE = "integer"
VARIABLE_NODE = "variable_name"
ARRAY_NODE = "array_creation_expression"
ARRAY_ELEMENT_NODE = "array_element_initializer"
CLOSURE_NODES = {"anonymous_function", "anonymous_function_creation_expression"}
ARROW_FUNCTION_NODE = "arrow_function"
COMMENT_NODE = "comment"

# Nodes whose direct children are statements
STATEMENT_CONTAINERS = {
    "program", "compound_statement", "declaration_list", "colon_block",
    "case_statement", "default_statement", "switch_block",
}

DOUBLE_QUOTED_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "v": "\v", "f": "\f", "e": "\x1b",
    "\\": "\\", "$": "$", '"': '"',
}

CLOSURE_DESCRIPTOR = "{closure}"
ARROW_FUNCTION_DESCRIPTOR = "{arrow function}"
UNKNOWN_DESCRIPTOR = "{unknown}"


# ==============================================================================
# TREE WALK
# ==============================================================================

def visit(tree, include_docblocks: bool = False) -> Tuple[List[RawHook], List[RawListener]]:
    """Collect hook declarations and subscriptions from a parsed tree."""
    root = getattr(tree, "root_node", tree)
    hooks: List[RawHook] = []
    listeners: List[RawListener] = []

    for node in iter_nodes(root):
        if node.type != CALL_NODE:
            continue

        function_name = callee_name(node)
        if function_name in DECLARATION_FUNCTIONS:
            hook = process_hook_definition(node, function_name, include_docblocks)
            if hook is not None:
                hooks.append(hook)
        elif function_name in SUBSCRIPTION_FUNCTIONS:
            listener = process_hook_listener(node, function_name)
            if listener is not None:
                listeners.append(listener)

    return hooks, listeners


def iter_nodes(root):
    """Yield every node below root in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def callee_name(call_node) -> Optional[str]:
    """Name of the called function, with any leading namespace separator removed."""
    function = call_node.child_by_field_name("function")
    if function is None or function.type not in CALLEE_NAME_NODES:
        return None
    return node_text(function).lstrip("\\")


def call_arguments(call_node) -> list:
    """Value expressions of a call's arguments, in order."""
    arguments = call_node.child_by_field_name("arguments")
    if arguments is None:
        return []
    values = []
    for arg in arguments.named_children:
        if arg.type != "argument":
            continue
        value = last_value_child(arg)
        if value is not None:
            values.append(value)
    return values


def last_value_child(node):
    """Last named child that is not a comment (skips named-argument labels)."""
    children = [c for c in node.named_children if c.type != COMMENT_NODE]
    return children[-1] if children else None


# ==============================================================================
# HOOK DEFINITIONS & LISTENERS
# ==============================================================================

def process_hook_definition(node, function_name: str,
                            include_docblocks: bool) -> Optional[RawHook]:
    args = call_arguments(node)
    if not args:
        return None

    hook_name = string_value(args[0])
    if not hook_name:
        return None

    docblock = preceding_doc_comment(node) if include_docblocks else None

    return RawHook(
        name=hook_name,
        kind=hook_kind(function_name),
        line=node.start_point[0] + 1,
        function_call=function_name,
        docblock=docblock,
    )


def process_hook_listener(node, function_name: str) -> Optional[RawListener]:
    args = call_arguments(node)
    if len(args) < 2:
        return None

    hook_name = string_value(args[0])
    if not hook_name:
        return None

    priority = DEFAULT_PRIORITY
    if len(args) > 2:
        priority = integer_value(args[2], DEFAULT_PRIORITY)

    accepted_args = DEFAULT_ACCEPTED_ARGS
    if len(args) > 3:
        accepted_args = integer_value(args[3], DEFAULT_ACCEPTED_ARGS)

    return RawListener(
        hook_name=hook_name,
        kind=hook_kind(function_name),
        callback=describe_callback(args[1]),
        priority=priority,
        accepted_args=accepted_args,
        line=node.start_point[0] + 1,
    )


def hook_kind(function_name: str) -> HookKind:
    kind = DECLARATION_FUNCTIONS.get(function_name) or SUBSCRIPTION_FUNCTIONS[function_name]
    return HookKind(kind)


def describe_callback(value) -> str:
    """Human-readable rendering of a callback argument. Never raises."""
    if value is None:
        return UNKNOWN_DESCRIPTOR

    literal = string_value(value)
    if literal is not None:
        return literal

    if value.type == ARRAY_NODE:
        elements = array_elements(value)
        if len(elements) >= 2:
            receiver = elements[0]
            method = elements[1]

            receiver_str = ""
            if receiver is not None and receiver.type == VARIABLE_NODE:
                receiver_str = node_text(receiver)
            elif receiver is not None:
                receiver_str = string_value(receiver) or ""

            method_str = string_value(method) if method is not None else None

            if receiver_str and method_str:
                return receiver_str + "::" + method_str

    if value.type in CLOSURE_NODES:
        return CLOSURE_DESCRIPTOR
    if value.type == ARROW_FUNCTION_NODE:
        return ARROW_FUNCTION_DESCRIPTOR

    return UNKNOWN_DESCRIPTOR


def array_elements(array_node) -> list:
    """Value expression of each element of an array literal (keys are ignored)."""
    elements = []
    for item in array_node.named_children:
        if item.type == ARRAY_ELEMENT_NODE:
            elements.append(last_value_child(item))
    return elements


# ==============================================================================
# LITERALS
# ==============================================================================

def node_text(node) -> str:
    return node.text.decode("utf-8", errors="replace")


def string_value(node) -> Optional[str]:
    """Value of a literal string node, or None for anything dynamic."""
    if node.type in SINGLE_QUOTED_NODES:
        inner = _strip_quotes(node_text(node))
        if inner is None:
            return None
        return re.sub(r"\\([\\'])", r"\1", inner)

    if node.type in DOUBLE_QUOTED_NODES:
        for child in node.named_children:
            if child.type not in STRING_PART_NODES:
                # Interpolated variable or expression
                return None
        inner = _strip_quotes(node_text(node))
        if inner is None:
            return None
        return re.sub(
            r"\\(.)",
            lambda m: DOUBLE_QUOTED_ESCAPES.get(m.group(1), m.group(0)),
            inner,
        )

    return None


def _strip_quotes(raw: str) -> Optional[str]:
    if raw[:1] in ("b", "B"):
        raw = raw[1:]
    if len(raw) < 2 or raw[0] not in "'\"" or raw[-1] != raw[0]:
        return None
    return raw[1:-1]


def integer_value(node, default: int) -> int:
    """Value of an integer literal node, or the default for anything else."""
    if node.type != INTEGER_NODE:
        return default
    parsed = parse_php_integer(node_text(node))
    return default if parsed is None else parsed


def parse_php_integer(text: str) -> Optional[int]:
    """Parse a PHP integer literal: decimal, 0x hex, 0b binary, 0o / leading-zero octal."""
    digits = text.replace("_", "").lower()
    try:
        if digits.startswith("0x"):
            return int(digits[2:], 16)
        if digits.startswith("0b"):
            return int(digits[2:], 2)
        if digits.startswith("0o"):
            return int(digits[2:], 8)
        if len(digits) > 1 and digits.startswith("0"):
            return int(digits[1:], 8)
        return int(digits, 10)
    except ValueError:
        return None


# ==============================================================================
# DOC COMMENTS
# ==============================================================================

def enclosing_statement(node):
    """Walk up to the node that sits directly inside a statement list."""
    current = node
    while current.parent is not None and current.parent.type not in STATEMENT_CONTAINERS:
        current = current.parent
    return current


def preceding_doc_comment(node) -> Optional[str]:
    """Block comment immediately before the statement holding this call, verbatim."""
    statement = enclosing_statement(node)
    previous = statement.prev_named_sibling
    if previous is None or previous.type != COMMENT_NODE:
        return None

    text = node_text(previous)
    if not text.startswith("/*"):
        return None
    return text
