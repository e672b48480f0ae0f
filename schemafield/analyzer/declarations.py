"""Declared schema field names.

Two syntactic shapes declare a field:

    map[string]*pluginsdk.Schema{
        "name": {              <--- key of a composite literal
            Type: pluginsdk.TypeString,
        },
    }

    s["slice_service_type"] = &pluginsdk.Schema{...}   <--- indexed assignment
"""
from typing import Optional, Set
from tree_sitter import Node

from .grammar import Grammar, NodeKind, named_children


def get_composite_literal_key(node: Node, grammar: Grammar, source: bytes) -> Optional[str]:
    """Return the string key of a key/value literal element, if it has one."""
    if grammar.kind(node) is not NodeKind.KEYED_ELEMENT:
        return None

    key = node.child_by_field_name(grammar.key_field)
    if key is None:
        # Older grammars do not label the key, it is always the first element
        children = named_children(node)
        key = children[0] if children else None

    return grammar.string_value(grammar.unwrap(key), source)


def get_string_literal_in_assignment(node: Node, grammar: Grammar, source: bytes) -> Optional[str]:
    """Return the string index of the first indexed assignment target.

    Only the first target with a literal index counts:
    ``s["a"], s["b"] = x, y`` declares "a".
    """
    if grammar.kind(node) is not NodeKind.ASSIGNMENT:
        return None

    left = node.child_by_field_name(grammar.left_field)
    if left is None:
        return None
    targets = named_children(left) if grammar.kind(left) is NodeKind.TARGET_LIST else [left]

    for target in targets:
        if grammar.kind(target) is not NodeKind.INDEX:
            continue
        value = grammar.string_value(target.child_by_field_name(grammar.index_field), source)
        if value is not None:
            return value
    return None


class DeclarationCollector:
    """Accumulates the set of declared field names across visited nodes."""

    def __init__(self):
        self.keys: Set[str] = set()

    def visit(self, node: Node, grammar: Grammar, source: bytes) -> None:
        key = get_composite_literal_key(node, grammar, source)
        if key is not None:
            self.keys.add(key)

        key = get_string_literal_in_assignment(node, grammar, source)
        if key is not None:
            self.keys.add(key)
