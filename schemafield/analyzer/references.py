"""Field-path references made through accessor calls.

Looks for calls such as::

    if d.HasChange("name") {
    v := d.Get("block.0.inner")

and records every component of the field path with the position of the
string literal it came from.
"""
import re
from typing import Dict, List, Optional
from tree_sitter import Node

from .diagnostics import Position
from .grammar import Grammar, NodeKind, named_children, node_text
from .parser import ParsedFile


ACCESSOR_NAMES = frozenset({'HasChange', 'HasChanges', 'Get', 'Set', 'GetOk', 'GetChange'})

# Accessors taking any number of field paths; the others take exactly one
MULTI_ARGUMENT_ACCESSORS = frozenset({'HasChanges'})

PATH_SEPARATOR = '.'

# "block.#" asks for the number of elements in a list or set
COUNT_SENTINEL = '#'

_INTEGER = re.compile(r'[+-]?[0-9]+')

# Range of a 64-bit int, the widest value an index component can hold
INDEX_MIN, INDEX_MAX = -2**63, 2**63 - 1


def get_function_name(node: Node, grammar: Grammar, source: bytes) -> Optional[str]:
    """Name of the called function: ``Method`` for ``recv.Method()``, ``Fn`` for ``Fn()``."""
    if grammar.kind(node) is not NodeKind.CALL:
        return None

    callee = node.child_by_field_name(grammar.function_field)
    kind = grammar.kind(callee)
    if kind is NodeKind.MEMBER:
        member = callee.child_by_field_name(grammar.member_field)
        return node_text(member, source) if member is not None else None
    if kind is NodeKind.IDENTIFIER:
        return node_text(callee, source)
    return None


def get_function_arguments(node: Node, grammar: Grammar) -> List[Node]:
    """Argument expressions of a call, in source order."""
    if grammar.kind(node) is not NodeKind.CALL:
        return []
    arguments = node.child_by_field_name(grammar.arguments_field)
    if arguments is None:
        return []
    return named_children(arguments)


def get_argument_components(argument: Node, grammar: Grammar, source: bytes) -> List[str]:
    """Split a string-literal field path on dots; non-literals give nothing."""
    value = grammar.string_value(argument, source)
    if value is None:
        return []
    return value.split(PATH_SEPARATOR)


def is_index_or_sentinel(component: str) -> bool:
    """List indices and count markers are never schema field names."""
    if component == COUNT_SENTINEL:
        return True
    if _INTEGER.fullmatch(component) is None:
        return False
    # Leading zeros do not count towards the width
    if len(component.lstrip("+-").lstrip("0")) > len(str(INDEX_MAX)):
        return False
    return INDEX_MIN <= int(component) <= INDEX_MAX


class ReferenceCollector:
    """Accumulates component -> positions for every accessor call visited."""

    def __init__(self):
        self.occurrences: Dict[str, List[Position]] = {}

    def visit(self, node: Node, grammar: Grammar, parsed: ParsedFile) -> None:
        name = get_function_name(node, grammar, parsed.source)
        if name not in ACCESSOR_NAMES:
            return

        arguments = get_function_arguments(node, grammar)
        if name not in MULTI_ARGUMENT_ACCESSORS:
            arguments = arguments[:1]

        for argument in arguments:
            components = get_argument_components(argument, grammar, parsed.source)
            if not components:
                continue
            position = Position.of(argument, parsed.path)
            for component in components:
                if is_index_or_sentinel(component):
                    continue
                self.occurrences.setdefault(component, []).append(position)
