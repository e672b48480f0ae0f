"""Per-language classification of the tree-sitter nodes the checker inspects.

Every grammar names the same handful of syntactic roles differently
(a Go ``keyed_element`` is a Python ``pair``), so each supported language
maps its node types onto one closed set of kinds. The collectors only
ever reason about kinds, never about raw node type names.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, FrozenSet, List, Optional
from tree_sitter import Node


class NodeKind(Enum):
    """Syntactic roles relevant to schema field analysis."""
    STRING = auto()  # quoted string literal
    KEYED_ELEMENT = auto()  # key/value entry of a map/dict/object literal
    ELEMENT_WRAPPER = auto()  # transparent wrapper around a literal element (Go)
    ASSIGNMENT = auto()
    TARGET_LIST = auto()  # several left-hand targets of one assignment
    INDEX = auto()  # collection["key"]
    CALL = auto()
    MEMBER = auto()  # receiver.Method
    IDENTIFIER = auto()
    OTHER = auto()


@dataclass(frozen=True)
class Grammar:
    """Node kinds and field names for one tree-sitter grammar."""
    name: str
    kinds: Dict[str, NodeKind]
    key_field: str
    left_field: str
    index_field: str
    function_field: str
    member_field: str
    arguments_field: str
    # Characters that may precede the opening quote (Python r"", b"", f"")
    string_prefixes: str = ''
    # Child node types that make a string dynamic rather than literal
    interpolations: FrozenSet[str] = field(default_factory=frozenset)

    def kind(self, node: Optional[Node]) -> NodeKind:
        if node is None:
            return NodeKind.OTHER
        return self.kinds.get(node.type, NodeKind.OTHER)

    def string_value(self, node: Optional[Node], source: bytes) -> Optional[str]:
        """Return the contents of a quoted string literal, or None.

        Interpolated strings (f-strings with placeholders, template strings)
        are not literals and yield None.
        """
        if self.kind(node) is not NodeKind.STRING:
            return None
        if any(child.type in self.interpolations for child in node.children):
            return None

        text = node_text(node, source)
        if self.string_prefixes:
            text = text.lstrip(self.string_prefixes)

        for quote in ('"""', "'''", '"', "'", '`'):
            if len(text) >= 2 * len(quote) and text.startswith(quote) and text.endswith(quote):
                return text[len(quote):-len(quote)]
        return text

    def unwrap(self, node: Optional[Node]) -> Optional[Node]:
        """Strip ELEMENT_WRAPPER layers around an expression."""
        while node is not None and self.kind(node) is NodeKind.ELEMENT_WRAPPER:
            inner = named_children(node)
            node = inner[0] if inner else None
        return node


def node_text(node: Node, source: bytes) -> str:
    """Decode the source slice covered by a node."""
    return source[node.start_byte:node.end_byte].decode('utf-8', errors='ignore')


def named_children(node: Node) -> List[Node]:
    """Named children of a node, comments excluded."""
    return [child for child in node.named_children if child.type != 'comment']


_GO = Grammar(
    name='go',
    kinds={
        'interpreted_string_literal': NodeKind.STRING,
        'raw_string_literal': NodeKind.STRING,
        'keyed_element': NodeKind.KEYED_ELEMENT,
        'literal_element': NodeKind.ELEMENT_WRAPPER,
        'assignment_statement': NodeKind.ASSIGNMENT,
        'expression_list': NodeKind.TARGET_LIST,
        'index_expression': NodeKind.INDEX,
        'call_expression': NodeKind.CALL,
        'selector_expression': NodeKind.MEMBER,
        'identifier': NodeKind.IDENTIFIER,
    },
    key_field='key',
    left_field='left',
    index_field='index',
    function_field='function',
    member_field='field',
    arguments_field='arguments',
)

_PYTHON = Grammar(
    name='python',
    kinds={
        'string': NodeKind.STRING,
        'pair': NodeKind.KEYED_ELEMENT,
        'assignment': NodeKind.ASSIGNMENT,
        'augmented_assignment': NodeKind.ASSIGNMENT,
        'pattern_list': NodeKind.TARGET_LIST,
        'tuple_pattern': NodeKind.TARGET_LIST,
        'list_pattern': NodeKind.TARGET_LIST,
        'subscript': NodeKind.INDEX,
        'call': NodeKind.CALL,
        'attribute': NodeKind.MEMBER,
        'identifier': NodeKind.IDENTIFIER,
    },
    key_field='key',
    left_field='left',
    index_field='subscript',
    function_field='function',
    member_field='attribute',
    arguments_field='arguments',
    string_prefixes='rRbBuUfF',
    interpolations=frozenset({'interpolation'}),
)

_JS_KINDS = {
    'string': NodeKind.STRING,
    'pair': NodeKind.KEYED_ELEMENT,
    'assignment_expression': NodeKind.ASSIGNMENT,
    'augmented_assignment_expression': NodeKind.ASSIGNMENT,
    'subscript_expression': NodeKind.INDEX,
    'call_expression': NodeKind.CALL,
    'member_expression': NodeKind.MEMBER,
    'identifier': NodeKind.IDENTIFIER,
}


def _javascript_like(name: str) -> Grammar:
    # The typescript grammars extend the javascript one and share its node names
    return Grammar(
        name=name,
        kinds=dict(_JS_KINDS),
        key_field='key',
        left_field='left',
        index_field='index',
        function_field='function',
        member_field='property',
        arguments_field='arguments',
    )


GRAMMARS: Dict[str, Grammar] = {
    'go': _GO,
    'python': _PYTHON,
    'javascript': _javascript_like('javascript'),
    'typescript': _javascript_like('typescript'),
    'tsx': _javascript_like('tsx'),
}


def get_grammar(language: str) -> Grammar:
    """Look up the grammar for a parser language.

    Raises:
        ValueError: If language is not supported
    """
    try:
        return GRAMMARS[language]
    except KeyError:
        raise ValueError(f"Unsupported language: {language}") from None
