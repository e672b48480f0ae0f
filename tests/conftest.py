"""Shared helpers for parsing inline source snippets."""
from pathlib import Path
from typing import Iterator

from tree_sitter import Node

from schemafield.analyzer.parser import LanguageParser, ParsedFile


FIXTURES_DIR = Path(__file__).parent / 'fixtures'

DEFAULT_PATHS = {
    'go': 'main.go',
    'python': 'main.py',
    'javascript': 'main.js',
    'typescript': 'main.ts',
}


def parse_snippet(source: str, language: str = 'go', path: str = None) -> ParsedFile:
    """Parse source text the same way the CLI parses files on disk."""
    code = source.encode('utf-8')
    tree = LanguageParser(language).parse_source(code)
    return ParsedFile(path=Path(path or DEFAULT_PATHS[language]), language=language,
                      source=code, tree=tree)


def go_func(body: str) -> str:
    """Wrap statements in a Go function inside package main."""
    return f"package main\n\nfunc run(d *schema.ResourceData) {{\n{body}\n}}\n"


def walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from walk(child)
