"""Field reference checker: cross-checks referenced components against declarations."""
from typing import Dict, Iterable, List, Set

from .declarations import DeclarationCollector
from .diagnostics import Diagnostic, Position
from .grammar import get_grammar
from .parser import ParsedFile
from .references import ReferenceCollector


NAME = "schemafield"
DOC = "checks for invalid schema field references in HasChange/Get/Set/etc."


def cross_check(declared: Set[str], occurrences: Dict[str, List[Position]]) -> List[Diagnostic]:
    """One diagnostic per position of every component that was never declared."""
    diagnostics = []
    for component, positions in occurrences.items():
        if component in declared:
            continue
        for position in positions:
            diagnostics.append(Diagnostic(position=position, component=component))
    return diagnostics


class FieldReferenceChecker:
    """Collects declarations and references over one set of files.

    A checker owns its accumulators; analyse each independent file set
    with a fresh instance.
    """

    def __init__(self):
        self.declarations = DeclarationCollector()
        self.references = ReferenceCollector()

    def add_file(self, parsed: ParsedFile) -> None:
        """Walk a parsed file depth-first, feeding both collectors."""
        grammar = get_grammar(parsed.language)
        stack = [parsed.tree.root_node]
        while stack:
            node = stack.pop()
            self.declarations.visit(node, grammar, parsed.source)
            self.references.visit(node, grammar, parsed)
            stack.extend(reversed(node.children))

    @property
    def declared_keys(self) -> Set[str]:
        return self.declarations.keys

    @property
    def occurrences(self) -> Dict[str, List[Position]]:
        return self.references.occurrences

    def diagnostics(self) -> List[Diagnostic]:
        return cross_check(self.declared_keys, self.occurrences)


def check_files(files: Iterable[ParsedFile]) -> List[Diagnostic]:
    """Run a fresh checker over a file set and return its diagnostics."""
    checker = FieldReferenceChecker()
    for parsed in files:
        checker.add_file(parsed)
    return checker.diagnostics()
