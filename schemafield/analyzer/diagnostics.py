"""Source positions and the diagnostics reported against them."""
from dataclasses import dataclass
from pathlib import Path
from tree_sitter import Node


MESSAGE_TEMPLATE = "schema field/component '{key}' not found in package"


@dataclass(frozen=True, order=True)
class Position:
    """A 1-based line/column location in a source file."""
    file_path: str
    line: int
    column: int

    @classmethod
    def of(cls, node: Node, file_path: str | Path) -> 'Position':
        """Resolve the start of a node. Columns count bytes, like go/token."""
        row, column = node.start_point[0], node.start_point[1]
        return cls(file_path=str(file_path), line=row + 1, column=column + 1)

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}"


@dataclass(frozen=True, order=True)
class Diagnostic:
    """A referenced field-path component with no matching declaration."""
    position: Position
    component: str

    @property
    def message(self) -> str:
        return MESSAGE_TEMPLATE.format(key=self.component)

    def to_dict(self) -> dict:
        return {'posn': str(self.position), 'message': self.message}

    def __str__(self) -> str:
        return f"{self.position}: {self.message}"
