"""Source file discovery and grouping into analysis units."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set


# Extensions scanned for each language accepted on the command line
LANGUAGE_EXTENSIONS = {
    'go': ['.go'],
    'python': ['.py'],
    'javascript': ['.js', '.jsx', '.mjs'],
    'typescript': ['.ts', '.tsx'],
}
LANGUAGE_EXTENSIONS['auto'] = sorted({ext for exts in LANGUAGE_EXTENSIONS.values() for ext in exts})

SCOPES = ('package', 'project')

# Vendored code, virtual environments, build output and Go test data
EXCLUDED_DIRS = {
    'venv', '.venv', 'env', '.virtualenv',
    'vendor', 'extern', 'third_party', '_internal',
    '.tox', 'site-packages',
    'dist', 'build', '__pycache__',
    'node_modules', 'testdata',
    '.git',
}

TEST_FILE_SUFFIXES = (
    '_test.go',
    '_test.py',
    '.test.js', '.spec.js', '.test.jsx', '.spec.jsx',
    '.test.ts', '.spec.ts', '.test.tsx', '.spec.tsx',
)


def strip_package_pattern(path: str | Path) -> Path:
    """Drop a trailing Go ``/...`` pattern: ``./...`` -> ``.``."""
    raw = str(path)
    if raw == '...' or raw.endswith('/...'):
        raw = raw[:-3].rstrip('/') or '.'
    return Path(raw)


def is_test_file(file_path: str | Path) -> bool:
    name = Path(file_path).name
    return (name.startswith('test_') and name.endswith('.py')) or name.endswith(TEST_FILE_SUFFIXES)


@dataclass
class AnalysisUnit:
    """Files that share one set of declarations."""
    name: str
    files: List[Path] = field(default_factory=list)


class FileDiscovery:
    """Find source files for a language below one or more paths."""

    def __init__(self, language: str = 'go', include_tests: bool = True,
                 extra_excluded_dirs: Optional[Iterable[str]] = None):
        """Initialize discovery.

        Args:
            language: Key of LANGUAGE_EXTENSIONS
            include_tests: Whether test files take part in the analysis
            extra_excluded_dirs: Directory names skipped on top of EXCLUDED_DIRS

        Raises:
            ValueError: If language is not supported
        """
        if language not in LANGUAGE_EXTENSIONS:
            raise ValueError(
                f"Unsupported language: {language}. "
                f"Choose one of: {', '.join(LANGUAGE_EXTENSIONS)}"
            )
        self.language = language
        self.extensions = set(LANGUAGE_EXTENSIONS[language])
        self.include_tests = include_tests
        self.excluded_dirs: Set[str] = EXCLUDED_DIRS | set(extra_excluded_dirs or ())

    def _accepts(self, file_path: Path) -> bool:
        if file_path.suffix.lower() not in self.extensions:
            return False
        return self.include_tests or not is_test_file(file_path)

    def _is_excluded(self, file_path: Path, root: Path) -> bool:
        # Only directories below the root count, the root itself may live anywhere
        try:
            parts = file_path.relative_to(root).parts[:-1]
        except ValueError:
            return False
        return any(part in self.excluded_dirs or part.startswith('.') for part in parts)

    def discover(self, path: str | Path) -> List[Path]:
        """Source files below a directory, or the path itself if it is a file.

        A trailing ``/...`` (Go package pattern) is accepted; directories are
        always scanned recursively.
        """
        root = strip_package_pattern(path)

        if root.is_file():
            return [root] if self._accepts(root) else []
        if not root.is_dir():
            return []

        files = [
            file_path for file_path in root.rglob('*')
            if file_path.is_file()
            and self._accepts(file_path)
            and not self._is_excluded(file_path, root)
        ]
        return sorted(files)

    def discover_all(self, paths: Iterable[str | Path]) -> List[Path]:
        seen: Dict[Path, None] = {}
        for path in paths:
            for file_path in self.discover(path):
                seen.setdefault(file_path, None)
        return list(seen)


def group_units(files: Iterable[Path], scope: str = 'package',
                project_name: str = '.') -> List[AnalysisUnit]:
    """Group files into analysis units.

    'package' puts each directory in its own unit, 'project' puts every
    file in a single unit named project_name.

    Raises:
        ValueError: If scope is not one of SCOPES
    """
    if scope == 'project':
        return [AnalysisUnit(name=project_name, files=list(files))]
    if scope != 'package':
        raise ValueError(f"Unsupported scope: {scope}. Choose one of: {', '.join(SCOPES)}")

    units: Dict[str, AnalysisUnit] = {}
    for file_path in files:
        directory = str(file_path.parent)
        units.setdefault(directory, AnalysisUnit(name=directory)).files.append(file_path)
    return [units[name] for name in sorted(units)]
