"""schemafield CLI - flag accessor calls that reference undeclared schema fields."""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import typer
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from schemafield.utils.safe_console import SafeConsole
from schemafield.config import OUTPUT_FORMATS, __version__, get_config
from schemafield.analyzer.checker import DOC, NAME, FieldReferenceChecker
from schemafield.analyzer.diagnostics import Diagnostic
from schemafield.analyzer.discovery import (
    LANGUAGE_EXTENSIONS,
    SCOPES,
    FileDiscovery,
    group_units,
    strip_package_pattern,
)
from schemafield.analyzer.parser import LanguageParser

# Exit status when diagnostics were reported, as in go/analysis drivers
EXIT_DIAGNOSTICS = 3

# Pygments lexer per parser language, for --context output
LEXERS = {
    'go': 'go',
    'python': 'python',
    'javascript': 'javascript',
    'typescript': 'typescript',
    'tsx': 'tsx',
}

app = typer.Typer(
    name=NAME,
    help=DOC,
    add_completion=False
)
console = SafeConsole()
err_console = SafeConsole(stderr=True)


@dataclass
class UnitStats:
    """Per analysis unit counters for --verbose output."""
    name: str
    files: int
    declared: int
    referenced: int
    diagnostics: int


@dataclass
class AnalysisResult:
    """Everything one run of the checker produced."""
    diagnostics: Dict[str, List[Diagnostic]] = field(default_factory=dict)
    units: List[UnitStats] = field(default_factory=list)
    skipped: List[Tuple[Path, str]] = field(default_factory=list)
    sources: Dict[str, Tuple[str, bytes]] = field(default_factory=dict)

    @property
    def files_analyzed(self) -> int:
        return sum(unit.files for unit in self.units)

    @property
    def all_diagnostics(self) -> List[Diagnostic]:
        return sorted(d for diagnostics in self.diagnostics.values() for d in diagnostics)


def analyze_project(paths: List[str | Path], language: str = 'go', scope: str = 'package',
                    include_tests: bool = True, exclude_dirs: Optional[List[str]] = None,
                    project_name: str = '.') -> AnalysisResult:
    """Discover, parse and check source files.

    Each analysis unit gets a fresh checker, so declarations never leak
    between packages in 'package' scope.

    Args:
        paths: Files or directories to analyze
        language: Key of LANGUAGE_EXTENSIONS
        scope: 'package' (one unit per directory) or 'project' (one unit)
        include_tests: Whether test files take part
        exclude_dirs: Extra directory names to skip
        project_name: Unit name used in 'project' scope

    Returns:
        AnalysisResult with diagnostics grouped by unit name

    Raises:
        ValueError: If language or scope is not supported
    """
    discovery = FileDiscovery(language, include_tests=include_tests,
                              extra_excluded_dirs=exclude_dirs)
    files = discovery.discover_all(paths)
    units = group_units(files, scope=scope, project_name=project_name)

    result = AnalysisResult()
    parsers: Dict[str, LanguageParser] = {}

    for unit in units:
        checker = FieldReferenceChecker()
        analyzed = 0

        for file_path in unit.files:
            parser_language = LanguageParser.language_for(file_path)
            if parser_language not in parsers:
                parsers[parser_language] = LanguageParser(parser_language)

            parsed = parsers[parser_language].parse_file(file_path)
            if parsed is None:
                result.skipped.append((file_path, "unreadable"))
                continue
            if parsed.has_error:
                # Only syntactically valid trees reach the checker
                result.skipped.append((file_path, "syntax error"))
                continue

            checker.add_file(parsed)
            result.sources[str(file_path)] = (parsed.language, parsed.source)
            analyzed += 1

        if not analyzed:
            continue

        diagnostics = checker.diagnostics()
        if diagnostics:
            result.diagnostics[unit.name] = sorted(diagnostics)
        result.units.append(UnitStats(
            name=unit.name,
            files=analyzed,
            declared=len(checker.declared_keys),
            referenced=len(checker.occurrences),
            diagnostics=len(diagnostics),
        ))

    return result


def _print_context(diagnostic: Diagnostic, result: AnalysisResult, context: int):
    """Show the offending line with `context` lines around it."""
    language, source = result.sources[diagnostic.position.file_path]
    line = diagnostic.position.line
    console.print(Syntax(
        source.decode('utf-8', errors='replace'),
        LEXERS.get(language, language),
        theme="monokai",
        line_numbers=True,
        line_range=(max(1, line - context), line + context),
        highlight_lines={line},
    ))


def _print_text(result: AnalysisResult, context: int):
    for diagnostic in result.all_diagnostics:
        console.out(str(diagnostic), highlight=False)
        if context >= 0:
            _print_context(diagnostic, result, context)


def _print_table(result: AnalysisResult):
    table = Table(title="Unknown Schema Field References")
    table.add_column("Position", style="cyan", no_wrap=True)
    table.add_column("Field", style="bold yellow")
    table.add_column("Message", style="magenta")

    for diagnostic in result.all_diagnostics:
        table.add_row(
            escape(str(diagnostic.position)),
            escape(diagnostic.component),
            escape(diagnostic.message),
        )

    console.print(table)


def _print_json(result: AnalysisResult):
    payload = {
        unit: {NAME: [diagnostic.to_dict() for diagnostic in diagnostics]}
        for unit, diagnostics in sorted(result.diagnostics.items())
    }
    console.out(json.dumps(payload, indent=2), highlight=False)


def _print_verbose(result: AnalysisResult):
    for file_path, reason in result.skipped:
        err_console.print(f"[yellow]⚠ Skipped {escape(str(file_path))}: {reason}[/yellow]", soft_wrap=True)

    table = Table(title="Analysis Units", show_header=True, header_style="bold cyan")
    table.add_column("Unit", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Declared", justify="right", style="green")
    table.add_column("Referenced", justify="right")
    table.add_column("Diagnostics", justify="right", style="red")

    for unit in result.units:
        table.add_row(escape(unit.name), str(unit.files), str(unit.declared),
                      str(unit.referenced), str(unit.diagnostics))

    err_console.print(table)


def _version_callback(value: bool):
    if value:
        console.print(f"{NAME} {__version__}")
        raise typer.Exit()


@app.command()
def check(
    paths: Optional[List[str]] = typer.Argument(None, help="Files or directories to analyze (default: current directory)"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help=f"Language to analyze ({', '.join(LANGUAGE_EXTENSIONS)})"),
    scope: Optional[str] = typer.Option(None, "--scope", help="'package': declarations are shared per directory; 'project': across all files"),
    tests: Optional[bool] = typer.Option(None, "--tests/--no-tests", help="Include test files in the analysis"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help=f"Output format ({', '.join(OUTPUT_FORMATS)})"),
    context: int = typer.Option(-1, "--context", "-c", help="Display offending line with this many lines of context (text format)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Report skipped files and per-unit statistics"),
):
    """Report accessor calls whose field path names an undeclared schema field."""
    try:
        config = get_config()
    except ValueError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)

    language = language or config.language
    scope = scope or config.scope
    include_tests = config.include_tests if tests is None else tests
    output_format = output_format or config.output_format
    paths = paths or ["."]

    for option, value, choices in (
        ("--language", language, LANGUAGE_EXTENSIONS),
        ("--scope", scope, SCOPES),
        ("--format", output_format, OUTPUT_FORMATS),
    ):
        if value not in choices:
            err_console.print(
                f"[bold red]Error:[/bold red] Invalid {option} {escape(repr(value))}. "
                f"Choose one of: {', '.join(choices)}",
                soft_wrap=True,
            )
            raise typer.Exit(1)

    for path in paths:
        if not strip_package_pattern(path).exists():
            err_console.print(f"[bold red]Error:[/bold red] Path does not exist: {escape(path)}", soft_wrap=True)
            raise typer.Exit(1)

    result = analyze_project(
        paths, language=language, scope=scope, include_tests=include_tests,
        exclude_dirs=config.exclude_dirs, project_name=paths[0],
    )

    if verbose:
        _print_verbose(result)

    if not result.files_analyzed:
        err_console.print(f"[bold red]Error:[/bold red] No {language} source files to analyze")
        raise typer.Exit(1)

    diagnostics = result.all_diagnostics

    if output_format == 'json':
        _print_json(result)
        # JSON consumers read the payload, not the exit status
        return

    if output_format == 'table' and diagnostics:
        _print_table(result)
    else:
        _print_text(result, context)

    if diagnostics:
        files = len({d.position.file_path for d in diagnostics})
        err_console.print(
            f"[bold red]✗ {len(diagnostics)} unknown schema field reference(s) in {files} file(s)[/bold red]"
        )
        raise typer.Exit(EXIT_DIAGNOSTICS)

    err_console.print(f"[bold green]✓ No unknown schema field references in {result.files_analyzed} file(s)[/bold green]")


@app.command()
def languages():
    """List supported languages and the file extensions scanned for each."""
    table = Table(title="Supported Languages", show_header=True, header_style="bold cyan")
    table.add_column("Language", style="cyan")
    table.add_column("Extensions", style="green")

    for language, extensions in LANGUAGE_EXTENSIONS.items():
        table.add_row(language, ", ".join(extensions))

    console.print(table)


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True,
                                 help="Show the version and exit"),
):
    """schemafield - checks for invalid schema field references in HasChange/Get/Set/etc."""
    pass


if __name__ == "__main__":
    app()
