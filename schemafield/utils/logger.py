"""Terminal encoding detection with ASCII fallbacks for report glyphs.

Diagnostics and summaries use a few Unicode glyphs; terminals that cannot
render UTF-8 (legacy Windows consoles, some CI runners) get ASCII instead.
"""
import sys
import locale


# Glyphs used in report output and their ASCII replacements
ICON_MAP = {
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARN]',
    '→': '->',
    '•': '*',
    '…': '...',
    '│': '|',
    '─': '-',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (locale.Error, ValueError):
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding().replace('_', '-') in ('utf-8', 'utf8')


def sanitize_for_terminal(text: str, utf8: bool = None) -> str:
    """Replace report glyphs with ASCII equivalents on non-UTF-8 terminals.

    Args:
        text: Text potentially containing Unicode glyphs
        utf8: Override terminal detection (mainly for tests)

    Returns:
        str: Text safe for the current terminal
    """
    if utf8 is None:
        utf8 = is_utf8_capable()
    if utf8:
        return text

    for unicode_char, ascii_replacement in ICON_MAP.items():
        text = text.replace(unicode_char, ascii_replacement)
    return text
