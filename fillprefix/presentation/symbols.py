"""
Symbols — Visual vocabulary for table output

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Also provides safe_print(): encoding-safe printing, since matchers are
arbitrary user text.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional


# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '…': '...',
    '–': '-',
    '—': '--',
    '•': '*',
    '·': '.',
    '●': '[G]',
    '○': '[L]',
    '✓': '[OK]',
    '✗': '[X]',
    '⧗': '[P]',
}


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Handles UnicodeEncodeError by replacing unencodable characters
    with ASCII equivalents or '?' as last resort.
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            # Last resort: replace all unencodable chars with ?
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


@dataclass(frozen=True)
class SymbolSet:
    """Symbols used when rendering tables and queues."""
    # Scope markers
    global_scope: str
    local_scope: str

    # Entry/queue states
    pending: str
    sentinel: str

    # Status markers
    check_pass: str
    check_warn: str
    check_fail: str
    arrow: str
    bullet: str

    # Text truncation
    ellipsis: str


UNICODE = SymbolSet(
    global_scope='●',
    local_scope='○',
    pending='⧗',
    sentinel='⚓',
    check_pass='✓',
    check_warn='⚠',
    check_fail='✗',
    arrow='→',
    bullet='•',
    ellipsis='…',
)

ASCII = SymbolSet(
    global_scope='[G]',
    local_scope='[L]',
    pending='[P]',
    sentinel='^',
    check_pass='[OK]',
    check_warn='[!]',
    check_fail='[X]',
    arrow='->',
    bullet='*',
    ellipsis='...',
)


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    # Explicit environment override
    if os.environ.get('FILLPREFIX_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('FILLPREFIX_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False
        if 'utf' in encoding_lower:
            return True

    lang = os.environ.get('LANG', '').lower()
    lc_all = os.environ.get('LC_ALL', '').lower()
    if 'utf-8' in lang or 'utf8' in lang or 'utf-8' in lc_all or 'utf8' in lc_all:
        return True

    # Default: ASCII for safety
    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII
