"""
Presentation — Output formatting for the fillprefix CLI
"""

from .symbols import SymbolSet, UNICODE, ASCII, get_symbols, safe_print, supports_unicode
from .template import OutputTemplate
from .formatters import format_pattern_table, format_pending, format_flush_report

__all__ = [
    "SymbolSet", "UNICODE", "ASCII", "get_symbols", "safe_print", "supports_unicode",
    "OutputTemplate",
    "format_pattern_table", "format_pending", "format_flush_report",
]
