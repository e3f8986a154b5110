"""util_code02_colors

Centralized console palette for all pipeline output (operator consistency).

Design choices:
  ok   : green  (phase finished, artifact present)
  warn : yellow (tool exited non-zero, skipped phase)
  err  : red    (error lines surfaced from tools, fatal conditions)
  dim  : grey   (detail lines)

Colour is emitted only when stdout is a terminal and ``NO_COLOR`` is unset,
so captured output (CI logs, pytest ``capsys``) stays plain text.
"""
from __future__ import annotations
import os, sys

COLORS = {
    'ok':'\033[32m', 'warn':'\033[33m', 'err':'\033[31m', 'dim':'\033[90m', 'reset':'\033[0m'
}


def color_enabled(stream=None) -> bool:
    stream = stream or sys.stdout
    if os.environ.get('NO_COLOR'):
        return False
    return bool(getattr(stream, 'isatty', None) and stream.isatty())


def paint(text: str, tone: str) -> str:
    """Wrap ``text`` in the ANSI code for ``tone`` (no-op without a terminal)."""
    if tone not in COLORS or not color_enabled():
        return text
    return f"{COLORS[tone]}{text}{COLORS['reset']}"

__all__ = [
    'COLORS', 'color_enabled', 'paint'
]
