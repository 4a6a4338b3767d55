#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/org2md/export/text.py
"""String helpers shared by the backends.

Line-prefixing helpers here follow Org's behaviour: every line that has
content or is empty gets the prefix, except the position after a final
newline.

"""

from __future__ import annotations

import os.path
import re

from org2md.constants import SMART_QUOTES, SPECIAL_STRINGS, TRANSLATIONS

_TRAILING_BLANK_RE = re.compile(r"(\n[ \t]*)*\Z")
_OPENING_CONTEXT = " \t\n([{<\"'«‘“"


def normalize_string(value: str) -> str:
    """Make ``value`` end with exactly one newline; keep the empty string empty."""
    if not value:
        return value
    return _TRAILING_BLANK_RE.sub("\n", value, count=1)


def prefix_lines(value: str, prefix: str) -> str:
    """Prefix every line of ``value`` with ``prefix``.

    A trailing newline does not start a new line.

    Examples
    --------
    >>> prefix_lines("a\\n\\nb\\n", "> ")
    '> a\\n> \\n> b\\n'

    """
    return "".join(prefix + line for line in value.splitlines(keepends=True))


def org_trim(value: str) -> str:
    """Strip blank characters (spaces, tabs, newlines) at both ends."""
    return value.strip(" \t\n\r")


def remove_indentation(value: str) -> str:
    """Remove the indentation common to all non-blank lines."""
    lines = value.split("\n")
    widths = [len(line) - len(line.lstrip(" \t")) for line in lines if line.strip()]
    if not widths:
        return value
    cut = min(widths)
    if cut == 0:
        return value
    return "\n".join(line[cut:] if line.strip() else line.lstrip(" \t") for line in lines)


def string_nw_p(value: object) -> bool:
    """Return True for a string holding at least one non-whitespace character."""
    return isinstance(value, str) and bool(value.strip())


def translate(phrase: str, language: str) -> str:
    """Translate a fixed section title into ``language`` (English fallback)."""
    return TRANSLATIONS.get(language, {}).get(phrase, phrase)


def convert_special_strings(value: str) -> str:
    """Convert ``\\-``, ``---``, ``--`` and ``...`` to HTML entities, in that order."""
    for pattern, replacement in SPECIAL_STRINGS:
        value = re.sub(pattern, replacement, value)
    return value


def activate_smart_quotes(value: str, language: str, previous: str = "") -> str:
    """Replace straight quotes with typographic quotes as HTML entities.

    Parameters
    ----------
    value : str
        Raw text
    language : str
        Language code selecting the quote set (English fallback)
    previous : str, default ""
        Text immediately preceding ``value`` in the document, used to decide
        whether a quote at the very start opens or closes

    Returns
    -------
    str
        Text with quotes replaced

    """
    p_open, p_close, s_open, s_close, apostrophe = SMART_QUOTES.get(language, SMART_QUOTES["en"])
    result: list[str] = []
    before = previous[-1:] if previous else ""
    for index, char in enumerate(value):
        prev_char = value[index - 1] if index else before
        next_char = value[index + 1] if index + 1 < len(value) else ""
        if char == '"':
            result.append(p_open if (not prev_char or prev_char in _OPENING_CONTEXT) else p_close)
        elif char == "'":
            if prev_char.isalnum() and next_char.isalnum():
                result.append(apostrophe)
            elif not prev_char or prev_char in _OPENING_CONTEXT:
                result.append(s_open)
            else:
                result.append(s_close)
        else:
            result.append(char)
    return "".join(result)


def file_uri(path: str) -> str:
    """Return a URI for a file link path.

    Relative paths are returned unchanged; absolute paths become
    ``file://`` URIs.

    """
    if path.startswith("//"):
        return "file:" + path
    if path.startswith("~"):
        path = os.path.expanduser(path)
    if not path.startswith("/"):
        return path
    return "file://" + path


__all__ = [
    "normalize_string",
    "prefix_lines",
    "org_trim",
    "remove_indentation",
    "string_nw_p",
    "translate",
    "convert_special_strings",
    "activate_smart_quotes",
    "file_uri",
]
