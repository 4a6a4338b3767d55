#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for org2md.

This module centralizes literal types, default option values and the
fixed strings used by the export engine and its backends.

Constants are organized by category:
1. Type Definitions - Literal types and aliases
2. Export Defaults - General export option defaults
3. Markdown Backend Defaults
4. HTML Backend Defaults
5. Parser Defaults
6. CLI
7. Entities
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

HeadlineStyle = Literal["atx", "setext", "mixed"]
FilterStage = Literal["parse-tree", "body", "final-output"]
TemplateKind = Literal["inner-template", "template"]
ArchivedTreesMode = Literal["headline"]
TagsMode = Literal["not-in-toc"]
TimestampsMode = Literal["active", "inactive"]
BrokenLinksMode = Literal["mark"]
BackendName = Literal["md", "html"]

# =============================================================================
# Export Defaults
# =============================================================================

DEFAULT_BACKEND = "md"
DEFAULT_WITH_TOC = True
DEFAULT_HEADLINE_LEVELS = 3
DEFAULT_SECTION_NUMBERS = True
DEFAULT_WITH_TAGS = True
DEFAULT_WITH_TODO_KEYWORDS = True
DEFAULT_WITH_PRIORITY = False
DEFAULT_WITH_FOOTNOTES = True
DEFAULT_WITH_SMART_QUOTES = False
DEFAULT_WITH_SPECIAL_STRINGS = True
DEFAULT_PRESERVE_BREAKS = False
DEFAULT_WITH_FIXED_WIDTH = True
DEFAULT_WITH_TABLES = True
DEFAULT_WITH_DRAWERS = True
DEFAULT_WITH_PROPERTIES = False
DEFAULT_WITH_PLANNING = False
DEFAULT_WITH_CLOCKS = False
DEFAULT_WITH_TIMESTAMPS = True
DEFAULT_WITH_LATEX = True
DEFAULT_WITH_SUB_SUPERSCRIPT = True
DEFAULT_WITH_ENTITIES = True
DEFAULT_WITH_STATISTICS_COOKIES = True
DEFAULT_WITH_ARCHIVED_TREES = "headline"
DEFAULT_WITH_TASKS = True
DEFAULT_WITH_BROKEN_LINKS = True
DEFAULT_SELECT_TAGS = ("export",)
DEFAULT_EXCLUDE_TAGS = ("noexport",)
DEFAULT_LANGUAGE = "en"

ARCHIVE_TAG = "ARCHIVE"
COMMENT_KEYWORD = "COMMENT"
REFERENCE_PREFIX = "org"
REFERENCE_WIDTH = 7

# =============================================================================
# Markdown Backend Defaults
# =============================================================================

DEFAULT_MD_HEADLINE_STYLE: HeadlineStyle = "atx"
DEFAULT_MD_TOPLEVEL_HLEVEL = 1
DEFAULT_MD_FOOTNOTE_FORMAT = "<sup>%s</sup>"
DEFAULT_MD_FOOTNOTES_SECTION = "%s%s"
DEFAULT_MD_LINK_ORG_FILES_AS_MD = True

MD_MAX_HEADLINE_LEVEL = {"atx": 6, "setext": 2, "mixed": 6}
MD_LIST_INDENT = "    "
MD_TAGS_SEPARATOR = "     "

SOURCE_EXTENSION = ".org"
MARKDOWN_EXTENSION = ".md"
HTML_EXTENSION = ".html"

# =============================================================================
# HTML Backend Defaults
# =============================================================================

DEFAULT_HTML_FOOTNOTE_FORMAT = "<sup>%s</sup>"
DEFAULT_HTML_FOOTNOTE_SEPARATOR = "<sup>, </sup>"
DEFAULT_HTML_DOCTYPE = "<!DOCTYPE html>"
DEFAULT_HTML_LINK_ORG_FILES_AS_HTML = True
DEFAULT_HTML_TOPLEVEL_HLEVEL = 2
DEFAULT_HTML_INLINE_IMAGE_EXTENSIONS = ("png", "jpeg", "jpg", "gif", "svg", "webp")
HTML_INLINE_IMAGE_LINK_TYPES = ("file", "http", "https")

# Localized section titles, keyed by language then by English title
TRANSLATIONS: dict[str, dict[str, str]] = {
    "de": {"Table of Contents": "Inhaltsverzeichnis", "Footnotes": "Fußnoten"},
    "fr": {"Table of Contents": "Table des matières", "Footnotes": "Notes de bas de page"},
    "es": {"Table of Contents": "Índice", "Footnotes": "Notas al pie de página"},
}

# Smart quotes as HTML entities: (primary open, primary close, secondary open, secondary close, apostrophe)
SMART_QUOTES: dict[str, tuple[str, str, str, str, str]] = {
    "en": ("&ldquo;", "&rdquo;", "&lsquo;", "&rsquo;", "&rsquo;"),
    "de": ("&bdquo;", "&ldquo;", "&sbquo;", "&lsquo;", "&rsquo;"),
    "fr": ("&laquo;&nbsp;", "&nbsp;&raquo;", "&ldquo;", "&rdquo;", "&rsquo;"),
    "es": ("&laquo;", "&raquo;", "&ldquo;", "&rdquo;", "&rsquo;"),
}

# Special strings as (pattern, entity), converted in order
SPECIAL_STRINGS: tuple[tuple[str, str], ...] = (
    (r"\\-", "&shy;"),
    (r"---(?!-)", "&mdash;"),
    (r"--(?!-)", "&ndash;"),
    (r"\.\.\.", "&hellip;"),
)

# =============================================================================
# Parser Defaults
# =============================================================================

DEFAULT_TODO_KEYWORDS = ("TODO",)
DEFAULT_DONE_KEYWORDS = ("DONE",)
DEFAULT_FOOTNOTE_SECTION_TITLE = "Footnotes"
DEFAULT_CODEREF_LABEL_FORMAT = "(ref:%s)"
DEFAULT_ID_LOCATIONS: dict[str, str] = {}
DEPS_ORG = [("orgparse", "orgparse", "")]

# Link types recognized as "type:path"; anything else is a fuzzy link
LINK_TYPES = (
    "file",
    "http",
    "https",
    "ftp",
    "mailto",
    "news",
    "doi",
    "id",
    "attachment",
    "shell",
    "elisp",
    "help",
    "info",
    "irc",
    "man",
)

# =============================================================================
# CLI
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_FILE_ERROR = 4

# =============================================================================
# Entities
# =============================================================================

# Org entity name -> (HTML, UTF-8); a subset of the entities Org recognizes
ENTITIES: dict[str, tuple[str, str]] = {
    # Greek
    "alpha": ("&alpha;", "α"),
    "beta": ("&beta;", "β"),
    "gamma": ("&gamma;", "γ"),
    "Gamma": ("&Gamma;", "Γ"),
    "delta": ("&delta;", "δ"),
    "Delta": ("&Delta;", "Δ"),
    "epsilon": ("&epsilon;", "ε"),
    "zeta": ("&zeta;", "ζ"),
    "eta": ("&eta;", "η"),
    "theta": ("&theta;", "θ"),
    "Theta": ("&Theta;", "Θ"),
    "iota": ("&iota;", "ι"),
    "kappa": ("&kappa;", "κ"),
    "lambda": ("&lambda;", "λ"),
    "Lambda": ("&Lambda;", "Λ"),
    "mu": ("&mu;", "μ"),
    "nu": ("&nu;", "ν"),
    "xi": ("&xi;", "ξ"),
    "Xi": ("&Xi;", "Ξ"),
    "pi": ("&pi;", "π"),
    "Pi": ("&Pi;", "Π"),
    "rho": ("&rho;", "ρ"),
    "sigma": ("&sigma;", "σ"),
    "Sigma": ("&Sigma;", "Σ"),
    "tau": ("&tau;", "τ"),
    "upsilon": ("&upsilon;", "υ"),
    "phi": ("&phi;", "φ"),
    "Phi": ("&Phi;", "Φ"),
    "chi": ("&chi;", "χ"),
    "psi": ("&psi;", "ψ"),
    "Psi": ("&Psi;", "Ψ"),
    "omega": ("&omega;", "ω"),
    "Omega": ("&Omega;", "Ω"),
    # Punctuation and spacing
    "nbsp": ("&nbsp;", " "),
    "ensp": ("&ensp;", " "),
    "emsp": ("&emsp;", " "),
    "thinsp": ("&thinsp;", " "),
    "shy": ("&shy;", "­"),
    "ndash": ("&ndash;", "–"),
    "mdash": ("&mdash;", "—"),
    "hellip": ("&hellip;", "…"),
    "dots": ("&hellip;", "…"),
    "laquo": ("&laquo;", "«"),
    "raquo": ("&raquo;", "»"),
    "lsquo": ("&lsquo;", "‘"),
    "rsquo": ("&rsquo;", "’"),
    "ldquo": ("&ldquo;", "“"),
    "rdquo": ("&rdquo;", "”"),
    "bull": ("&bull;", "•"),
    "dagger": ("&dagger;", "†"),
    "Dagger": ("&Dagger;", "‡"),
    "sect": ("&sect;", "§"),
    "para": ("&para;", "¶"),
    "amp": ("&amp;", "&"),
    "lt": ("&lt;", "<"),
    "gt": ("&gt;", ">"),
    "vert": ("&vert;", "|"),
    # Symbols
    "copy": ("&copy;", "©"),
    "reg": ("&reg;", "®"),
    "trade": ("&trade;", "™"),
    "deg": ("&deg;", "°"),
    "micro": ("&micro;", "µ"),
    "euro": ("&euro;", "€"),
    "pound": ("&pound;", "£"),
    "yen": ("&yen;", "¥"),
    "cent": ("&cent;", "¢"),
    "checkmark": ("&#10003;", "✓"),
    # Math
    "times": ("&times;", "×"),
    "div": ("&divide;", "÷"),
    "pm": ("&plusmn;", "±"),
    "plusmn": ("&plusmn;", "±"),
    "minus": ("&minus;", "−"),
    "le": ("&le;", "≤"),
    "leq": ("&le;", "≤"),
    "ge": ("&ge;", "≥"),
    "geq": ("&ge;", "≥"),
    "ne": ("&ne;", "≠"),
    "neq": ("&ne;", "≠"),
    "approx": ("&asymp;", "≈"),
    "equiv": ("&equiv;", "≡"),
    "infin": ("&infin;", "∞"),
    "infty": ("&infin;", "∞"),
    "sum": ("&sum;", "∑"),
    "prod": ("&prod;", "∏"),
    "radic": ("&radic;", "√"),
    "sqrt": ("&radic;", "√"),
    "partial": ("&part;", "∂"),
    "nabla": ("&nabla;", "∇"),
    "forall": ("&forall;", "∀"),
    "exists": ("&exist;", "∃"),
    "in": ("&isin;", "∈"),
    "isin": ("&isin;", "∈"),
    "notin": ("&notin;", "∉"),
    "sub": ("&sub;", "⊂"),
    "sup": ("&sup;", "⊃"),
    "cap": ("&cap;", "∩"),
    "cup": ("&cup;", "∪"),
    "empty": ("&empty;", "∅"),
    "cdot": ("&sdot;", "⋅"),
    # Arrows
    "larr": ("&larr;", "←"),
    "leftarrow": ("&larr;", "←"),
    "rarr": ("&rarr;", "→"),
    "to": ("&rarr;", "→"),
    "rightarrow": ("&rarr;", "→"),
    "uarr": ("&uarr;", "↑"),
    "darr": ("&darr;", "↓"),
    "harr": ("&harr;", "↔"),
    "lArr": ("&lArr;", "⇐"),
    "Leftarrow": ("&lArr;", "⇐"),
    "rArr": ("&rArr;", "⇒"),
    "Rightarrow": ("&rArr;", "⇒"),
    "hArr": ("&hArr;", "⇔"),
    "Leftrightarrow": ("&hArr;", "⇔"),
}
