"""Literal and comment masking so substitution only sees code."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence

from .errors import RestorationInconsistency

# Private-use delimiters; never legitimate in the code region (see protect_literals).
PLACEHOLDER_OPEN = "\ue000"
PLACEHOLDER_CLOSE = "\ue001"
RESERVED_CHARS = frozenset((PLACEHOLDER_OPEN, PLACEHOLDER_CLOSE))
PLACEHOLDER_RE = re.compile(PLACEHOLDER_OPEN + r"(\d+)" + PLACEHOLDER_CLOSE)

# Regexes
_PREFIX = r"(?:(?<!\w)(?:[rR][bBfF]?|[bBfF][rR]?|[uU]))?"
_ESCAPE = r"\\(?:.|\Z)"
_TRIPLE_DQ = r'"""(?:' + _ESCAPE + r'|[^\\])*?(?:"""|\Z)'
_TRIPLE_SQ = r"'''(?:" + _ESCAPE + r"|[^\\])*?(?:'''|\Z)"
_DQ = r'"(?:' + _ESCAPE + r'|[^"\\\n])*(?:"|(?=\n)|\Z)'
_SQ = r"'(?:" + _ESCAPE + r"|[^'\\\n])*(?:'|(?=\n)|\Z)"
_COMMENT = r"#[^\n]*"
_RESERVED = "[" + PLACEHOLDER_OPEN + PLACEHOLDER_CLOSE + "]"

# Triple forms first: '"""' also starts a valid (empty) single-quoted string.
LITERAL_RE = re.compile(
    _PREFIX + "(?:" + "|".join((_TRIPLE_DQ, _TRIPLE_SQ, _DQ, _SQ)) + ")"
    + "|" + _COMMENT
    + "|" + _RESERVED,
    re.DOTALL,
)


def placeholder(index: int) -> str:
    return f"{PLACEHOLDER_OPEN}{index}{PLACEHOLDER_CLOSE}"


@dataclass(frozen=True)
class ProtectedSpan:
    index: int
    text: str


@dataclass
class ProtectedSource:
    """Source with every literal swapped for a numbered placeholder."""
    text: str
    spans: List[ProtectedSpan] = field(default_factory=list)

    def code_parts(self) -> List[str]:
        return split_code(self.text)

    def restore(self, text: str) -> str:
        return restore_literals(text, self.spans)


def protect_literals(source: str) -> ProtectedSource:
    """Replace strings, comments and stray reserved characters with placeholders.

    Unterminated literals are protected as far as they reach: a triple-quoted
    string to end of input, a single-line string or comment to end of line.
    """
    spans: List[ProtectedSpan] = []
    out_parts: List[str] = []
    last = 0
    for m in LITERAL_RE.finditer(source):
        start, end = m.span()
        out_parts.append(source[last:start])
        out_parts.append(placeholder(len(spans)))
        spans.append(ProtectedSpan(len(spans), m.group(0)))
        last = end
    if not spans:
        return ProtectedSource(source, [])
    out_parts.append(source[last:])
    return ProtectedSource("".join(out_parts), spans)


def split_code(text: str) -> List[str]:
    """Split placeholder-bearing text into its code segments.

    ``n`` placeholders yield ``n + 1`` segments. Placeholders must appear in
    index order starting at zero.
    """
    pieces = PLACEHOLDER_RE.split(text)
    indexes = [int(p) for p in pieces[1::2]]
    if indexes != list(range(len(indexes))):
        raise RestorationInconsistency(
            f"Placeholders out of order: expected 0..{len(indexes) - 1}, got {indexes}"
        )
    return pieces[0::2]


def join_code(parts: Sequence[str], spans: Sequence[ProtectedSpan]) -> str:
    """Interleave code segments with the original literal text."""
    if len(parts) != len(spans) + 1:
        raise RestorationInconsistency(
            f"{len(parts) - 1} placeholders for {len(spans)} protected spans"
        )
    out: List[str] = [parts[0]]
    for span, code in zip(spans, parts[1:]):
        out.append(span.text)
        out.append(code)
    return "".join(out)


def restore_literals(text: str, spans: Sequence[ProtectedSpan]) -> str:
    return join_code(split_code(text), spans)
