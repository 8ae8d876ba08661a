"""Substitution of matched symbols inside unprotected code."""
from __future__ import annotations

from typing import Dict, List, Optional

from .errors import SecurityBlocked
from .symbols import SymbolMatcher
from .threats import ThreatDetector
from ..utils.logging_config import log_manager


def substitute(
    code: str,
    matcher: SymbolMatcher,
    detector: ThreatDetector,
    bypass_security: bool = False,
    verdicts: Optional[Dict[str, Optional[str]]] = None,
) -> str:
    """Replace every matched symbol in ``code`` with its replacement.

    Matches are applied left to right and never re-scanned, so replacements
    are not expanded recursively. Unless ``bypass_security`` is set, a
    replacement containing a denylisted construct aborts the whole call.
    ``verdicts`` caches the denylist pattern found for each symbol; pass the
    same dict for every code segment of one source.

    Raises:
        SecurityBlocked: If a replacement is dangerous and bypass is off
        MatcherInvariantError: If the matcher reports an unknown symbol
    """
    if verdicts is None:
        verdicts = {}
    out: List[str] = []
    last = 0
    for match in matcher.finditer(code):
        replacement = matcher.replacement_for(match.symbol)
        if match.symbol not in verdicts:
            pattern = detector.find(replacement)
            verdicts[match.symbol] = pattern
            if pattern is not None:
                if not bypass_security:
                    raise SecurityBlocked(match.symbol, replacement, pattern)
                log_manager.warning(
                    f"Security bypass: {match.symbol!r} -> {replacement!r} matches {pattern!r}"
                )
        out.append(code[last:match.start])
        out.append(replacement)
        last = match.end
    if not out:
        return code
    out.append(code[last:])
    return "".join(out)
