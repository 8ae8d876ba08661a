"""Transpile orchestration: protect, substitute, restore."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Optional

from .engine import substitute
from .errors import TranspileError
from .mask import join_code, protect_literals
from .symbols import SymbolMatcher, SymbolSource, compile_symbols
from .threats import ThreatDetector
from ..utils.logging_config import log_manager


def transpile(
    source: str,
    matcher: SymbolMatcher,
    detector: ThreatDetector,
    bypass_security: bool = False,
) -> str:
    """Rewrite ``source`` with the matcher's symbols, leaving literals untouched."""
    if not matcher.may_match(source):
        return source
    protected = protect_literals(source)
    verdicts: Dict[str, Optional[str]] = {}
    parts = [
        substitute(code, matcher, detector, bypass_security, verdicts)
        for code in protected.code_parts()
    ]
    # Segment-wise join: replacement text is never searched for placeholders.
    return join_code(parts, protected.spans)


@dataclass
class TranspileStats:
    chars: int
    seconds: float

    @property
    def chars_per_sec(self) -> float:
        if self.seconds > 0:
            return self.chars / self.seconds
        return float("inf")


class SymbolTranspiler:
    """Composition root holding one detector and the installed matcher."""

    def __init__(self, detector: Optional[ThreatDetector] = None):
        self.detector = detector or ThreatDetector()
        self.matcher: SymbolMatcher = compile_symbols({})

    def configure(self, mapping: SymbolSource, strategy: str = "regex") -> SymbolMatcher:
        # compile_symbols raises before anything is installed
        matcher = compile_symbols(mapping, strategy)
        self.matcher = matcher
        return matcher

    def transpile(self, source: str, bypass_security: bool = False) -> str:
        try:
            return transpile(source, self.matcher, self.detector, bypass_security)
        except TranspileError as e:
            log_manager.debug(f"Transpilation failed: {e}")
            raise

    def benchmark(self, source: str, bypass_security: bool = False) -> TranspileStats:
        start = time.perf_counter()
        self.transpile(source, bypass_security)
        return TranspileStats(len(source), time.perf_counter() - start)
