"""Denylist scanner for replacement text."""
from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

# Constructs that execute code, reach the OS or introspect the runtime.
DEFAULT_THREATS: Tuple[str, ...] = (
    "eval(", "eval (", "exec(", "exec (", "compile(", "compile (",
    "getattr(__builtins__", "getattr(__builtins__,", "globals(", "globals (",
    "locals(", "locals (", "os.system(", "os.system (", "subprocess.",
    "__import__", "vars(", "vars (", "dir(", "dir (", "open(", "open (",
    "input(", "raw_input(",
)


class ThreatDetector:
    """Case-sensitive substring scan over a fixed denylist.

    The pattern set is frozen at construction, so one detector can be shared
    between any number of transpile calls.
    """

    def __init__(self, patterns: Iterable[str] = DEFAULT_THREATS):
        unique = []
        for p in patterns:
            if not p:
                raise ValueError("Threat pattern cannot be empty")
            if p not in unique:
                unique.append(p)
        self._patterns: Tuple[str, ...] = tuple(unique)
        # Longest first so overlapping entries report the most specific one.
        ordered = sorted(self._patterns, key=len, reverse=True)
        self._rx = re.compile("|".join(re.escape(p) for p in ordered)) if ordered else None

    @property
    def patterns(self) -> Tuple[str, ...]:
        return self._patterns

    def find(self, text: str) -> Optional[str]:
        """Return the leftmost denylisted substring in ``text`` or None."""
        if self._rx is None:
            return None
        m = self._rx.search(text)
        return m.group(0) if m else None

    def is_dangerous(self, text: str) -> bool:
        return self.find(text) is not None

    def __repr__(self) -> str:
        return f"ThreatDetector({len(self._patterns)} patterns)"


default_detector = ThreatDetector()


def is_dangerous(text: str) -> bool:
    return default_detector.is_dangerous(text)
