"""Exceptions raised by the transpiler core."""
from __future__ import annotations


class TranspileError(Exception):
    """Base class for every failure surfaced by the transpiler."""
    pass


class CompileError(TranspileError):
    """Raised when a symbol mapping cannot be compiled into a matcher."""
    pass


class SymbolFileError(CompileError):
    """Raised when a symbol table file cannot be parsed."""
    pass


class SecurityBlocked(TranspileError):
    """Raised when a replacement contains a denylisted construct."""

    def __init__(self, symbol: str, replacement: str, pattern: str):
        self.symbol = symbol
        self.replacement = replacement
        self.pattern = pattern
        super().__init__(
            f"Security: dangerous pattern {pattern!r} detected in replacement "
            f"{replacement!r} for symbol {symbol!r}"
        )


class MatcherInvariantError(TranspileError):
    """Internal defect: the pipeline reached a state it should never reach."""
    pass


class RestorationInconsistency(MatcherInvariantError):
    """Placeholders and protected spans no longer line up."""
    pass
