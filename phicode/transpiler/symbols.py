"""Symbol map compilation: longest-match, boundary-aware matchers."""
from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Type, Union

from .errors import CompileError, MatcherInvariantError
from ..utils.logging_config import log_manager
from ..utils.validation import normalize_symbol_mapping

IDENTIFIER_RE = re.compile(r"\w+")
WORD_CHAR_RE = re.compile(r"\w")

SymbolSource = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def is_identifier_like(symbol: str) -> bool:
    """True when the symbol may only match at the start of a word."""
    return IDENTIFIER_RE.fullmatch(symbol) is not None


@dataclass(frozen=True)
class SymbolMatch:
    start: int
    end: int
    symbol: str


class SymbolMatcher:
    """Finds non-overlapping, longest-first occurrences of configured symbols.

    Subclasses only differ in how they scan; given the same mapping every
    strategy reports the same matches.
    """

    strategy = ""

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = MappingProxyType(dict(mapping))
        self._symbols: Tuple[str, ...] = tuple(sorted(self._mapping, key=lambda s: (-len(s), s)))
        self._bounded = frozenset(s for s in self._symbols if is_identifier_like(s))
        # Every occurrence of a symbol needs its first character in the text.
        self._lead_chars = frozenset(s[0] for s in self._symbols)
        self._build()

    def _build(self) -> None:
        pass

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    @property
    def symbols(self) -> Tuple[str, ...]:
        """Symbols in match priority order (longest first)."""
        return self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._symbols)} symbols)"

    def may_match(self, text: str) -> bool:
        """Cheap precheck; False guarantees ``finditer`` yields nothing."""
        return not self._lead_chars.isdisjoint(text)

    def replacement_for(self, symbol: str) -> str:
        try:
            return self._mapping[symbol]
        except KeyError:
            raise MatcherInvariantError(f"Matcher reported unknown symbol {symbol!r}") from None

    def finditer(self, text: str) -> Iterator[SymbolMatch]:
        raise NotImplementedError


class RegexMatcher(SymbolMatcher):
    """One alternation pattern, alternatives ordered longest first."""

    strategy = "regex"

    def _build(self) -> None:
        self._rx: Optional[re.Pattern] = None
        if not self._symbols:
            return
        parts = [
            rf"\b{re.escape(s)}" if s in self._bounded else re.escape(s)
            for s in self._symbols
        ]
        try:
            self._rx = re.compile("|".join(parts))
        except re.error as e:
            raise CompileError(f"Regex compilation failed: {e}") from e

    @property
    def pattern(self) -> Optional[str]:
        return self._rx.pattern if self._rx is not None else None

    def finditer(self, text: str) -> Iterator[SymbolMatch]:
        if self._rx is None:
            return
        for m in self._rx.finditer(text):
            yield SymbolMatch(m.start(), m.end(), m.group(0))


_TERMINAL = ""


class TrieMatcher(SymbolMatcher):
    """Character trie walked from each position, keeping the longest hit."""

    strategy = "trie"

    def _build(self) -> None:
        root: Dict[str, dict] = {}
        for symbol in self._symbols:
            node = root
            for ch in symbol:
                node = node.setdefault(ch, {})
            node[_TERMINAL] = symbol
        self._root = root

    def _starts_word(self, text: str, start: int) -> bool:
        return start == 0 or WORD_CHAR_RE.match(text[start - 1]) is None

    def finditer(self, text: str) -> Iterator[SymbolMatch]:
        n = len(text)
        i = 0
        while i < n:
            if text[i] not in self._root:
                i += 1
                continue
            best: Optional[SymbolMatch] = None
            starts_word = self._starts_word(text, i)
            node = self._root
            j = i
            while j < n:
                node = node.get(text[j])
                if node is None:
                    break
                j += 1
                symbol = node.get(_TERMINAL)
                if symbol is None:
                    continue
                if symbol in self._bounded and not starts_word:
                    continue
                best = SymbolMatch(i, j, symbol)
            if best is None:
                i += 1
            else:
                yield best
                i = best.end


MATCHER_STRATEGIES: Dict[str, Type[SymbolMatcher]] = {
    RegexMatcher.strategy: RegexMatcher,
    TrieMatcher.strategy: TrieMatcher,
}


def compile_symbols(mapping: SymbolSource, strategy: str = "regex") -> SymbolMatcher:
    """Compile a symbol mapping into a matcher.

    Args:
        mapping: ``{symbol: replacement}`` or an iterable of pairs; for pairs the
            last one configured for a symbol wins
        strategy: name of a registered matcher strategy ("regex" or "trie")

    Returns:
        An immutable matcher ready to be shared between transpile calls

    Raises:
        CompileError: If the mapping is malformed or cannot be compiled
    """
    cls = MATCHER_STRATEGIES.get(strategy)
    if cls is None:
        raise CompileError(
            f"Unknown matcher strategy: '{strategy}'. "
            f"Supported: {', '.join(sorted(MATCHER_STRATEGIES))}"
        )
    normalized = normalize_symbol_mapping(mapping)
    matcher = cls(normalized)
    log_manager.debug(f"Compiled {len(matcher)} symbols with {strategy} matcher")
    return matcher
