"""Input validation for symbol mappings and runtime options."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from ..transpiler.errors import CompileError
from ..transpiler.mask import RESERVED_CHARS


class ValidationError(Exception):
    """Raised when validation fails."""
    pass


class SymbolValidator:
    """Validate symbol table entries."""

    @classmethod
    def validate_symbol(cls, symbol: Any) -> str:
        """Validate a symbol key.

        Raises:
            CompileError: If the symbol is not a non-empty string or uses a
                reserved placeholder character
        """
        if not isinstance(symbol, str):
            raise CompileError(f"Symbol must be a string, got {type(symbol).__name__}")
        if not symbol:
            raise CompileError("Symbol cannot be empty")
        for char in RESERVED_CHARS:
            if char in symbol:
                raise CompileError(
                    f"Symbol {symbol!r} contains reserved character U+{ord(char):04X}"
                )
        return symbol

    @classmethod
    def validate_replacement(cls, symbol: str, replacement: Any) -> str:
        if not isinstance(replacement, str):
            raise CompileError(
                f"Replacement for {symbol!r} must be a string, got {type(replacement).__name__}"
            )
        return replacement


class InputValidator:
    """Validate user input values."""

    VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}

    @classmethod
    def validate_strategy(cls, strategy: str) -> str:
        if not strategy:
            raise ValidationError("Matcher strategy cannot be empty")

        # symbols imports this module, so the registry is looked up lazily
        from ..transpiler.symbols import MATCHER_STRATEGIES

        normalized = strategy.lower().strip()
        if normalized not in MATCHER_STRATEGIES:
            raise ValidationError(
                f"Invalid matcher strategy: '{strategy}'. "
                f"Supported: {', '.join(sorted(MATCHER_STRATEGIES))}"
            )
        return normalized

    @classmethod
    def validate_log_level(cls, level: str) -> str:
        if not level:
            raise ValidationError("Log level cannot be empty")

        normalized = level.upper().strip()
        if normalized not in cls.VALID_LOG_LEVELS:
            raise ValidationError(
                f"Invalid log level: '{level}'. "
                f"Supported: {', '.join(sorted(cls.VALID_LOG_LEVELS))}"
            )
        return normalized


def normalize_symbol_mapping(
    mapping: Union[Mapping[str, str], Iterable[Tuple[str, str]]],
) -> Dict[str, str]:
    """Validate a symbol mapping and return it as a plain dict.

    Accepts a mapping or an iterable of ``(symbol, replacement)`` pairs. Pairs
    are applied in order, so the last replacement configured for a symbol wins.

    Raises:
        CompileError: If any entry is malformed
    """
    if mapping is None:
        raise CompileError("Symbol mapping cannot be None")

    if isinstance(mapping, Mapping):
        items = mapping.items()
    elif isinstance(mapping, (str, bytes)):
        raise CompileError("Symbol mapping must be a mapping or an iterable of pairs")
    else:
        items = mapping

    normalized: Dict[str, str] = {}
    try:
        for entry in items:
            try:
                symbol, replacement = entry
            except (TypeError, ValueError):
                raise CompileError(f"Malformed symbol entry: {entry!r}") from None
            symbol = SymbolValidator.validate_symbol(symbol)
            normalized[symbol] = SymbolValidator.validate_replacement(symbol, replacement)
    except TypeError as e:
        raise CompileError(f"Symbol mapping is not iterable: {e}") from e
    return normalized


def validate_settings(settings: dict) -> dict:
    """Validate runtime settings gathered from the CLI and environment.

    Raises:
        ValidationError: If any setting is invalid
    """
    validated = dict(settings)

    if "matcher" in settings:
        validated["matcher"] = InputValidator.validate_strategy(settings["matcher"])

    if "log_level" in settings:
        validated["log_level"] = InputValidator.validate_log_level(settings["log_level"])

    if "bypass" in settings:
        if not isinstance(settings["bypass"], bool):
            raise ValidationError("Bypass flag must be a boolean")

    return validated
