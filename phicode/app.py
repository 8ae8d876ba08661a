# phicode/app.py
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from phicode.transpiler.errors import CompileError, MatcherInvariantError, SecurityBlocked
from phicode.transpiler.pipeline import SymbolTranspiler
from phicode.utils.env import (
    get_bypass_security,
    get_log_dir,
    get_log_level,
    get_matcher_strategy,
    get_symbols_file,
)
from phicode.utils.log import log
from phicode.utils.logging_config import log_manager, setup_logging
from phicode.utils.settings import load_symbols, parse_symbols
from phicode.utils.validation import ValidationError, validate_settings

EXIT_BLOCKED = 1
EXIT_USAGE = 2
EXIT_INTERNAL = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phicode",
        description="Fast symbolic transpiler for PhiCode",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-s", "--symbols", help="JSON mapping of symbols to replacements")
    source.add_argument("--symbols-file", default=get_symbols_file(),
                        help="path to a JSON symbol table")
    parser.add_argument("-i", "--input", help="read source from a file instead of stdin")
    parser.add_argument("--benchmark", action="store_true", help="show performance benchmarks")
    parser.add_argument("--bypass", action="store_true", default=get_bypass_security(),
                        help="bypass threat detection")
    parser.add_argument("--matcher", default=get_matcher_strategy(),
                        help="matcher strategy: regex or trie")
    parser.add_argument("--log-level", default=get_log_level())
    parser.add_argument("--log-dir", default=get_log_dir())
    return parser


def _read_source(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.symbols is None and not args.symbols_file:
        parser.error("one of the arguments -s/--symbols --symbols-file is required")

    try:
        settings = validate_settings({
            "matcher": args.matcher,
            "log_level": args.log_level,
            "bypass": args.bypass,
        })
    except ValidationError as e:
        parser.error(str(e))

    setup_logging(log_dir=args.log_dir, level=settings["log_level"])

    transpiler = SymbolTranspiler()
    try:
        if args.symbols is not None:
            mapping = parse_symbols(args.symbols)
        else:
            mapping = load_symbols(args.symbols_file)
        transpiler.configure(mapping, settings["matcher"])
    except CompileError as e:
        log_manager.error(f"Symbol table rejected: {e}")
        log(f"phicode: error: {e}")
        return EXIT_USAGE

    try:
        source = _read_source(args.input)
    except OSError as e:
        log(f"phicode: error: cannot read input: {e}")
        return EXIT_USAGE

    bypass = settings["bypass"]
    try:
        result = transpiler.transpile(source, bypass)
        if args.benchmark:
            stats = transpiler.benchmark(source, bypass)
            log(f"Transpiled {stats.chars} chars in {stats.seconds * 1000:.3f}ms")
            log(f"Speed: {stats.chars_per_sec:.0f} chars/sec")
    except SecurityBlocked as e:
        log_manager.error(str(e))
        log(f"phicode: {e}")
        return EXIT_BLOCKED
    except MatcherInvariantError as e:
        log_manager.exception(f"Internal error: {e}")
        log(f"phicode: internal error: {e}")
        return EXIT_INTERNAL

    if bypass:
        log("Security bypass enabled - threats not blocked")

    sys.stdout.write(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
