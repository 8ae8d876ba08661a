"""Tests for pipeline.py - End-to-end transpilation."""
from __future__ import annotations

import pytest
from loguru import logger

from phicode.transpiler.errors import CompileError, SecurityBlocked
from phicode.transpiler.mask import PLACEHOLDER_CLOSE, PLACEHOLDER_OPEN, placeholder
from phicode.transpiler.pipeline import SymbolTranspiler, TranspileStats, transpile
from phicode.transpiler.symbols import compile_symbols
from phicode.transpiler.threats import ThreatDetector

SAMPLES = [
    "",
    "plain code",
    'x = "λ" # → comment\n',
    "'''doc\nstring'''\nλ x: x",
    f"stray {PLACEHOLDER_OPEN} reserved",
    's = "unterminated',
]


@pytest.fixture(params=["regex", "trie"])
def strategy(request):
    return request.param


@pytest.fixture
def detector():
    return ThreatDetector()


def run(mapping, source, strategy, bypass=False):
    return transpile(source, compile_symbols(mapping, strategy), ThreatDetector(), bypass)


class TestTranspile:
    """Observable properties of the full pipeline."""

    @pytest.mark.parametrize("source", SAMPLES)
    def test_empty_mapping_is_identity(self, source, strategy):
        assert run({}, source, strategy) == source

    def test_longest_match_priority(self, strategy):
        assert run({"ab": "X", "abc": "Y"}, "abcd", strategy) == "Yd"

    def test_boundary_safety(self, strategy):
        assert run({"if": "WHEN"}, "gift", strategy) == "gift"
        assert run({"if": "WHEN"}, "if x:", strategy) == "WHEN x:"
        assert run({"if": "WHEN"}, "iffy", strategy) == "WHENfy"
        assert run({"ab": "X", "abc": "Y"}, "xabc abc", strategy) == "xabc Y"

    def test_comment_is_protected(self, strategy):
        src = "# λ comment\nλ x"
        assert run({"λ": "lambda"}, src, strategy) == "# λ comment\nlambda x"

    def test_security_gate(self, strategy):
        with pytest.raises(SecurityBlocked):
            run({"⚡": "eval("}, "x = ⚡", strategy)
        assert run({"⚡": "eval("}, "⚡", strategy, bypass=True) == "eval("

    def test_dangerous_symbol_inside_string_is_not_blocked(self, strategy):
        src = 'msg = "⚡ fast"'
        assert run({"⚡": "eval("}, src, strategy) == src

    def test_literals_restored_around_substitutions(self, strategy):
        mapping = {"λ": "lambda", "→": "return"}
        src = (
            'f = λ x: "λ → x"  # → λ\n'
            "def g():\n"
            "    '''\n    λ → docs\n    '''\n"
            "    → rb'λ'\n"
        )
        expected = (
            'f = lambda x: "λ → x"  # → λ\n'
            "def g():\n"
            "    '''\n    λ → docs\n    '''\n"
            "    return rb'λ'\n"
        )
        assert run(mapping, src, strategy) == expected

    def test_symbol_adjacent_to_literal(self, strategy):
        assert run({"λ": "lambda"}, 'λ"s"', strategy) == 'lambda"s"'

    def test_prefix_glued_to_identifier(self, strategy):
        assert run({"λ": "lambda"}, 'bar"λ"', strategy) == 'bar"λ"'

    def test_unterminated_single_line_string(self, strategy):
        assert run({"λ": "lambda"}, "s = 'λ\nλ", strategy) == "s = 'λ\nlambda"

    def test_unterminated_triple_quote(self, strategy):
        src = 's = """λ\nλ'
        assert run({"λ": "lambda"}, src, strategy) == src

    def test_replacement_resembling_placeholder(self, strategy):
        lookalike = placeholder(0)
        out = run({"→": lookalike}, 'a → "s"', strategy)
        assert out == f'a {lookalike} "s"'

    def test_reserved_character_in_code(self, strategy):
        src = f"x{PLACEHOLDER_OPEN} → y{PLACEHOLDER_CLOSE}"
        expected = f"x{PLACEHOLDER_OPEN} -> y{PLACEHOLDER_CLOSE}"
        assert run({"→": "->"}, src, strategy) == expected

    def test_digit_symbol_never_touches_placeholders(self, strategy):
        src = "x = '0' + 0"
        assert run({"0": "zero"}, src, strategy) == "x = '0' + zero"

    @pytest.mark.parametrize("source", SAMPLES + ["λ → x", "if λ: pass"])
    def test_fast_path_matches_full_pipeline(self, source, strategy, detector):
        matcher = compile_symbols({"λ": "lambda", "→": "return", "if": "IF"}, strategy)
        fast = transpile(source, matcher, detector)
        matcher.may_match = lambda text: True
        assert transpile(source, matcher, detector) == fast

    def test_fast_path_returns_input(self, strategy, detector):
        source = "nothing to see"
        matcher = compile_symbols({"λ": "lambda"}, strategy)
        assert transpile(source, matcher, detector) is source

    def test_bypass_warns_once_across_segments(self, strategy, detector):
        messages = []
        logger.enable("phicode")
        logger.add(messages.append, level="WARNING", format="{message}")

        matcher = compile_symbols({"⚡": "eval("}, strategy)
        source = '⚡ "s" ⚡'
        assert transpile(source, matcher, detector, True) == 'eval( "s" eval('

        assert len([m for m in messages if "Security bypass" in m]) == 1


class TestSymbolTranspiler:
    """Test the composition root."""

    def test_unconfigured_is_identity(self):
        assert SymbolTranspiler().transpile("λ x") == "λ x"

    def test_configure_and_transpile(self):
        transpiler = SymbolTranspiler()
        transpiler.configure({"λ": "lambda"}, "trie")
        assert transpiler.matcher.strategy == "trie"
        assert transpiler.transpile("λ x: x") == "lambda x: x"

    def test_failed_configure_keeps_previous_matcher(self):
        transpiler = SymbolTranspiler()
        transpiler.configure({"→": "return"})
        with pytest.raises(CompileError):
            transpiler.configure({"": "broken"})
        assert transpiler.transpile("→ x") == "return x"

    def test_custom_detector(self):
        transpiler = SymbolTranspiler(ThreatDetector(["print("]))
        transpiler.configure({"⚡": "eval(", "✎": "print("})
        assert transpiler.transpile("⚡") == "eval("
        with pytest.raises(SecurityBlocked):
            transpiler.transpile("✎")

    def test_bypass(self):
        transpiler = SymbolTranspiler()
        transpiler.configure({"⚡": "exec("})
        assert transpiler.transpile("⚡", bypass_security=True) == "exec("

    def test_benchmark(self):
        transpiler = SymbolTranspiler()
        transpiler.configure({"λ": "lambda"})
        stats = transpiler.benchmark("λ x " * 100)
        assert stats.chars == 400
        assert stats.seconds >= 0

    def test_benchmark_propagates_block(self):
        transpiler = SymbolTranspiler()
        transpiler.configure({"⚡": "eval("})
        with pytest.raises(SecurityBlocked):
            transpiler.benchmark("⚡")

    def test_stats_speed(self):
        assert TranspileStats(100, 0.5).chars_per_sec == 200
        assert TranspileStats(100, 0.0).chars_per_sec == float("inf")
