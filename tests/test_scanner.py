"""
Tests for line scanning and math-line detection.
"""

import logging

import pytest

from mathtex.compiler import MathCompiler
from mathtex.scanner import LineScanner, looks_like_math, process_line, scan_line
from mathtex.symbols import SymbolTable


class TestScanLine:
    """Tests for scan_line (mixed content)."""

    def test_span_is_compiled_and_line_break_appended(self):
        assert scan_line("Some text $a+b$ more") == r"Some text $a + b$ more\\"

    @pytest.mark.parametrize("line", ["", "   ", "\t"])
    def test_blank_line_is_line_break(self, line):
        assert scan_line(line) == r"\\"

    def test_line_without_spans(self):
        assert scan_line("no math here") == r"no math here\\"

    def test_multiple_spans(self):
        assert scan_line("$a/b$ and $x^2$") == r"$\frac{a}{b}$ and $x^{2}$\\"

    def test_unterminated_span_is_copied(self):
        assert scan_line("price: $5") == r"price: $5\\"
        assert scan_line("$a$ then $b") == r"$a$ then $b\\"

    def test_empty_span_is_copied(self):
        assert scan_line("empty $$ span") == r"empty $$ span\\"

    def test_whitespace_span_is_copied(self):
        assert scan_line("x $ $ y") == r"x $ $ y\\"

    def test_double_dollar_text_is_not_display_math(self):
        assert scan_line("$$a$$") == r"$$a$$\\"

    def test_failing_span_is_kept_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mathtex.scanner"):
            result = scan_line("bad $(a+b$ end")

        assert result == r"bad $(a+b$ end\\"
        assert "(a+b" in caplog.text

    def test_failure_does_not_affect_other_spans(self):
        result = scan_line("$sqrt(x))$ then $a*b$")

        assert result == r"$sqrt(x))$ then $a \cdot b$\\"

    def test_equation_span_is_kept(self):
        assert scan_line("$x^2 + y^2 = r^2$") == r"$x^2 + y^2 = r^2$\\"

    def test_text_outside_spans_is_preserved(self):
        line = "  leading, [brackets] & {braces} $x$ trailing  "
        result = scan_line(line)

        assert result == "  leading, [brackets] & {braces} $x$ trailing  " + "\\\\"

    def test_long_span_is_compiled(self):
        expression = "+".join(["x"] * 1000)

        assert scan_line(f"sum ${expression}$") == "sum $" + " + ".join(["x"] * 1000) + "$" + "\\\\"

    def test_custom_compiler(self):
        compiler = MathCompiler(SymbolTable({"x": "\\xi"}))

        assert scan_line("$x$", compiler=compiler) == r"$\xi$\\"


class TestLooksLikeMath:
    """Tests for looks_like_math."""

    @pytest.mark.parametrize("line", [
        "x^2 + y^2",
        "sin(x) + 1",
        "x_1 * y",
        "e^(x^2)",
        "x = y",
        "x+y=z",
    ])
    def test_math_lines(self, line):
        assert looks_like_math(line)

    @pytest.mark.parametrize("line", [
        "",
        "The result is positive",
        "just some words",
        "a+b=c",
        "x + y is the sum",
        "x + y est positif",
        "x+1, y+2",
        "x+1. Then y",
    ])
    def test_prose_lines(self, line):
        assert not looks_like_math(line)

    def test_long_line_is_not_math(self):
        assert looks_like_math("x+" * 50)
        assert not looks_like_math("x+" * 51)

    def test_stopwords_are_case_insensitive(self):
        assert not looks_like_math("x + y THE z")

    def test_stopwords_match_whole_words(self):
        assert looks_like_math("sin(theta) + tan(x)")


class TestProcessLine:
    """Tests for process_line (plain content)."""

    def test_math_prefix(self):
        assert process_line("MATH: a/b") == r"$\frac{a}{b}$"

    def test_math_prefix_display(self):
        assert process_line("MATH: a/b", inline=False) == r"$$\frac{a}{b}$$"

    def test_math_prefix_with_leading_spaces(self):
        assert process_line("   MATH:x^2") == "$x^{2}$"

    def test_empty_math_prefix_is_unchanged(self):
        assert process_line("MATH:") == "MATH:"

    def test_failing_math_prefix_is_unchanged(self):
        assert process_line("MATH: (a+b") == "MATH: (a+b"

    def test_detected_expression(self):
        assert process_line("x^2 + y^2") == "$x^{2} + y^{2}$"
        assert process_line("  x^2  ") == "$x^{2}$"

    def test_prose_is_unchanged(self):
        assert process_line("The sum of a and b") == "The sum of a and b"

    def test_url_is_unchanged(self):
        line = "see www/a+b"
        assert process_line(line) == line

    def test_punctuation_before_operator_is_unchanged(self):
        line = "Note: x+y"
        assert process_line(line) == line

    def test_delimited_line_is_unchanged(self):
        assert process_line("Already $a+b$ here") == "Already $a+b$ here"
        assert process_line("```math a+b") == "```math a+b"

    def test_equation_is_unchanged(self):
        assert process_line("x^2 + y^2 = r^2") == "x^2 + y^2 = r^2"

    def test_blank_line(self):
        assert process_line("") == ""


class TestLineScanner:
    """Tests for LineScanner.compile_safe."""

    def test_compile_safe_success(self, compiler):
        assert LineScanner(compiler).compile_safe("a-b") == "$a - b$"

    def test_compile_safe_failure_returns_none(self, compiler, caplog):
        with caplog.at_level(logging.WARNING, logger="mathtex.scanner"):
            assert LineScanner(compiler).compile_safe("a +") is None

        assert "a +" in caplog.text

    def test_deep_nesting_does_not_raise(self, compiler):
        expression = "(" * 5000 + "x" + ")" * 5000

        assert LineScanner(compiler).compile_safe(expression) is None
