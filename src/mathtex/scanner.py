"""
Line-level detection of math in free text.

``scan_line`` compiles ``$...$`` spans embedded in a line. ``looks_like_math``
guesses whether an undelimited line is a whole expression; ``process_line``
uses it for plain (non-mixed) input.
"""

import logging
import re
from typing import Optional

from mathtex.compiler import MathCompiler, get_default_compiler
from mathtex.exceptions import MathTexError

logger = logging.getLogger(__name__)

MATH_DELIMITER = "$"
LINE_BREAK = "\\\\"
MATH_PREFIX = "MATH:"
MAX_MATH_LINE_LENGTH = 100

_OPERATOR_RE = re.compile(r"[+\-*/^_=]")

# English and French function words that mark a line as prose
_STOPWORDS = (
    "the", "and", "or", "but", "if", "then", "when", "where", "how", "what",
    "is", "are", "was", "were", "have", "has", "had", "will", "would", "could",
    "should", "may", "might", "can", "must", "shall", "to", "of", "in", "on",
    "at", "by", "for", "with", "from", "as", "an", "a",
    "le", "la", "les", "un", "une", "des", "et", "ou", "mais", "si", "alors",
    "quand", "où", "comment", "que", "quoi", "est", "sont", "était", "étaient",
    "ai", "avons", "avez", "ont", "aurai", "aurais", "aurait", "aurions",
    "auriez", "auraient", "peux", "peut", "pouvons", "pouvez", "peuvent",
    "dois", "doit", "devons", "devez", "doivent", "pourrais", "pourrait",
    "devrais", "devrait", "à", "de", "dans", "sur", "par", "pour", "avec",
    "sans", "sous", "entre", "comme", "en", "au", "aux", "du",
)
_STOPWORD_RE = re.compile(r"\b(?:" + "|".join(map(re.escape, _STOPWORDS)) + r")\b", re.IGNORECASE)

_PROSE_PUNCTUATION_RE = re.compile(r"[.,:;!?]\s+[a-zA-Z]")

# Pre-filter for plain mode: punctuation before an operator, or a URL
_PUNCTUATED_OPERATOR_RE = re.compile(r"[.,:;!?].*[+\-*/^_]")
_URL_RE = re.compile(r"http|www|\.com|\.org")
_MATH_CHARS_RE = re.compile(r"[+\-*/^_()a-zA-Z0-9]")


def looks_like_math(line: str) -> bool:
    """
    Guess whether a line is a bare math expression.

    Best effort only: a false positive is harmless because a failed parse
    leaves the line untouched.
    """
    if not _OPERATOR_RE.search(line):
        return False
    if _STOPWORD_RE.search(line):
        return False
    if len(line) > MAX_MATH_LINE_LENGTH:
        return False
    if _PROSE_PUNCTUATION_RE.search(line):
        return False
    return True


class LineScanner:
    """Applies a compiler to lines of text."""

    def __init__(self, compiler: Optional[MathCompiler] = None):
        self.compiler = compiler or get_default_compiler()

    def _compile_span(self, expression: str) -> str:
        try:
            latex = self.compiler.compile_expression(expression)
        except (MathTexError, RecursionError) as e:
            logger.warning(f"Failed to compile math expression '{expression}': {e}")
            return f"{MATH_DELIMITER}{expression}{MATH_DELIMITER}"
        return f"{MATH_DELIMITER}{latex}{MATH_DELIMITER}"

    def scan_line(self, line: str) -> str:
        """
        Compile every ``$...$`` span in a line.

        Text outside spans, empty spans and an unterminated trailing span are
        copied unchanged. The result always ends with a LaTeX line break.
        """
        if not line.strip():
            return LINE_BREAK

        parts = []
        i = 0
        while i < len(line):
            if line[i] != MATH_DELIMITER:
                parts.append(line[i])
                i += 1
                continue

            end = line.find(MATH_DELIMITER, i + 1)
            if end == -1:
                parts.append(line[i:])
                break

            expression = line[i + 1:end]
            if expression.strip():
                parts.append(self._compile_span(expression))
            else:
                parts.append(line[i:end + 1])
            i = end + 1

        return "".join(parts) + LINE_BREAK

    def compile_safe(self, expression: str, inline: bool = True) -> Optional[str]:
        """Compile a whole expression, or return None (logged) on failure."""
        try:
            return self.compiler.compile_single_expression(expression, inline=inline)
        except (MathTexError, RecursionError) as e:
            logger.warning(f"Failed to compile expression '{expression}': {e}")
            return None

    def process_line(self, line: str, inline: bool = True) -> str:
        """
        Convert a line of plain input where math is not delimited.

        Lines that already contain math delimiters are left alone. A
        ``MATH:`` prefix forces compilation of the rest of the line;
        otherwise the line is compiled only if it looks like math.
        """
        stripped = line.strip()

        if MATH_DELIMITER in line or "```math" in line:
            return line

        if stripped.startswith(MATH_PREFIX):
            expression = stripped[len(MATH_PREFIX):].strip()
            if not expression:
                return line
            compiled = self.compile_safe(expression, inline)
            return compiled if compiled is not None else line

        if (
            stripped
            and _MATH_CHARS_RE.search(line)
            and not _PUNCTUATED_OPERATOR_RE.search(line)
            and not _URL_RE.search(line)
            and looks_like_math(stripped)
        ):
            compiled = self.compile_safe(stripped, inline)
            return compiled if compiled is not None else line

        return line


def scan_line(line: str, compiler: Optional[MathCompiler] = None) -> str:
    """Compile ``$...$`` spans in a line. Never raises."""
    return LineScanner(compiler).scan_line(line)


def process_line(line: str, inline: bool = True, compiler: Optional[MathCompiler] = None) -> str:
    """Compile a plain-input line if it is (or is marked as) math."""
    return LineScanner(compiler).process_line(line, inline)
