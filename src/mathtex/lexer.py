"""
Tokenizer for the compact math notation.

The tokenizer is total: characters it does not recognise become UNKNOWN
tokens and the parser decides what to do with them.
"""

from typing import List, Optional

from mathtex.models import Token, TokenType


# Names lexed as FUNCTION tokens. Greek letters are here too so that they
# resolve through the symbol table like function names do.
FUNCTION_NAMES = frozenset({
    "sqrt", "sin", "cos", "tan", "log", "ln", "exp",
    "sum", "int", "prod", "lim", "max", "min",
    "alpha", "beta", "gamma", "delta", "theta", "pi", "infinity",
    "lambda", "mu", "nu", "sigma", "omega",
})

OPERATOR_CHARS = "+-*/^_,"

_BRACKETS = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
}


def is_function(identifier: str) -> bool:
    """Check whether a word is one of the recognised function names."""
    return identifier in FUNCTION_NAMES


class MathLexer:
    """Single-pass scanner over one expression string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    @property
    def current_char(self) -> Optional[str]:
        return self.text[self.pos] if self.pos < len(self.text) else None

    def advance(self) -> None:
        self.pos += 1

    def skip_whitespace(self) -> None:
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def read_number(self) -> str:
        start = self.pos
        while self.current_char is not None and (self.current_char.isdigit() or self.current_char == "."):
            self.advance()
        return self.text[start:self.pos]

    def read_identifier(self) -> str:
        start = self.pos
        while self.current_char is not None and (self.current_char.isalnum() or self.current_char == "_"):
            self.advance()
        return self.text[start:self.pos]

    def next_token(self) -> Token:
        """Read the next token, or EOF at the end of input."""
        self.skip_whitespace()

        char = self.current_char
        position = self.pos + 1

        if char is None:
            return Token(type=TokenType.EOF, value="", position=position)

        if char.isdigit():
            return Token(type=TokenType.NUMBER, value=self.read_number(), position=position)

        if char.isalpha():
            word = self.read_identifier()
            token_type = TokenType.FUNCTION if is_function(word) else TokenType.IDENTIFIER
            return Token(type=token_type, value=word, position=position)

        self.advance()

        if char in OPERATOR_CHARS:
            return Token(type=TokenType.OPERATOR, value=char, position=position)
        if char in _BRACKETS:
            return Token(type=_BRACKETS[char], value=char, position=position)

        return Token(type=TokenType.UNKNOWN, value=char, position=position)

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens


def tokenize(expression: str) -> List[Token]:
    """
    Split an expression into tokens.

    Args:
        expression: Raw expression text, e.g. "sqrt(x^2 + y^2)"

    Returns:
        Tokens in source order, always terminated by a single EOF token
    """
    return MathLexer(expression).tokenize()
