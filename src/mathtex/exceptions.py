"""
Exceptions for mathtex.
"""

from typing import Optional, Dict, Any

from mathtex.models import Token


class MathTexError(Exception):
    """Base exception for mathtex."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class LexError(MathTexError):
    """Lexical error. The tokenizer encodes bad input as UNKNOWN tokens instead."""
    pass


class ParseError(MathTexError):
    """The token stream does not match the expression grammar."""

    def __init__(self, expected: str, token: Token, details: Optional[Dict[str, Any]] = None):
        self.expected = expected
        self.token = token
        message = f"Expected {expected}, got {token}"
        merged = {
            "expected": expected,
            "actual_type": token.type.value,
            "actual_value": token.value,
            "position": token.position,
        }
        merged.update(details or {})
        super().__init__(message, merged)


class CompileError(MathTexError):
    """The code generator met a node or operator it cannot render."""
    pass


class SymbolTableError(MathTexError):
    """Symbol definitions could not be read."""
    pass


class TemplateError(MathTexError):
    """Document template is missing or empty."""
    pass


class ConfigError(MathTexError):
    """Invalid configuration value."""
    pass
