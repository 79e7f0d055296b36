"""
Pydantic models for mathtex.

Tokens and AST nodes are frozen: they are built once by the lexer/parser
and only read afterwards.
"""

from enum import Enum
from typing import Optional, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


# ===== LEXER MODELS =====

class TokenType(str, Enum):
    """Lexical token kinds."""
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    FUNCTION = "FUNCTION"
    OPERATOR = "OPERATOR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    EOF = "EOF"
    UNKNOWN = "UNKNOWN"


class Token(BaseModel):
    """A single token with its 1-based source position."""
    model_config = ConfigDict(frozen=True)

    type: TokenType
    value: str
    position: int

    def __str__(self) -> str:
        return f"Token({self.type.value}, \"{self.value}\", {self.position})"


# ===== AST MODELS =====

class Number(BaseModel):
    """Numeric literal, kept as source text."""
    model_config = ConfigDict(frozen=True)

    value: str


class Variable(BaseModel):
    """Bare identifier or function name."""
    model_config = ConfigDict(frozen=True)

    name: str


class BinaryOp(BaseModel):
    """Binary operation."""
    model_config = ConfigDict(frozen=True)

    left: "ASTNode"
    operator: Literal["+", "-", "*", "/", "^", "_"]
    right: "ASTNode"


class UnaryOp(BaseModel):
    """Prefix sign."""
    model_config = ConfigDict(frozen=True)

    operator: Literal["+", "-"]
    operand: "ASTNode"


class FunctionCall(BaseModel):
    """Call with zero or more arguments."""
    model_config = ConfigDict(frozen=True)

    name: str
    args: List["ASTNode"] = Field(default_factory=list)


ASTNode = Union[Number, Variable, BinaryOp, UnaryOp, FunctionCall]

BinaryOp.model_rebuild()
UnaryOp.model_rebuild()
FunctionCall.model_rebuild()


# ===== CONFIG MODELS =====

class TranspilerConfig(BaseModel):
    """Persisted transpiler settings."""
    math_mode: Literal["inline", "display"] = Field(
        default="inline",
        description="Delimiters for whole-line expressions: $...$ or $$...$$"
    )
    mixed_content: bool = Field(
        default=True,
        description="Scan lines for $...$ spans instead of classifying whole lines"
    )
    detect_math: bool = Field(
        default=False,
        description="In mixed mode, also compile undelimited lines that look like math"
    )
    document_wrapper: bool = Field(default=False, description="Wrap output in a LaTeX article")
    symbols_file: Optional[str] = Field(
        default=None,
        description="Custom symbol definitions. None = bundled symbols.txt"
    )
    template_file: Optional[str] = Field(
        default=None,
        description="Template with a {{ generated }} placeholder"
    )

    @property
    def inline(self) -> bool:
        return self.math_mode == "inline"
