"""
mathtex.

Converts compact hand-typed math notation into LaTeX.
"""

from mathtex.compiler import MathCompiler, compile_single_expression, get_default_compiler
from mathtex.lexer import tokenize
from mathtex.parser import MathParser, parse_expression, format_ast
from mathtex.scanner import LineScanner, scan_line, process_line, looks_like_math
from mathtex.symbols import SymbolTable
from mathtex.processor import DocumentProcessor, apply_template, create_latex_document
from mathtex.models import (
    Token,
    TokenType,
    ASTNode,
    Number,
    Variable,
    BinaryOp,
    UnaryOp,
    FunctionCall,
    TranspilerConfig,
)
from mathtex.exceptions import (
    MathTexError,
    LexError,
    ParseError,
    CompileError,
    SymbolTableError,
    TemplateError,
    ConfigError,
)

__version__ = "1.0.0"

__all__ = [
    # Pipeline
    "tokenize",
    "parse_expression",
    "format_ast",
    "MathParser",
    "MathCompiler",
    "compile_single_expression",
    "get_default_compiler",
    "SymbolTable",
    # Scanning
    "LineScanner",
    "scan_line",
    "process_line",
    "looks_like_math",
    # Documents
    "DocumentProcessor",
    "apply_template",
    "create_latex_document",
    # Models
    "Token",
    "TokenType",
    "ASTNode",
    "Number",
    "Variable",
    "BinaryOp",
    "UnaryOp",
    "FunctionCall",
    "TranspilerConfig",
    # Exceptions
    "MathTexError",
    "LexError",
    "ParseError",
    "CompileError",
    "SymbolTableError",
    "TemplateError",
    "ConfigError",
]
