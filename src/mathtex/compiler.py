"""
AST -> LaTeX code generator.
"""

from typing import List, Optional

from mathtex.exceptions import CompileError
from mathtex.lexer import tokenize
from mathtex.models import (
    ASTNode,
    BinaryOp,
    FunctionCall,
    Number,
    UnaryOp,
    Variable,
)
from mathtex.parser import parse_expression
from mathtex.symbols import SymbolTable


# Big operators whose single argument is written without parentheses
_NARY_FUNCTIONS = ("sum", "prod", "int")


class MathCompiler:
    """
    Compiles expressions into LaTeX using a symbol table.

    Usage example:

    ```python
    compiler = MathCompiler()
    compiler.compile_single_expression("sqrt(x^2 + y^2)")
    # '$\\sqrt{x^{2} + y^{2}}$'
    ```
    """

    def __init__(self, symbols: Optional[SymbolTable] = None):
        """
        Args:
            symbols: Symbol table. Defaults to the bundled definitions.
        """
        self.symbols = symbols if symbols is not None else SymbolTable.default()

    def compile_node(self, node: ASTNode) -> str:
        """Render one node (recursively) without math delimiters."""
        if isinstance(node, Number):
            return node.value

        if isinstance(node, Variable):
            return self.symbols.lookup(node.name)

        if isinstance(node, BinaryOp):
            return self._compile_binary(node)

        if isinstance(node, UnaryOp):
            operand = self.compile_node(node.operand)
            if node.operator in ("+", "-"):
                return f"{node.operator}{operand}"
            raise CompileError(f"Unknown unary operator: {node.operator}", {"operator": node.operator})

        if isinstance(node, FunctionCall):
            return self._compile_call(node)

        raise CompileError(f"Unknown AST node type: {type(node).__name__}")

    def _compile_binary(self, node: BinaryOp) -> str:
        # Walk the left spine iteratively; long chains like a+b+...+z nest leftwards
        spine: List[BinaryOp] = []
        current: ASTNode = node
        while isinstance(current, BinaryOp):
            spine.append(current)
            current = current.left

        latex = self.compile_node(current)
        for op in reversed(spine):
            latex = self._render_binary(op.operator, latex, self.compile_node(op.right))
        return latex

    @staticmethod
    def _render_binary(operator: str, left: str, right: str) -> str:
        if operator == "+":
            return f"{left} + {right}"
        if operator == "-":
            return f"{left} - {right}"
        if operator == "*":
            return f"{left} \\cdot {right}"
        if operator == "/":
            return f"\\frac{{{left}}}{{{right}}}"
        if operator == "^":
            return f"{left}^{{{right}}}"
        if operator == "_":
            return f"{left}_{{{right}}}"
        raise CompileError(f"Unknown binary operator: {operator}", {"operator": operator})

    def _compile_call(self, node: FunctionCall) -> str:
        name = self.symbols.lookup(node.name)
        if not node.args:
            return name

        args: List[str] = [self.compile_node(arg) for arg in node.args]

        if node.name == "sqrt" and len(args) == 1:
            return f"{name}{{{args[0]}}}"
        if node.name == "sqrt" and len(args) == 2:
            return f"{name}[{args[1]}]{{{args[0]}}}"

        if node.name in _NARY_FUNCTIONS:
            if len(args) == 1:
                return f"{name} {args[0]}"
            return f"{name}\\left({', '.join(args)}\\right)"

        if node.name == "lim":
            if len(args) >= 2:
                return f"{name}_{{{args[0]}}} {args[1]}"
            return f"{name} {args[0]}"

        return f"{name}\\left({', '.join(args)}\\right)"

    def render(self, ast: ASTNode) -> str:
        """
        Render an AST without math delimiters.

        Raises:
            CompileError: If a node cannot be rendered or the tree is too deep
        """
        try:
            return self.compile_node(ast)
        except RecursionError as e:
            raise CompileError("Expression is nested too deeply to compile") from e

    def generate(self, ast: ASTNode, inline: bool = True) -> str:
        """
        Render an AST wrapped in math delimiters.

        Args:
            ast: Parsed expression
            inline: ``$...$`` if True, ``$$...$$`` otherwise

        Returns:
            LaTeX math string
        """
        latex = self.render(ast)
        return f"${latex}$" if inline else f"$${latex}$$"

    def compile_expression(self, expression: str) -> str:
        """Tokenize, parse and render an expression without delimiters."""
        return self.render(parse_expression(tokenize(expression)))

    def compile_single_expression(self, expression: str, inline: bool = True) -> str:
        """
        Compile one expression end to end.

        Raises:
            ParseError: If the expression is not well formed or nested too deeply
        """
        return self.generate(parse_expression(tokenize(expression)), inline=inline)


# Shared default instance; its symbol table is never modified after loading
_default_compiler: Optional[MathCompiler] = None


def get_default_compiler() -> MathCompiler:
    """
    Get the process-wide compiler with the bundled symbols.

    Returns:
        MathCompiler
    """
    global _default_compiler

    if _default_compiler is None:
        _default_compiler = MathCompiler()

    return _default_compiler


def compile_single_expression(
    expression: str,
    inline: bool = True,
    compiler: Optional[MathCompiler] = None
) -> str:
    """
    Compile one expression to delimited LaTeX.

    Args:
        expression: Source expression, e.g. "a/b"
        inline: Inline (``$``) or display (``$$``) delimiters
        compiler: Compiler to use. Defaults to ``get_default_compiler()``

    Raises:
        ParseError: If the expression is not well formed or nested too deeply
    """
    compiler = compiler or get_default_compiler()
    return compiler.compile_single_expression(expression, inline=inline)
