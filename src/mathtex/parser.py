"""
Recursive-descent parser producing the expression AST.

Grammar, lowest to highest precedence (every level is left-associative,
including ``^`` and ``_``, so ``a^b^c`` is ``(a^b)^c``)::

    expression := term (("+"|"-") term)*
    term       := power (("*"|"/") power)*
    power      := unary (("^"|"_") unary)*
    unary      := ("+"|"-") unary | primary
    primary    := NUMBER
                | (IDENTIFIER|FUNCTION) ["(" [expression ("," expression)*] ")"]
                | "(" expression ")"

Parentheses, call arguments and unary signs may nest at most
``MAX_NESTING_DEPTH`` levels deep.
"""

from typing import List, Optional

from mathtex.exceptions import ParseError
from mathtex.models import (
    ASTNode,
    BinaryOp,
    FunctionCall,
    Number,
    Token,
    TokenType,
    UnaryOp,
    Variable,
)

# Parentheses, calls and unary signs nested deeper than this are rejected
MAX_NESTING_DEPTH = 100


class MathParser:
    """Parser state over a token list."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def _descend(self, token: Token) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise ParseError(f"at most {MAX_NESTING_DEPTH} nesting levels", token)

    @property
    def current_token(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        # Past the end (or no EOF in the input): synthesise one.
        return Token(type=TokenType.EOF, value="", position=self.pos + 1)

    def advance(self) -> Token:
        token = self.current_token
        self.pos += 1
        return token

    def match(self, token_type: TokenType, *values: str) -> bool:
        token = self.current_token
        if token.type != token_type:
            return False
        return not values or token.value in values

    def consume(self, token_type: TokenType, value: Optional[str] = None) -> Token:
        """Consume the current token or raise ParseError."""
        values = (value,) if value is not None else ()
        if self.match(token_type, *values):
            return self.advance()
        expected = token_type.value if value is None else f"{token_type.value}('{value}')"
        raise ParseError(expected, self.current_token)

    # ===== GRAMMAR =====

    def parse_expression(self) -> ASTNode:
        left = self.parse_term()
        while self.match(TokenType.OPERATOR, "+", "-"):
            operator = self.advance().value
            left = BinaryOp(left=left, operator=operator, right=self.parse_term())
        return left

    def parse_term(self) -> ASTNode:
        left = self.parse_power()
        while self.match(TokenType.OPERATOR, "*", "/"):
            operator = self.advance().value
            left = BinaryOp(left=left, operator=operator, right=self.parse_power())
        return left

    def parse_power(self) -> ASTNode:
        left = self.parse_unary()
        while self.match(TokenType.OPERATOR, "^", "_"):
            operator = self.advance().value
            left = BinaryOp(left=left, operator=operator, right=self.parse_unary())
        return left

    def parse_unary(self) -> ASTNode:
        if self.match(TokenType.OPERATOR, "+", "-"):
            token = self.advance()
            self._descend(token)
            node = UnaryOp(operator=token.value, operand=self.parse_unary())
            self.depth -= 1
            return node
        return self.parse_primary()

    def parse_primary(self) -> ASTNode:
        token = self.current_token

        if token.type == TokenType.NUMBER:
            self.advance()
            return Number(value=token.value)

        if token.type in (TokenType.IDENTIFIER, TokenType.FUNCTION):
            self.advance()
            if not self.match(TokenType.LPAREN):
                return Variable(name=token.value)

            self._descend(self.advance())
            args: List[ASTNode] = []
            if not self.match(TokenType.RPAREN):
                args.append(self.parse_expression())
                while self.match(TokenType.OPERATOR, ","):
                    self.advance()
                    args.append(self.parse_expression())
            self.consume(TokenType.RPAREN)
            self.depth -= 1
            return FunctionCall(name=token.value, args=args)

        if token.type == TokenType.LPAREN:
            self._descend(self.advance())
            node = self.parse_expression()
            self.consume(TokenType.RPAREN)
            self.depth -= 1
            return node

        raise ParseError("expression", token)

    def parse(self) -> ASTNode:
        """Parse a complete expression; trailing tokens are an error."""
        node = self.parse_expression()
        if not self.match(TokenType.EOF):
            raise ParseError("end of input", self.current_token)
        return node


def parse_expression(tokens: List[Token]) -> ASTNode:
    """
    Parse a token list into an AST.

    Args:
        tokens: Output of ``tokenize``

    Returns:
        Root node of the expression

    Raises:
        ParseError: On a grammar violation or unconsumed trailing tokens
    """
    return MathParser(tokens).parse()


def format_ast(node: ASTNode, indent: int = 0) -> str:
    """Render an AST as an indented multi-line string."""
    spaces = "  " * indent

    if isinstance(node, Number):
        return f"{spaces}Number: {node.value}"
    if isinstance(node, Variable):
        return f"{spaces}Variable: {node.name}"
    if isinstance(node, BinaryOp):
        children = [format_ast(node.left, indent + 1), format_ast(node.right, indent + 1)]
        return "\n".join([f"{spaces}BinaryOp: {node.operator}"] + children)
    if isinstance(node, UnaryOp):
        return f"{spaces}UnaryOp: {node.operator}\n{format_ast(node.operand, indent + 1)}"
    if isinstance(node, FunctionCall):
        children = [format_ast(arg, indent + 1) for arg in node.args]
        return "\n".join([f"{spaces}FunctionCall: {node.name}"] + children)
    raise TypeError(f"Unknown AST node: {type(node).__name__}")
