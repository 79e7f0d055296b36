"""
mathtex CLI.

Usage:
    mathtex compile "x^2 + 3*y"
    mathtex debug "sqrt(a/b)"
    mathtex file input.txt output.tex --template my_template.tex
    mathtex interactive
    mathtex config set-mode display
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from mathtex.compiler import MathCompiler
from mathtex.config import get_config_manager
from mathtex.exceptions import MathTexError, ParseError
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
from mathtex.processor import (
    DocumentProcessor,
    create_sample_file,
    create_sample_template,
)
from mathtex.scanner import looks_like_math
from mathtex.symbols import SymbolTable

console = Console()

SAMPLE_EXPRESSIONS = [
    ("Basic algebra", "x^2 + 3*y - 5"),
    ("Fractions", "(a + b) / (c - d)"),
    ("Square root", "sqrt(x^2 + y^2)"),
    ("Trigonometry", "sin(x) + cos(y)"),
    ("Logarithm", "log(x) + ln(y)"),
    ("Exponential", "e^(x^2)"),
    ("Complex", "sqrt((a + b)^2 + (c - d)^2)"),
    ("Greek letters", "alpha + beta * gamma"),
]


def error(message: str) -> None:
    """Print an error."""
    console.print(f"[red]✗[/red] {message}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def info(message: str) -> None:
    """Print information."""
    console.print(f"[blue]ℹ[/blue] {message}")


def get_compiler(ctx: click.Context) -> MathCompiler:
    """Build a compiler from the --symbols option or the saved config."""
    symbols_file = ctx.obj.get("symbols") or get_config_manager().get_config().symbols_file
    if symbols_file:
        return MathCompiler(SymbolTable.from_file(symbols_file))
    return MathCompiler()


def build_ast_tree(node: ASTNode, tree: Optional[Tree] = None) -> Tree:
    """Build a rich Tree mirroring the AST."""
    if isinstance(node, Number):
        label = f"[green]Number[/green] {escape(node.value)}"
    elif isinstance(node, Variable):
        label = f"[cyan]Variable[/cyan] {escape(node.name)}"
    elif isinstance(node, BinaryOp):
        label = f"[yellow]BinaryOp[/yellow] {node.operator}"
    elif isinstance(node, UnaryOp):
        label = f"[yellow]UnaryOp[/yellow] {node.operator}"
    else:
        label = f"[magenta]FunctionCall[/magenta] {escape(node.name)}"

    branch = Tree(label) if tree is None else tree.add(label)

    if isinstance(node, BinaryOp):
        build_ast_tree(node.left, branch)
        build_ast_tree(node.right, branch)
    elif isinstance(node, UnaryOp):
        build_ast_tree(node.operand, branch)
    elif isinstance(node, FunctionCall):
        for arg in node.args:
            build_ast_tree(arg, branch)

    return branch


@click.group()
@click.option(
    "--symbols", "-s",
    envvar="MATHTEX_SYMBOLS",
    type=click.Path(exists=True, dir_okay=False),
    help="Symbol definitions file (default: bundled symbols.txt)"
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx, symbols: Optional[str], verbose: bool):
    """mathtex - convert compact math notation to LaTeX."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )
    ctx.ensure_object(dict)
    ctx.obj["symbols"] = symbols


# ===== EXPRESSION COMMANDS =====

@main.command("compile")
@click.argument("expression")
@click.option("--inline/--display", default=True, help="Math delimiters: $...$ or $$...$$")
@click.pass_context
def compile_cmd(ctx, expression: str, inline: bool):
    """Compile a single expression."""
    try:
        compiler = get_compiler(ctx)
        latex = compiler.compile_single_expression(expression, inline=inline)
        console.print(latex, markup=False, highlight=False, soft_wrap=True)
    except MathTexError as e:
        error(escape(f"Error compiling expression '{expression}': {e.message}"))
        sys.exit(1)


@main.command()
@click.argument("expression")
@click.pass_context
def debug(ctx, expression: str):
    """Show tokens, AST and LaTeX for an expression."""
    try:
        compiler = get_compiler(ctx)
        tokens = tokenize(expression)

        table = Table(title="Tokens")
        table.add_column("#", style="dim")
        table.add_column("Type", style="cyan")
        table.add_column("Value")
        table.add_column("Position", style="dim")
        for i, token in enumerate(tokens, start=1):
            table.add_row(str(i), token.type.value, Text(token.value), str(token.position))
        console.print(table)

        ast = parse_expression(tokens)
        console.print(Panel(build_ast_tree(ast), title="AST", border_style="blue"))

        latex = compiler.generate(ast)
        console.print(Panel(Text(latex), title="LaTeX", border_style="green"))

    except ParseError as e:
        error(escape(f"Parse error at position {e.token.position}: {e.message}"))
        sys.exit(1)
    except MathTexError as e:
        error(escape(f"Error: {e.message}"))
        sys.exit(1)


@main.command()
@click.argument("line")
def check(line: str):
    """Check whether an undelimited line looks like math."""
    if looks_like_math(line):
        success("Looks like math")
    else:
        info("Does not look like math")


# ===== FILE COMMANDS =====

@main.command("file")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_file", required=False, type=click.Path(dir_okay=False))
@click.option("--template", "-t", type=click.Path(exists=True, dir_okay=False), help="Template with {{ generated }}")
@click.option("--mode", "-m", type=click.Choice(["inline", "display"]), help="Math delimiters for whole-line expressions")
@click.option("--document-wrapper", is_flag=True, help="Wrap output in a LaTeX article")
@click.option("--plain", is_flag=True, help="Undelimited input: compile lines that look like math")
@click.option("--detect-math", is_flag=True, help="Also compile undelimited math lines in mixed input")
@click.pass_context
def file_cmd(
    ctx,
    input_file: str,
    output_file: Optional[str],
    template: Optional[str],
    mode: Optional[str],
    document_wrapper: bool,
    plain: bool,
    detect_math: bool,
):
    """Convert a text file to LaTeX."""
    try:
        config = get_config_manager().get_config().model_copy()
        if template:
            config.template_file = template
        if mode:
            config.math_mode = mode
        if document_wrapper:
            config.document_wrapper = True
        if plain:
            config.mixed_content = False
        if detect_math:
            config.detect_math = True

        processor = DocumentProcessor(compiler=get_compiler(ctx), config=config)

        with console.status(f"Processing {Path(input_file).name}..."):
            result = processor.process_file(input_file, output_file)

        if config.template_file:
            success(f"Processed '{input_file}' into '{result}' using template '{config.template_file}'")
        else:
            success(f"Processed '{input_file}' into '{result}'")

    except (MathTexError, OSError, UnicodeDecodeError) as e:
        error(escape(f"Error processing files: {e}"))
        sys.exit(1)


@main.command("create-template")
@click.argument("template_file", default="template.tex", type=click.Path(dir_okay=False))
def create_template(template_file: str):
    """Create a sample template file."""
    try:
        path = create_sample_template(template_file)
        success(f"Template created: {path}")
        info("Keep the '{{ generated }}' placeholder where the converted content should go")
    except OSError as e:
        error(f"Error creating template: {e}")
        sys.exit(1)


@main.command("create-sample")
@click.argument("sample_file", default="sample.txt", type=click.Path(dir_okay=False))
def create_sample(sample_file: str):
    """Create a sample input file with mixed text and math."""
    try:
        path = create_sample_file(sample_file)
        success(f"Sample file created: {path}")
    except OSError as e:
        error(f"Error creating sample file: {e}")
        sys.exit(1)


# ===== INTERACTIVE MODE =====

def show_interactive_help() -> None:
    """Print interactive mode help."""
    table = Table(title="Interactive mode", show_header=False)
    table.add_column("Command", style="cyan")
    table.add_column("Description")
    table.add_row("<expression>", "Convert to LaTeX, e.g. (a + b) / c, sqrt(x), alpha + beta")
    table.add_row("help, h", "Show this help")
    table.add_row("sample", "Show example expressions")
    table.add_row("clear, cls", "Clear the screen")
    table.add_row("quit, q", "Exit")
    console.print(table)


def show_samples(compiler: MathCompiler) -> None:
    """Print the sample expressions with their LaTeX."""
    table = Table(title="Sample expressions")
    table.add_column("Category", style="cyan")
    table.add_column("Input")
    table.add_column("LaTeX", style="green")

    for category, expression in SAMPLE_EXPRESSIONS:
        try:
            result = compiler.compile_single_expression(expression)
        except MathTexError as e:
            result = f"[red]{escape(e.message)}[/red]"
        table.add_row(category, escape(expression), result)

    console.print(table, highlight=False)


@main.command()
@click.pass_context
def interactive(ctx):
    """Read expressions and print their LaTeX until 'quit'."""
    compiler = get_compiler(ctx)

    console.print(Panel("Math expression → LaTeX\nType [cyan]help[/cyan] for commands", title="mathtex"))

    while True:
        try:
            text = click.prompt("math", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            console.print()
            break

        if not text.strip():
            continue

        cmd = text.strip().lower()

        if cmd in ("quit", "exit", "q"):
            break
        elif cmd in ("help", "h"):
            show_interactive_help()
        elif cmd in ("clear", "cls"):
            console.clear()
        elif cmd in ("sample", "samples"):
            show_samples(compiler)
        else:
            try:
                latex = compiler.compile_single_expression(text)
                console.print(f"LaTeX: {latex}", markup=False, highlight=False, soft_wrap=True)
            except MathTexError as e:
                error(escape(e.message))


# ===== CONFIG COMMANDS =====

@main.group()
def config():
    """Manage saved settings."""
    pass


@config.command("show")
def config_show():
    """Show the current settings."""
    manager = get_config_manager()
    current = manager.get_config()

    table = Table(title="Settings", show_header=False)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value")

    table.add_row("Math mode", current.math_mode)
    table.add_row("Mixed content", "yes" if current.mixed_content else "no")
    table.add_row("Detect undelimited math", "yes" if current.detect_math else "no")
    table.add_row("Document wrapper", "yes" if current.document_wrapper else "no")
    table.add_row("Symbols file", current.symbols_file or "bundled")
    table.add_row("Template file", current.template_file or "-")
    table.add_row("Config file", str(manager.config_file))

    console.print(table)


@config.command("set-mode")
@click.argument("mode", type=click.Choice(["inline", "display"]))
def config_set_mode(mode: str):
    """Set the math mode (inline/display)."""
    get_config_manager().set_math_mode(mode)
    success(f"Math mode set to: [bold]{mode}[/bold]")


@config.command("set-symbols")
@click.argument("path")
def config_set_symbols(path: str):
    """Set the symbols file ('none' for the bundled one)."""
    try:
        get_config_manager().set_symbols_file(None if path.lower() == "none" else path)
        success("Symbols file updated")
    except MathTexError as e:
        error(e.message)
        sys.exit(1)


@config.command("set-template")
@click.argument("path")
def config_set_template(path: str):
    """Set the default template ('none' to disable)."""
    try:
        get_config_manager().set_template_file(None if path.lower() == "none" else path)
        success("Template updated")
    except MathTexError as e:
        error(e.message)
        sys.exit(1)


@config.command("reset")
def config_reset():
    """Restore default settings."""
    get_config_manager().reset()
    success("Settings reset")


if __name__ == "__main__":
    main()
