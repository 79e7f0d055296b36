"""
Document processing: text and files in, LaTeX out.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from mathtex.compiler import MathCompiler, get_default_compiler
from mathtex.exceptions import MathTexError, TemplateError
from mathtex.models import TranspilerConfig
from mathtex.scanner import LINE_BREAK, MATH_DELIMITER, LineScanner, looks_like_math
from mathtex.symbols import SymbolTable

logger = logging.getLogger(__name__)

TEMPLATE_PLACEHOLDER = "{{ generated }}"

_DOCUMENT_PREAMBLE = """\\documentclass{article}
\\usepackage{amsmath}
\\usepackage{amssymb}
\\usepackage{amsfonts}
\\usepackage{mathtools}
"""

SAMPLE_TEMPLATE = _DOCUMENT_PREAMBLE + """
\\title{Mathematical Expressions}
\\author{LaTeX Transpiler}
\\date{\\today}

\\begin{document}

\\maketitle

\\section{Generated Mathematical Expressions}

""" + TEMPLATE_PLACEHOLDER + """

\\end{document}
"""

SAMPLE_INPUT = """Some text here $a+b$

$x^2 + y^2 = r^2$
$sin(theta) + cos(theta)$
$sqrt(sin(alpha+1)/inf))$

More text here with $sqrt(x^2 + y^2)$ inline math.

Final paragraph with no math expressions."""


def create_latex_document(content: str) -> str:
    """Wrap content in a minimal article with the AMS packages."""
    return f"{_DOCUMENT_PREAMBLE}\n\\begin{{document}}\n\n{content}\n\n\\end{{document}}\n"


def apply_template(template: str, content: str) -> str:
    """Substitute generated content for the ``{{ generated }}`` placeholder."""
    if TEMPLATE_PLACEHOLDER not in template:
        logger.warning(f"Template has no '{TEMPLATE_PLACEHOLDER}' placeholder; content not inserted")
    return template.replace(TEMPLATE_PLACEHOLDER, content)


def load_template(path: Union[str, Path]) -> str:
    """
    Read a template file.

    Raises:
        TemplateError: If the file does not exist or is empty
    """
    path = Path(path)
    if not path.is_file():
        raise TemplateError(f"Template file '{path}' does not exist!", {"path": str(path)})

    template = path.read_text(encoding="utf-8")
    if not template.strip():
        raise TemplateError(f"Template file '{path}' is empty!", {"path": str(path)})
    return template


def create_sample_template(path: Union[str, Path] = "template.tex") -> Path:
    """Write the sample template and return its path."""
    path = Path(path)
    path.write_text(SAMPLE_TEMPLATE, encoding="utf-8")
    logger.info(f"Sample template created: {path}")
    return path


def create_sample_file(path: Union[str, Path] = "sample.txt") -> Path:
    """Write a sample mixed-content input file and return its path."""
    path = Path(path)
    path.write_text(SAMPLE_INPUT, encoding="utf-8")
    logger.info(f"Sample mixed content file created: {path}")
    return path


def build_compiler(config: TranspilerConfig) -> MathCompiler:
    """Create a compiler for the configured symbol file (or the shared default)."""
    if config.symbols_file:
        return MathCompiler(SymbolTable.from_file(config.symbols_file))
    return get_default_compiler()


class DocumentProcessor:
    """
    Converts whole documents.

    Usage example:

    ```python
    processor = DocumentProcessor(config=TranspilerConfig(document_wrapper=True))
    processor.process_file("notes.txt")  # writes notes.tex
    ```
    """

    def __init__(
        self,
        compiler: Optional[MathCompiler] = None,
        config: Optional[TranspilerConfig] = None
    ):
        self.config = config or TranspilerConfig()
        self.compiler = compiler or build_compiler(self.config)
        self.scanner = LineScanner(self.compiler)

    def convert_line(self, line: str) -> str:
        """Convert one line according to the configured mode."""
        if not self.config.mixed_content:
            return self.scanner.process_line(line, self.config.inline)

        if self.config.detect_math and MATH_DELIMITER not in line and looks_like_math(line.strip()):
            compiled = self.scanner.compile_safe(line.strip(), self.config.inline)
            if compiled is not None:
                return compiled + LINE_BREAK

        return self.scanner.scan_line(line)

    def convert_text(self, text: str) -> str:
        """Convert text line by line; a failing line is kept as is."""
        converted = []
        for line_num, line in enumerate(text.split("\n"), start=1):
            try:
                converted.append(self.convert_line(line))
            except MathTexError as e:
                logger.warning(f"Error processing line {line_num}: '{line}': {e}")
                converted.append(line)
        return "\n".join(converted)

    def render(self, text: str) -> str:
        """Convert text and apply the template or document wrapper."""
        content = self.convert_text(text)

        if self.config.template_file:
            return apply_template(load_template(self.config.template_file), content)
        if self.config.document_wrapper:
            return create_latex_document(content)
        return content

    def process_file(
        self,
        input_file: Union[str, Path],
        output_file: Optional[Union[str, Path]] = None
    ) -> Path:
        """
        Convert a text file to LaTeX.

        Args:
            input_file: Source text file
            output_file: Destination. Defaults to the input path with a .tex suffix

        Returns:
            Path of the written file

        Raises:
            FileNotFoundError: If the input file does not exist
            MathTexError: If the output path is the input file itself
            TemplateError: If the configured template is unusable
        """
        input_path = Path(input_file)
        if not input_path.is_file():
            raise FileNotFoundError(f"Input file '{input_path}' does not exist!")

        output_path = Path(output_file) if output_file else input_path.with_suffix(".tex")
        if output_path.resolve() == input_path.resolve():
            raise MathTexError(
                f"Output file '{output_path}' would overwrite the input file",
                {"input": str(input_path), "output": str(output_path)}
            )

        logger.info(f"Processing file: {input_path} -> {output_path}")

        text = input_path.read_text(encoding="utf-8")
        output_path.write_text(self.render(text), encoding="utf-8")

        logger.info(f"Output saved to: {output_path}")
        return output_path
