"""
Symbol table: source names -> LaTeX fragments.

Definitions are ``key = value`` lines. Lines that do not split into exactly
two parts on ``=`` are skipped.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Union

from mathtex.exceptions import SymbolTableError

logger = logging.getLogger(__name__)

DEFAULT_SYMBOLS_FILE = Path(__file__).parent / "data" / "symbols.txt"


def parse_definitions(lines: Iterable[str]) -> Dict[str, str]:
    """Parse ``key = value`` lines into a dict."""
    definitions: Dict[str, str] = {}
    for line in lines:
        parts = line.split("=")
        if len(parts) != 2:
            continue
        key, value = parts[0].strip(), parts[1].strip()
        definitions[key] = value
    return definitions


class SymbolTable(Mapping[str, str]):
    """Read-only name -> markup mapping owned by a compiler."""

    def __init__(self, definitions: Optional[Mapping[str, str]] = None):
        self._symbols = MappingProxyType(dict(definitions or {}))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SymbolTable":
        """
        Load definitions from a file.

        Args:
            path: Path to a ``key = value`` definitions file

        Raises:
            SymbolTableError: If the file cannot be read
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                definitions = parse_definitions(f)
        except (OSError, UnicodeDecodeError) as e:
            raise SymbolTableError(
                f"Cannot read symbol definitions: {path}",
                {"path": str(path), "reason": str(e)}
            ) from e

        logger.debug(f"Loaded {len(definitions)} symbols from {path}")
        return cls(definitions)

    @classmethod
    def default(cls) -> "SymbolTable":
        """Load the definitions bundled with the package."""
        return cls.from_file(DEFAULT_SYMBOLS_FILE)

    def lookup(self, name: str) -> str:
        """Resolve a name, falling back to the name itself."""
        return self._symbols.get(name, name)

    def __getitem__(self, key: str) -> str:
        return self._symbols[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)
