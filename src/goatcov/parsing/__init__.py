"""Go source parsing and function extraction."""

from goatcov.parsing.go import GoExtractor, SourceFunction, extract_functions
from goatcov.parsing.treesitter import get_parser, parse_code

__all__ = [
    "GoExtractor",
    "SourceFunction",
    "extract_functions",
    "get_parser",
    "parse_code",
]
