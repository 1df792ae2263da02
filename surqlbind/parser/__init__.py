"""Scanner and header parser for SurrealQL function definitions."""

from __future__ import annotations

from typing import Iterable, List

from ..models import FunctionSignature, SourceFile
from .header import HeaderParser, ParserState, parse_signatures
from .scanner import ScanState, Scanner


def parse_sources(sources: Iterable[SourceFile]) -> List[FunctionSignature]:
    """Parse every source in order; the first error aborts the whole run."""
    signatures: List[FunctionSignature] = []
    for source in sources:
        signatures.extend(HeaderParser(Scanner(source.text, source.origin)).parse())
    return signatures


__all__ = [
    "HeaderParser",
    "ParserState",
    "ScanState",
    "Scanner",
    "parse_signatures",
    "parse_sources",
]
