"""Core data models shared across surqlbind components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

NAMESPACE_MARKER = "fn"
SEGMENT_SEPARATOR = "::"
PLACEHOLDER = "$"
BOOTSTRAP_NAME = "define_functions"


@dataclass(frozen=True)
class Position:
    """Location in a source text; offset is 0-based, line and column 1-based."""

    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Span:
    """Half-open range of source text between two positions."""

    start: Position
    end: Position

    def slice(self, text: str) -> str:
        return text[self.start.offset : self.end.offset]


@dataclass(frozen=True)
class SourceFile:
    """Raw text of one query-language file tagged with its origin."""

    origin: str
    text: str
    path: Optional[Path] = None


class TokenKind(str, Enum):
    KEYWORD = "keyword"
    IDENTIFIER = "identifier"
    PUNCTUATION = "punctuation"
    STRING = "string"
    COMMENT = "comment"
    NUMBER = "number"
    OPERATOR = "operator"
    EOF = "end-of-input"


@dataclass(frozen=True)
class Token:
    """Lexical token; ``end`` is the offset just past the token's source text."""

    kind: TokenKind
    text: str
    position: Position
    end: int

    def is_punct(self, char: str) -> bool:
        return self.kind is TokenKind.PUNCTUATION and self.text == char

    def is_keyword(self, word: str) -> bool:
        return self.kind is TokenKind.KEYWORD and self.text.upper() == word

    @property
    def end_position(self) -> Position:
        # Only meaningful for single-line tokens such as punctuation.
        width = self.end - self.position.offset
        return Position(self.end, self.position.line, self.position.column + width)


@dataclass(frozen=True)
class Parameter:
    """Declared function parameter with its raw, unparsed type text."""

    name: str
    kind: str


@dataclass(frozen=True)
class FunctionSignature:
    """A recognized ``DEFINE FUNCTION`` header and the extent of its body."""

    name: Tuple[str, ...]
    params: Tuple[Parameter, ...]
    body_span: Span
    origin: str
    body: str = ""
    statement: str = ""
    comments: Tuple[str, ...] = ()

    @property
    def path(self) -> Tuple[str, ...]:
        return self.name[:-1]

    @property
    def leaf(self) -> str:
        return self.name[-1]

    @property
    def qualified_name(self) -> str:
        return SEGMENT_SEPARATOR.join((NAMESPACE_MARKER, *self.name))


@dataclass
class NamespaceNode:
    """One module level of the function namespace tree."""

    segment: Optional[str] = None
    children: Dict[str, "NamespaceNode"] = field(default_factory=dict)
    functions: Dict[str, FunctionSignature] = field(default_factory=dict)

    def walk(self) -> Iterator[FunctionSignature]:
        """Yield every signature, own functions first, then each child subtree."""
        yield from self.functions.values()
        for child in self.children.values():
            yield from child.walk()

    def walk_modules(
        self, prefix: Tuple[str, ...] = ()
    ) -> Iterator[Tuple[Tuple[str, ...], "NamespaceNode"]]:
        """Yield ``(module path, node)`` pairs in the same order as :meth:`walk`."""
        yield prefix, self
        for name, child in self.children.items():
            yield from child.walk_modules(prefix + (name,))

    def qualified_names(self) -> List[str]:
        return [signature.qualified_name for signature in self.walk()]

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())


class SchemeKind(str, Enum):
    IDENTITY = "identity"
    PREFIX = "prefix"
    SUFFIX = "suffix"


@dataclass(frozen=True)
class NamingScheme:
    """Rule deriving a generated symbol name from a function's leaf name."""

    kind: SchemeKind = SchemeKind.IDENTITY
    template: Optional[str] = None

    @classmethod
    def identity(cls) -> "NamingScheme":
        return cls(SchemeKind.IDENTITY)

    @classmethod
    def prefix(cls, template: str) -> "NamingScheme":
        return cls(SchemeKind.PREFIX, template)

    @classmethod
    def suffix(cls, template: str) -> "NamingScheme":
        return cls(SchemeKind.SUFFIX, template)

    def apply(self, name: str) -> str:
        if self.kind is SchemeKind.IDENTITY or self.template is None:
            return name
        return self.template.replace(PLACEHOLDER, name, 1)

    def __str__(self) -> str:
        return "is" if self.kind is SchemeKind.IDENTITY else str(self.template)


class TargetKind(str, Enum):
    DRIVER = "driver"
    DATASTORE = "datastore"


@dataclass(frozen=True)
class BindingRequest:
    """Requested binding targets and the naming scheme of each."""

    driver: Optional[NamingScheme] = None
    datastore: Optional[NamingScheme] = None

    def targets(self) -> List[Tuple[TargetKind, NamingScheme]]:
        """Return the requested targets, driver first."""
        selected: List[Tuple[TargetKind, NamingScheme]] = []
        if self.driver is not None:
            selected.append((TargetKind.DRIVER, self.driver))
        if self.datastore is not None:
            selected.append((TargetKind.DATASTORE, self.datastore))
        return selected


@dataclass(frozen=True)
class GenerationDescriptor:
    """One wrapper to generate: a signature bound to a single target."""

    signature: FunctionSignature
    target: TargetKind
    symbol: str
    module_path: Tuple[str, ...]


@dataclass(frozen=True)
class BootstrapEntry:
    qualified_name: str
    body_span: Span
    origin: str
    statement: str


@dataclass(frozen=True)
class BootstrapDescriptor:
    """Every parsed definition, in tree-walk order, for runtime registration."""

    entries: Tuple[BootstrapEntry, ...]
    registrars: Dict[TargetKind, str] = field(default_factory=dict)

    def stored_functions(self) -> str:
        """Return all definition statements as one executable query."""
        if not self.entries:
            return ""
        return ";\n".join(entry.statement for entry in self.entries) + ";\n"


@dataclass
class GenerationResult:
    """Terminal output of a generation run."""

    request: BindingRequest
    tree: NamespaceNode
    descriptors: List[GenerationDescriptor]
    bootstrap: BootstrapDescriptor
    sources: List[SourceFile] = field(default_factory=list)

    def descriptors_for(self, module_path: Tuple[str, ...]) -> List[GenerationDescriptor]:
        return [item for item in self.descriptors if item.module_path == module_path]
