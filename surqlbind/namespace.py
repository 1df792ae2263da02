"""Builds the module tree from qualified function names."""

from __future__ import annotations

from typing import Iterable

from .errors import AmbiguousPathError, DuplicateFunctionError
from .logging import get_logger
from .models import FunctionSignature, NamespaceNode

logger = get_logger("namespace")


class NamespaceResolver:
    """Folds signatures into a :class:`NamespaceNode` tree.

    ``fn::a::b::c`` becomes module ``a``, sub-module ``b`` and function ``c``.
    Insertion order is preserved at every level so that downstream output
    follows the order in which sources were collected.
    """

    def __init__(self) -> None:
        self.root = NamespaceNode()

    def add(self, signature: FunctionSignature) -> None:
        node = self.root
        for segment in signature.path:
            clash = node.functions.get(segment)
            if clash is not None:
                raise AmbiguousPathError(signature.qualified_name, segment, signature.origin)
            child = node.children.get(segment)
            if child is None:
                child = node.children[segment] = NamespaceNode(segment=segment)
            node = child

        leaf = signature.leaf
        if leaf in node.children:
            raise AmbiguousPathError(signature.qualified_name, leaf, signature.origin)
        existing = node.functions.get(leaf)
        if existing is not None:
            raise DuplicateFunctionError(
                signature.qualified_name, (existing.origin, signature.origin)
            )
        node.functions[leaf] = signature

    def extend(self, signatures: Iterable[FunctionSignature]) -> "NamespaceResolver":
        for signature in signatures:
            self.add(signature)
        return self


def build_tree(signatures: Iterable[FunctionSignature]) -> NamespaceNode:
    """Return the validated namespace tree for ``signatures``."""
    root = NamespaceResolver().extend(signatures).root
    logger.debug(
        "Namespace tree holds %d function(s) across %d module(s)",
        len(root),
        sum(1 for _ in root.walk_modules()),
    )
    return root


__all__ = ["NamespaceResolver", "build_tree"]
