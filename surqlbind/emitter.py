"""Turns a validated namespace tree into generation descriptors."""

from __future__ import annotations

from typing import List, Tuple

from .models import (
    BOOTSTRAP_NAME,
    BindingRequest,
    BootstrapDescriptor,
    BootstrapEntry,
    GenerationDescriptor,
    NamespaceNode,
)


class DescriptorEmitter:
    """Walks the tree and names every wrapper for every requested target."""

    def __init__(self, request: BindingRequest) -> None:
        self.request = request

    def descriptors(self, tree: NamespaceNode) -> List[GenerationDescriptor]:
        targets = self.request.targets()
        output: List[GenerationDescriptor] = []
        for module_path, node in tree.walk_modules():
            for signature in node.functions.values():
                for target, scheme in targets:
                    output.append(
                        GenerationDescriptor(
                            signature=signature,
                            target=target,
                            symbol=scheme.apply(signature.leaf),
                            module_path=module_path,
                        )
                    )
        return output

    def bootstrap(self, tree: NamespaceNode) -> BootstrapDescriptor:
        entries = tuple(
            BootstrapEntry(
                qualified_name=signature.qualified_name,
                body_span=signature.body_span,
                origin=signature.origin,
                statement=signature.statement,
            )
            for signature in tree.walk()
        )
        registrars = {
            target: scheme.apply(BOOTSTRAP_NAME) for target, scheme in self.request.targets()
        }
        return BootstrapDescriptor(entries=entries, registrars=registrars)

    def emit(
        self, tree: NamespaceNode
    ) -> Tuple[List[GenerationDescriptor], BootstrapDescriptor]:
        return self.descriptors(tree), self.bootstrap(tree)


__all__ = ["DescriptorEmitter"]
