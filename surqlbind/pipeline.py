"""Generation pipeline: collect, parse, resolve, name and describe."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from .collector import SourceCollector
from .config import GenerationConfig
from .emitter import DescriptorEmitter
from .errors import NoPathError
from .logging import get_logger
from .models import BindingRequest, GenerationResult, SourceFile
from .namespace import build_tree
from .naming import validate_request
from .parser import parse_sources

logger = get_logger("pipeline")


def generate_from_sources(
    sources: Iterable[SourceFile], request: BindingRequest
) -> GenerationResult:
    """Run the core pipeline over already collected sources."""
    validate_request(request)
    sources = list(sources)
    signatures = parse_sources(sources)
    tree = build_tree(signatures)
    descriptors, bootstrap = DescriptorEmitter(request).emit(tree)
    logger.info(
        "Described %d function(s) as %d binding(s) from %d file(s)",
        len(bootstrap.entries),
        len(descriptors),
        len(sources),
    )
    return GenerationResult(
        request=request,
        tree=tree,
        descriptors=descriptors,
        bootstrap=bootstrap,
        sources=sources,
    )


def generate(
    paths: Sequence[str | Path],
    request: BindingRequest,
    *,
    collector: SourceCollector | None = None,
) -> GenerationResult:
    """Validate the request, then generate descriptors for every path.

    Both the request and the path list are checked before any file is read.
    """
    validate_request(request)
    if not paths:
        raise NoPathError("no source path provided")
    sources = (collector or SourceCollector()).collect(paths)
    return generate_from_sources(sources, request)


def generate_from_config(config: GenerationConfig) -> GenerationResult:
    request = config.binding_request()
    paths = config.require_paths()
    return generate(paths, request, collector=SourceCollector(base_dir=config.root))


__all__ = ["generate", "generate_from_config", "generate_from_sources"]
