"""Renders generation results into a Python package of wrapper modules."""

from __future__ import annotations

import keyword
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Dict, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader

from ..logging import get_logger
from ..models import (
    PLACEHOLDER,
    GenerationDescriptor,
    GenerationResult,
    TargetKind,
)
from .kinds import IMPORTS, python_annotation, required_imports

MODULE_TEMPLATE = "module.py.j2"
MODULE_FILENAME = "__init__.py"

logger = get_logger("render")


@dataclass
class RenderedParam:
    name: str
    bind: str
    annotation: str


@dataclass
class RenderedWrapper:
    """Template-ready view of one generation descriptor."""

    symbol: str
    target: str
    is_async: bool
    connection: str
    params: List[RenderedParam]
    query: str
    doc: Optional[str]

    @property
    def arguments(self) -> str:
        parts = [f"{self.connection}: Any"]
        parts.extend(f"{param.name}: {param.annotation}" for param in self.params)
        return ", ".join(parts)

    @property
    def bindings(self) -> str:
        items = ", ".join(f"{param.bind!r}: {param.name}" for param in self.params)
        return "{" + items + "}"


CONNECTION_NAMES = frozenset({"db", "ds"})


def safe_identifier(name: str, reserved: AbstractSet[str] = frozenset()) -> str:
    """Return ``name`` usable as a Python identifier that avoids ``reserved``."""
    while keyword.iskeyword(name) or name in reserved:
        name = f"{name}_"
    return name


def call_query(descriptor: GenerationDescriptor) -> str:
    """Return the SurrealQL statement that invokes the described function."""
    signature = descriptor.signature
    arguments = ", ".join(f"{PLACEHOLDER}{param.name}" for param in signature.params)
    return f"RETURN {signature.qualified_name}({arguments})"


def _wrapper(descriptor: GenerationDescriptor) -> RenderedWrapper:
    is_driver = descriptor.target is TargetKind.DRIVER
    taken = set(CONNECTION_NAMES)
    params: List[RenderedParam] = []
    for param in descriptor.signature.params:
        name = safe_identifier(param.name, taken)
        taken.add(name)
        params.append(
            RenderedParam(name=name, bind=param.name, annotation=python_annotation(param.kind))
        )
    comments = descriptor.signature.comments
    return RenderedWrapper(
        symbol=safe_identifier(descriptor.symbol),
        target=descriptor.target.value,
        is_async=is_driver,
        connection="db" if is_driver else "ds",
        params=params,
        query=call_query(descriptor),
        doc="\n".join(comments) if comments else None,
    )


class BindingRenderer:
    """Renders one module per namespace node using Jinja templates."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render_modules(self, result: GenerationResult) -> Dict[Tuple[str, ...], str]:
        """Return rendered source keyed by module path (root is ``()``)."""
        template = self._env.get_template(MODULE_TEMPLATE)
        modules: Dict[Tuple[str, ...], str] = {}
        for module_path, node in result.tree.walk_modules():
            wrappers = [_wrapper(item) for item in result.descriptors_for(module_path)]
            bootstrap = self._bootstrap_context(result) if not module_path else None
            modules[module_path] = template.render(
                qualified_path="::".join(module_path),
                imports=self._imports(wrappers),
                wrappers=wrappers,
                bootstrap=bootstrap,
                children=[safe_identifier(name) for name in node.children],
            )
        return modules

    def render_root(self, result: GenerationResult) -> str:
        return self.render_modules(result)[()]

    def write(self, result: GenerationResult, output_dir: Path) -> List[Path]:
        """Write the rendered package under ``output_dir``; return written files."""
        written: List[Path] = []
        for module_path, source in self.render_modules(result).items():
            directory = output_dir.joinpath(*(safe_identifier(part) for part in module_path))
            directory.mkdir(parents=True, exist_ok=True)
            target = directory / MODULE_FILENAME
            target.write_text(source, encoding="utf-8")
            written.append(target)
        logger.info("Wrote %d module(s) to %s", len(written), output_dir)
        return written

    @staticmethod
    def _bootstrap_context(result: GenerationResult) -> Dict[str, object]:
        registrars = result.bootstrap.registrars
        return {
            "text": result.bootstrap.stored_functions(),
            "driver": registrars.get(TargetKind.DRIVER),
            "datastore": registrars.get(TargetKind.DATASTORE),
            "count": len(result.bootstrap.entries),
        }

    @staticmethod
    def _imports(wrappers: List[RenderedWrapper]) -> List[str]:
        lines = {IMPORTS["Any"]}
        for wrapper in wrappers:
            for param in wrapper.params:
                lines.update(required_imports(param.annotation))
        return sorted(lines)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.filters["pyrepr"] = repr
        return env


__all__ = [
    "BindingRenderer",
    "RenderedWrapper",
    "call_query",
    "safe_identifier",
]
