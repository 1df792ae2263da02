"""Source collection: path arguments to ordered SurrealQL texts."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Set

from .errors import NoPathError, PathResolutionError, SourceNotFoundError
from .logging import get_logger
from .models import SourceFile

SOURCE_SUFFIX = ".surql"

_VARIABLE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
}

logger = get_logger("collector")


def resolve_path(
    raw: str, get_env: Callable[[str], Optional[str]] = os.environ.get
) -> Path:
    """Expand ``$NAME`` references in ``raw``; expansion is not recursive."""
    resolved: List[str] = []
    index = 0
    while True:
        dollar = raw.find("$", index)
        if dollar == -1:
            resolved.append(raw[index:])
            break
        resolved.append(raw[index:dollar])
        match = _VARIABLE.match(raw, dollar + 1)
        if match is None:
            raise PathResolutionError(f'unable to parse a variable from "{raw[dollar:]}"')
        value = get_env(match.group())
        if value is None:
            raise PathResolutionError(f"unable to resolve ${match.group()} in path {raw}")
        resolved.append(value)
        index = match.end()
    return Path("".join(resolved))


def _iter_sources(path: Path) -> Iterator[Path]:
    if not path.is_dir():
        if path.suffix == SOURCE_SUFFIX:
            yield path
        return
    for dirpath, dirnames, filenames in os.walk(path):
        # os.walk honours in-place edits; sorting keeps traversal reproducible.
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        for filename in sorted(filenames):
            if filename.endswith(SOURCE_SUFFIX):
                yield Path(dirpath) / filename


class SourceCollector:
    """Resolves path arguments into an ordered, de-duplicated list of sources."""

    def __init__(
        self,
        base_dir: Path | None = None,
        get_env: Callable[[str], Optional[str]] = os.environ.get,
    ) -> None:
        self.base_dir = base_dir
        self.get_env = get_env

    def expand(self, paths: Sequence[str | Path]) -> List[Path]:
        """Return the ``.surql`` files named by ``paths`` in collection order."""
        if not paths:
            raise NoPathError("no source path provided")

        files: List[Path] = []
        seen: Set[Path] = set()
        for raw in paths:
            path = resolve_path(str(raw), self.get_env).expanduser()
            if self.base_dir is not None and not path.is_absolute():
                path = self.base_dir / path
            if not path.exists():
                raise SourceNotFoundError(f"source path does not exist: {raw}")
            for source in _iter_sources(path):
                key = source.resolve()
                if key in seen:
                    continue
                seen.add(key)
                files.append(source)
        if not files:
            joined = ", ".join(str(raw) for raw in paths)
            raise NoPathError(f"no {SOURCE_SUFFIX} files found in {joined}")
        logger.debug("Collected %d source file(s) from %d path(s)", len(files), len(paths))
        return files

    def collect(self, paths: Sequence[str | Path]) -> List[SourceFile]:
        return [
            SourceFile(origin=str(path), text=path.read_text(encoding="utf-8"), path=path)
            for path in self.expand(paths)
        ]


__all__ = ["SOURCE_SUFFIX", "SourceCollector", "resolve_path"]
