"""Configuration loading for surqlbind (.surqlbind.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError, NoPathError
from .models import BindingRequest
from .naming import parse_optional_scheme, validate_request

CONFIG_FILENAME = ".surqlbind.yml"
DEFAULT_OUTPUT = "surql_functions"


@dataclass
class GenerationConfig:
    """Settings for one generation run: targets, naming schemes and sources."""

    root: Path
    driver: Optional[str] = None
    datastore: Optional[str] = None
    paths: List[str] = field(default_factory=list)
    output: Optional[Path] = None
    verbose: bool = False

    def binding_request(self) -> BindingRequest:
        """Parse and validate the requested naming schemes."""
        request = BindingRequest(
            driver=parse_optional_scheme(self.driver),
            datastore=parse_optional_scheme(self.datastore),
        )
        return validate_request(request)

    def require_paths(self) -> List[str]:
        if not self.paths:
            raise NoPathError("no source path provided")
        return list(self.paths)

    def merged(
        self,
        *,
        driver: Optional[str] = None,
        datastore: Optional[str] = None,
        paths: Sequence[str] | None = None,
        output: Optional[Path] = None,
    ) -> "GenerationConfig":
        """Return a copy with command-line overrides applied."""
        return replace(
            self,
            driver=driver if driver is not None else self.driver,
            datastore=datastore if datastore is not None else self.datastore,
            paths=list(paths) if paths else list(self.paths),
            output=output if output is not None else self.output,
        )


def load_config(config_path: Path) -> GenerationConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GenerationConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output = _as_str(data.get("output"))
    return GenerationConfig(
        root=root,
        driver=_as_str(data.get("driver")),
        datastore=_as_str(data.get("datastore")),
        paths=[anchor_path(root, item) for item in _as_str_list(data.get("paths"))],
        output=Path(anchor_path(root, output)) if output else None,
        verbose=bool(data.get("verbose", False)),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def anchor_path(root: Path, value: str) -> str:
    """Make a relative path argument absolute against ``root``."""
    # Environment references are expanded by the collector, so leave them as is.
    if value.startswith("$") or Path(value).expanduser().is_absolute():
        return value
    return str(root / value)


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "DEFAULT_OUTPUT", "GenerationConfig", "anchor_path", "load_config"]
