"""Maps SurrealQL parameter types to Python annotations."""

from __future__ import annotations

import re
from typing import Dict, Set

_SIMPLE: Dict[str, str] = {
    "bool": "bool",
    "int": "int",
    "float": "float",
    "number": "float",
    "decimal": "Decimal",
    "string": "str",
    "datetime": "datetime",
    "duration": "timedelta",
    "bytes": "bytes",
    "uuid": "UUID",
    "object": "dict",
    "array": "list",
    "set": "list",
}

IMPORTS: Dict[str, str] = {
    "Any": "from typing import Any",
    "Optional": "from typing import Optional",
    "Decimal": "from decimal import Decimal",
    "datetime": "from datetime import datetime",
    "timedelta": "from datetime import timedelta",
    "UUID": "from uuid import UUID",
}

_KIND = re.compile(r"\s*([A-Za-z_]+)\s*(?:<(.*)>)?\s*$", re.DOTALL)
_NAME = re.compile(r"[A-Za-z_]+")


def python_annotation(kind: str) -> str:
    """Return the Python annotation for a raw SurrealQL type."""
    match = _KIND.match(kind)
    if match is None:
        # Unions and anything else we cannot name precisely.
        return "Any"
    head, inner = match.group(1).lower(), match.group(2)
    if head == "option":
        return f"Optional[{python_annotation(inner or '')}]"
    return _SIMPLE.get(head, "Any")


def required_imports(annotation: str) -> Set[str]:
    """Return the import lines an annotation depends on."""
    return {IMPORTS[name] for name in _NAME.findall(annotation) if name in IMPORTS}


__all__ = ["IMPORTS", "python_annotation", "required_imports"]
