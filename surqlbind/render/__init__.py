"""Python source rendering for generated SurrealQL bindings."""

from .kinds import python_annotation
from .renderer import BindingRenderer, call_query, safe_identifier

__all__ = [
    "BindingRenderer",
    "call_query",
    "python_annotation",
    "safe_identifier",
]
