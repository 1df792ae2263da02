"""Typed wrapper generation for SurrealQL stored functions."""

from .errors import SurqlBindError
from .models import BindingRequest, GenerationResult, NamingScheme, TargetKind
from .pipeline import generate

__all__ = [
    "BindingRequest",
    "GenerationResult",
    "NamingScheme",
    "SurqlBindError",
    "TargetKind",
    "generate",
]
