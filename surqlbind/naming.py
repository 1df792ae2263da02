"""Naming schemes for generated symbols and their conflict checks."""

from __future__ import annotations

from typing import Optional

from .errors import InvalidNamingTemplateError, NamingConflictError, NoTargetError
from .models import PLACEHOLDER, BindingRequest, NamingScheme, SchemeKind, TargetKind

IDENTITY_KEYWORD = "is"

# Any identifier-safe stand-in works for checking what a template produces.
_PROBE_NAME = "name"


def parse_scheme(text: str) -> NamingScheme:
    """Parse ``is``, ``prefix_$`` or ``$_suffix`` into a :class:`NamingScheme`."""
    value = text.strip()
    if value == IDENTITY_KEYWORD or value == PLACEHOLDER:
        return NamingScheme.identity()
    count = value.count(PLACEHOLDER)
    if count != 1:
        raise InvalidNamingTemplateError(
            f"naming template '{value}' must contain exactly one '{PLACEHOLDER}' "
            f"(found {count}); expected '{IDENTITY_KEYWORD}', 'prefix_$' or '$_suffix'"
        )
    if value.endswith(PLACEHOLDER):
        scheme = NamingScheme.prefix(value)
    elif value.startswith(PLACEHOLDER):
        scheme = NamingScheme.suffix(value)
    else:
        raise InvalidNamingTemplateError(
            f"naming template '{value}' must start or end with '{PLACEHOLDER}'; "
            f"expected '{IDENTITY_KEYWORD}', 'prefix_$' or '$_suffix'"
        )
    validate_scheme(scheme)
    return scheme


def parse_optional_scheme(text: Optional[str]) -> Optional[NamingScheme]:
    if text is None or not str(text).strip():
        return None
    return parse_scheme(str(text))


def validate_scheme(scheme: NamingScheme, target: Optional[TargetKind] = None) -> None:
    """Check a Prefix/Suffix template has one placeholder and yields identifiers."""
    if scheme.kind is SchemeKind.IDENTITY:
        return
    label = f"{target.value} " if target else ""
    template = scheme.template or ""
    count = template.count(PLACEHOLDER)
    if count != 1:
        raise InvalidNamingTemplateError(
            f"{label}naming template '{template}' must contain exactly one "
            f"'{PLACEHOLDER}' (found {count})"
        )
    if not scheme.apply(_PROBE_NAME).isidentifier():
        raise InvalidNamingTemplateError(
            f"{label}naming template '{template}' does not produce valid identifiers"
        )


def validate_request(request: BindingRequest) -> BindingRequest:
    """Validate a binding request, returning it unchanged when acceptable.

    Conflicts are detected structurally: two schemes that compare equal name
    every function identically, so requesting both targets with them would
    produce colliding symbols. Structurally different schemes are accepted.
    """
    targets = request.targets()
    if not targets:
        raise NoTargetError("no binding target requested; set a driver and/or datastore scheme")
    for target, scheme in targets:
        validate_scheme(scheme, target)
    if request.driver is not None and request.driver == request.datastore:
        raise NamingConflictError(
            f"driver and datastore cannot share the naming scheme '{request.driver}'"
        )
    return request


__all__ = [
    "IDENTITY_KEYWORD",
    "parse_optional_scheme",
    "parse_scheme",
    "validate_request",
    "validate_scheme",
]
