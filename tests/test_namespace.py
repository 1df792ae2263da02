"""Tests for surqlbind.namespace."""

from __future__ import annotations

import pytest

from surqlbind.errors import AmbiguousPathError, DuplicateFunctionError
from surqlbind.models import FunctionSignature, Position, Span
from surqlbind.namespace import NamespaceResolver, build_tree

_SPAN = Span(Position(0, 1, 1), Position(2, 1, 3))


def _signature(qualified: str, origin: str = "main.surql") -> FunctionSignature:
    return FunctionSignature(
        name=tuple(qualified.split("::")[1:]),
        params=(),
        body_span=_SPAN,
        origin=origin,
        body="{}",
        statement=f"DEFINE FUNCTION {qualified}() {{}}",
    )


def test_build_tree_nests_modules_in_insertion_order() -> None:
    tree = build_tree(
        [
            _signature("fn::users::create"),
            _signature("fn::greet"),
            _signature("fn::users::admin::promote"),
            _signature("fn::audit::log"),
            _signature("fn::users::delete"),
        ]
    )

    assert tree.segment is None
    assert list(tree.functions) == ["greet"]
    assert list(tree.children) == ["users", "audit"]
    users = tree.children["users"]
    assert users.segment == "users"
    assert list(users.functions) == ["create", "delete"]
    assert list(users.children) == ["admin"]
    assert list(users.children["admin"].functions) == ["promote"]


def test_walk_recovers_every_qualified_name_once() -> None:
    names = [
        "fn::a::b::c",
        "fn::a::d",
        "fn::e",
        "fn::a::b::f",
        "fn::g::h",
    ]

    tree = build_tree([_signature(name) for name in names])

    assert sorted(tree.qualified_names()) == sorted(names)
    assert len(tree) == len(names)
    assert [path for path, _ in tree.walk_modules()] == [(), ("a",), ("a", "b"), ("g",)]


def test_duplicate_names_report_origins_in_collection_order() -> None:
    resolver = NamespaceResolver()
    resolver.add(_signature("fn::foo", origin="first.surql"))

    with pytest.raises(DuplicateFunctionError) as excinfo:
        resolver.add(_signature("fn::foo", origin="second.surql"))

    assert excinfo.value.qualified_name == "fn::foo"
    assert excinfo.value.origins == ("first.surql", "second.surql")
    assert "first in first.surql" in str(excinfo.value)


def test_function_then_module_with_same_name_is_ambiguous() -> None:
    with pytest.raises(AmbiguousPathError) as excinfo:
        build_tree([_signature("fn::users"), _signature("fn::users::create")])

    assert excinfo.value.segment == "users"


def test_module_then_function_with_same_name_is_ambiguous() -> None:
    with pytest.raises(AmbiguousPathError, match="both as a function and as a module"):
        build_tree([_signature("fn::users::create"), _signature("fn::users")])


def test_same_leaf_in_different_modules_is_allowed() -> None:
    tree = build_tree([_signature("fn::a::create"), _signature("fn::b::create")])

    assert tree.children["a"].functions["create"].qualified_name == "fn::a::create"
    assert tree.children["b"].functions["create"].qualified_name == "fn::b::create"
