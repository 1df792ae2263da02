from __future__ import annotations

import pytest

from surqlbind.render.kinds import python_annotation, required_imports


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        ("string", "str"),
        ("int", "int"),
        ("bool", "bool"),
        ("number", "float"),
        ("datetime", "datetime"),
        ("array<string>", "list"),
        ("record<user>", "Any"),
        ("option<int>", "Optional[int]"),
        ("option< int>", "Optional[int]"),
        ("option<array<int, 10>>", "Optional[list]"),
        ("string | int", "Any"),
    ],
)
def test_python_annotation(kind: str, expected: str) -> None:
    assert python_annotation(kind) == expected


def test_required_imports_follow_the_annotation() -> None:
    assert required_imports("Optional[datetime]") == {
        "from typing import Optional",
        "from datetime import datetime",
    }
    assert required_imports("str") == set()
