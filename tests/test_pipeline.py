"""End-to-end tests for surqlbind.pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest

from surqlbind.config import GenerationConfig
from surqlbind.errors import (
    DuplicateFunctionError,
    InvalidNamingTemplateError,
    MalformedHeaderError,
    NamingConflictError,
    NoPathError,
    NoTargetError,
)
from surqlbind.models import BindingRequest, NamingScheme, TargetKind
from surqlbind.pipeline import generate, generate_from_config
from tests._fixtures.source_builder import SourceBuilder

_MAIN = """
-- It is necessary to prefix the name of your function with "fn::"
DEFINE FUNCTION fn::greet($name: string) {
    RETURN "Hello, " + $name + "!";
};

DEFINE FUNCTION fn::greet_but_with_number($name: string, $number: int) {
    RETURN "Hello, " + $name + "! Your number is " + <string> $number;
};
"""

_USERS = """
DEFINE FUNCTION fn::users::exists($id: record<user>) {
    LET $found = (SELECT * FROM $id);
    IF array::len($found) > 0 { RETURN true; } ELSE { RETURN false; };
};
"""


def _request() -> BindingRequest:
    return BindingRequest(
        driver=NamingScheme.prefix("prefix_$"), datastore=NamingScheme.suffix("$_suffix")
    )


def test_generate_over_directory(source_builder: SourceBuilder) -> None:
    source_builder.write({"main.surql": _MAIN, "users/users.surql": _USERS})

    result = generate([source_builder.path()], _request())

    assert result.tree.qualified_names() == [
        "fn::greet",
        "fn::greet_but_with_number",
        "fn::users::exists",
    ]
    symbols = [(d.target, d.symbol) for d in result.descriptors if d.signature.leaf == "greet"]
    assert symbols == [
        (TargetKind.DRIVER, "prefix_greet"),
        (TargetKind.DATASTORE, "greet_suffix"),
    ]
    assert len(result.descriptors) == 6
    assert [source.path for source in result.sources] == [
        source_builder.path("main.surql"),
        source_builder.path("users/users.surql"),
    ]
    assert result.tree.functions["greet"].comments == (
        'It is necessary to prefix the name of your function with "fn::"',
    )


def test_two_files_defining_the_same_function(source_builder: SourceBuilder) -> None:
    source_builder.write(
        {
            "a.surql": "DEFINE FUNCTION fn::foo() { RETURN 1; };",
            "b.surql": "DEFINE FUNCTION fn::foo() { RETURN 2; };",
        }
    )

    with pytest.raises(DuplicateFunctionError) as excinfo:
        generate([source_builder.path()], BindingRequest(driver=NamingScheme.identity()))

    assert excinfo.value.origins == (
        str(source_builder.path("a.surql")),
        str(source_builder.path("b.surql")),
    )


def test_same_file_twice_is_read_once(source_builder: SourceBuilder) -> None:
    source_builder.write({"main.surql": _MAIN})
    main = source_builder.path("main.surql")

    result = generate([main, main], BindingRequest(driver=NamingScheme.identity()))

    assert len(result.bootstrap.entries) == 2


def test_request_is_validated_before_reading_sources(tmp_path: Path) -> None:
    missing = tmp_path / "missing.surql"

    with pytest.raises(NoTargetError):
        generate([missing], BindingRequest())
    with pytest.raises(NamingConflictError):
        generate(
            [missing],
            BindingRequest(driver=NamingScheme.identity(), datastore=NamingScheme.identity()),
        )


def test_no_paths_raise() -> None:
    with pytest.raises(NoPathError):
        generate([], BindingRequest(driver=NamingScheme.identity()))


def test_directory_without_sources_aborts(source_builder: SourceBuilder) -> None:
    source_builder.write({"notes.txt": "nothing to bind\n"})

    with pytest.raises(NoPathError):
        generate([source_builder.path()], BindingRequest(driver=NamingScheme.identity()))


def test_any_parse_error_aborts_the_run(source_builder: SourceBuilder) -> None:
    source_builder.write({"a.surql": _MAIN, "b.surql": "DEFINE FUNCTION fn::bad($x) {};"})

    with pytest.raises(MalformedHeaderError) as excinfo:
        generate([source_builder.path()], BindingRequest(driver=NamingScheme.identity()))

    assert excinfo.value.origin == str(source_builder.path("b.surql"))


def test_repeated_runs_are_identical(source_builder: SourceBuilder) -> None:
    source_builder.write({"main.surql": _MAIN, "users/users.surql": _USERS})

    first = generate([source_builder.path()], _request())
    second = generate([source_builder.path()], _request())

    assert first.descriptors == second.descriptors
    assert first.bootstrap == second.bootstrap


def test_generate_from_config_resolves_relative_paths(source_builder: SourceBuilder) -> None:
    source_builder.write({"main.surql": _MAIN})
    config = GenerationConfig(
        root=source_builder.path(), driver="is", datastore="ds_$", paths=["main.surql"]
    )

    result = generate_from_config(config)

    assert result.request.datastore == NamingScheme.prefix("ds_$")
    assert result.bootstrap.registrars[TargetKind.DATASTORE] == "ds_define_functions"


def test_generate_from_config_checks_schemes_and_paths(tmp_path: Path) -> None:
    with pytest.raises(InvalidNamingTemplateError):
        generate_from_config(GenerationConfig(root=tmp_path, driver="bogus", paths=["x"]))
    with pytest.raises(NoPathError):
        generate_from_config(GenerationConfig(root=tmp_path, driver="is"))
