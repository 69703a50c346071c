"""The built-in tool catalog and the schemas derived from it."""

from pathlib import Path

import pytest

from gitflash.tools import (
    build_schema,
    get_tool_schemas,
    register_tool,
)

EXPECTED = {
    "run_git_command": {"command"},
    "list_files": {"path"},
    "read_file": {"path"},
    "write_file": {"path", "content"},
    "move_file": {"source", "destination"},
    "delete_file": {"path"},
    "create_directory": {"path"},
    "delete_directory": {"path"},
    "list_directory_tree": {"path"},
    "read_directory_files": {"path"},
    "get_current_directory": set(),
}


def test_catalog_contains_every_builtin_tool() -> None:
    """All eleven tools are registered with exactly their documented parameters."""

    schemas = get_tool_schemas()
    for name, params in EXPECTED.items():
        assert name in schemas
        assert set(schemas[name].parameters) == params


def test_parameters_are_required_strings() -> None:
    """Every built-in parameter is a required string; ``workdir`` never leaks."""

    for name in EXPECTED:
        schema = get_tool_schemas()[name]
        assert "workdir" not in schema.parameters
        for info in schema.parameters.values():
            assert info.type == "string"
            assert info.required is True


def test_descriptions_come_from_docstrings() -> None:
    """Descriptions are the first paragraph of each docstring."""

    schemas = get_tool_schemas()
    assert schemas["run_git_command"].description == (
        "Executes a git command. Do not include 'git' in the command string."
    )
    assert all(schemas[name].description for name in EXPECTED)


def test_json_schema_rendering() -> None:
    """The provider-facing JSON schema lists properties and required keys."""

    schema = get_tool_schemas()["move_file"].json_schema()
    assert schema == {
        "type": "object",
        "properties": {"source": {"type": "string"}, "destination": {"type": "string"}},
        "required": ["source", "destination"],
    }
    assert get_tool_schemas()["get_current_directory"].json_schema() == {
        "type": "object",
        "properties": {},
        "required": [],
    }


def test_optional_parameters_are_not_required() -> None:
    """Defaults mark a parameter optional and types map to JSON names."""

    def sample(count: int, verbose: bool = False, *, workdir: Path) -> str:
        """Sample tool."""
        return ""

    schema = build_schema("sample", sample)
    assert schema.parameters["count"].type == "integer"
    assert schema.parameters["count"].required is True
    assert schema.parameters["verbose"].type == "boolean"
    assert schema.parameters["verbose"].required is False


def test_schemas_are_immutable() -> None:
    """Schemas are frozen once built."""

    schema = get_tool_schemas()["read_file"]
    with pytest.raises(Exception):
        schema.name = "something_else"  # type: ignore[misc]


def test_duplicate_registration_is_rejected() -> None:
    """Names are unique."""

    with pytest.raises(ValueError):
        register_tool("read_file")
