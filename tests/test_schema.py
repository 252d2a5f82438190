"""Tests for description models and the YAML descriptor loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from moodle_external.errors import InvalidParameterError
from moodle_external.params import ParamType
from moodle_external.schema import (
    ExternalDescription,
    ExternalValue,
    FunctionDescription,
    FunctionParameters,
    MultipleStructure,
    Requirement,
    SchemaLoader,
    SingleStructure,
    warnings_description,
)
from moodle_external.validation import clean_returnvalue, validate_parameters

DESCRIPTOR_YAML = """
functions:
  core_course_get_courses:
    description: Return course details
    parameters:
      options:
        desc: options
        required: default
        default: {}
        keys:
          ids:
            desc: List of course id
            required: optional
            content:
              type: int
              desc: Course id
    returns:
      content:
        keys:
          id: {type: int, desc: course id}
          fullname: {type: text, desc: full name}
          visible: {type: bool, required: default, default: 1}
  core_webservice_ping:
    parameters: {}
    returns: null
"""


def write_descriptors(tmp_path: Path, content: str = DESCRIPTOR_YAML) -> Path:
    """Write a descriptor file and return its path."""
    path = tmp_path / "services.yml"
    path.write_text(content, encoding="utf-8")
    return path


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


def test_from_dict_picks_kind_by_keys():
    assert isinstance(ExternalDescription.from_dict({"type": "int"}), ExternalValue)
    assert isinstance(ExternalDescription.from_dict({"keys": {}}), SingleStructure)
    assert isinstance(ExternalDescription.from_dict({"content": {"type": "raw"}}), MultipleStructure)


def test_from_dict_rejects_unknown_shapes():
    with pytest.raises(ValueError):
        ExternalDescription.from_dict({"desc": "nothing else"})
    with pytest.raises(ValueError):
        ExternalDescription.from_dict({"type": "imaginary"})
    with pytest.raises(ValueError):
        ExternalDescription.from_dict(["type", "int"])


def test_value_defaults():
    value = ExternalValue(ParamType.INT)
    assert value.required == Requirement.REQUIRED
    assert value.allownull is True
    assert value.default is None


def test_string_type_and_requirement_are_converted():
    value = ExternalValue("int", "count", "default", 3)
    assert value.type is ParamType.INT
    assert value.required is Requirement.DEFAULT


def test_allownull_reads_quoted_flags():
    assert ExternalDescription.from_dict({"type": "int", "allownull": "false"}).allownull is False
    assert ExternalDescription.from_dict({"type": "int", "allownull": "no"}).allownull is False
    assert ExternalDescription.from_dict({"type": "int", "allownull": "true"}).allownull is True
    assert ExternalDescription.from_dict({"type": "int"}).allownull is True


def test_structure_keys_are_read_only():
    structure = SingleStructure({"id": ExternalValue(ParamType.INT)})

    with pytest.raises(TypeError):
        structure.keys["other"] = ExternalValue(ParamType.INT)


def test_structure_rejects_non_description_children():
    with pytest.raises(TypeError):
        SingleStructure({"id": "int"})
    with pytest.raises(TypeError):
        MultipleStructure({"type": "int"})


def test_to_dict():
    description = SingleStructure(
        {"n": ExternalValue(ParamType.INT, "n", Requirement.DEFAULT, 5)},
        "holder",
    )
    assert description.to_dict() == {
        "keys": {
            "n": {"type": "int", "desc": "n", "required": "default", "default": 5, "allownull": True},
        },
        "desc": "holder",
        "required": "required",
    }


def test_warnings_description():
    warnings = warnings_description()
    assert warnings.required == Requirement.OPTIONAL

    cleaned = clean_returnvalue(
        warnings,
        [{"item": "course", "itemid": "4", "warningcode": "nopermission", "message": "No access"}],
    )
    assert cleaned == [
        {"item": "course", "itemid": 4, "warningcode": "nopermission", "message": "No access"}
    ]


# -----------------------------------------------------------------------------
# Loader
# -----------------------------------------------------------------------------


def test_loader_builds_function_descriptions(tmp_path):
    functions = SchemaLoader().load(write_descriptors(tmp_path))

    assert sorted(functions) == ["core_course_get_courses", "core_webservice_ping"]

    courses = functions["core_course_get_courses"]
    assert isinstance(courses, FunctionDescription)
    assert isinstance(courses.parameters, FunctionParameters)
    assert courses.description == "Return course details"
    assert functions["core_webservice_ping"].returns is None


def test_loaded_descriptions_validate(tmp_path):
    courses = SchemaLoader().load_function(write_descriptors(tmp_path), "core_course_get_courses")

    assert validate_parameters(courses.parameters, {}) == {"options": {}}
    assert validate_parameters(courses.parameters, {"options": {"ids": ["2", 3]}}) == {
        "options": {"ids": [2, 3]}
    }
    assert clean_returnvalue(courses.returns, [{"id": 2, "fullname": "Algebra"}]) == [
        {"id": 2, "fullname": "Algebra", "visible": True}
    ]

    with pytest.raises(InvalidParameterError) as exc_info:
        validate_parameters(courses.parameters, {"options": {"ids": ["x"]}})
    assert exc_info.value.path == ("options", "ids")


def test_loader_resolves_relative_paths_and_caches(tmp_path):
    write_descriptors(tmp_path)
    loader = SchemaLoader(schema_dir=tmp_path)

    first = loader.load("services.yml")
    assert loader.load("services.yml") is first
    assert loader.load("services.yml", use_cache=False) is not first

    loader.clear_cache()
    assert loader.load("services.yml") is not first


def test_loader_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        SchemaLoader().load(tmp_path / "missing.yml")


def test_loader_requires_functions_mapping(tmp_path):
    path = write_descriptors(tmp_path, "services: []\n")
    with pytest.raises(ValueError, match="functions"):
        SchemaLoader().load(path)


def test_loader_names_broken_function(tmp_path):
    path = write_descriptors(
        tmp_path,
        "functions:\n  broken_function:\n    parameters:\n      id: {type: number}\n",
    )
    with pytest.raises(ValueError, match="broken_function"):
        SchemaLoader().load(path)


def test_load_function_unknown_name(tmp_path):
    with pytest.raises(KeyError):
        SchemaLoader().load_function(write_descriptors(tmp_path), "core_nothing")
