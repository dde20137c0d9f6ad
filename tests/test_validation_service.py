"""Tests for the validation service."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from yamljson_validator.config import ValidatorConfig
from yamljson_validator.exceptions import SchemaCompileError
from yamljson_validator.schema import CompiledSchema, compile_schema
from yamljson_validator.validation import ValidationResult, ValidationService

from conftest import write_file


class _ExplodingSchema(CompiledSchema):
    """Schema whose processing fails regardless of the document."""

    def __init__(self) -> None:
        super().__init__(validator=None)

    def validate(self, instance):
        raise RuntimeError("schema processing blew up")


def test_conformant_document(person_schema) -> None:
    service = ValidationService(person_schema)
    result = service.validate_content(b'{"name": "Ada", "age": 36, "tags": ["x"]}', "ada.json")
    assert not result.has_error()
    assert result.messages == []
    assert result.items == {"name": "Ada", "age": "36", "tags[0]": "x"}


def test_conformant_yaml_document(person_schema_bytes) -> None:
    service = ValidationService(person_schema_bytes)
    result = service.validate_content(b"name: Ada\ntags: [a, b]\n", "ada.yaml")
    assert not result.has_error()
    assert result.items == {"name": "Ada", "tags[0]": "a", "tags[1]": "b"}


def test_missing_required_property(person_schema) -> None:
    result = ValidationService(person_schema).validate_content(b'{"age": 3}', "anon.json")
    assert result.has_error()
    assert len(result.messages) == 1
    assert "'name' is a required property" in result.messages[0]
    assert 'keyword: "required"' in result.messages[0]


def test_violations_still_flatten(person_schema) -> None:
    result = ValidationService(person_schema).validate_content(b'{"name": 1, "age": -1}', "bad.json")
    assert result.has_error()
    assert len(result.messages) == 2
    assert any('keyword: "minimum"' in m for m in result.messages)
    assert result.items == {"name": "1", "age": "-1"}


def test_validate_is_idempotent(person_schema) -> None:
    service = ValidationService(person_schema)
    content = b'{"name": 5, "tags": [1, "ok", 2]}'
    first = service.validate_content(content, "doc.json")
    second = service.validate_content(content, "doc.json")
    assert first.messages == second.messages
    assert first.items == second.items
    assert first is not second


def test_empty_input_allowed() -> None:
    service = ValidationService(config=ValidatorConfig(is_empty_file_allowed=True))
    result = service.validate_content(b"", "empty.json")
    assert not result.has_error()
    assert result.messages == []
    assert result.items == {}


def test_empty_input_allowed_skips_schema(person_schema) -> None:
    service = ValidationService(person_schema, ValidatorConfig(is_empty_file_allowed=True))
    assert not service.validate_content(b"", "empty.yaml").has_error()


@pytest.mark.parametrize("name", ["empty.json", "empty.yaml"])
def test_empty_input_not_allowed(name: str) -> None:
    result = ValidationService().validate_content(b"", name)
    assert result.has_error()
    assert result.messages == [f"Empty file is not valid: {name}"]
    assert result.items == {}


def test_null_document_with_empty_allowed_is_clean() -> None:
    service = ValidationService(config=ValidatorConfig(is_empty_file_allowed=True))
    result = service.validate_content(b"# only a comment\n", "blank.yaml")
    assert not result.has_error()
    assert result.items == {}


def test_literal_null_document_is_validated() -> None:
    result = ValidationService({"type": "null"}).validate_content(b"null", "doc.json")
    assert not result.has_error()
    assert result.messages == []
    assert result.items == {"": "null"}


def test_literal_null_is_not_an_empty_file() -> None:
    service = ValidationService({"type": "object"}, ValidatorConfig(is_empty_file_allowed=True))
    result = service.validate_content(b"~\n", "doc.yaml")
    assert result.has_error()
    assert result.messages[0].startswith("error: None is not of type 'object'")


@pytest.mark.parametrize("schema", [None, {"type": "object"}])
def test_recursive_yaml_alias_is_a_parse_error(schema) -> None:
    result = ValidationService(schema).validate_content(b"a: &x [*x]\n", "loop.yaml")
    assert result.has_error()
    assert result.messages[0].startswith("Error while parsing file loop.yaml: ")
    assert "recursive alias" in result.messages[0]
    assert result.items == {}


def test_duplicate_key_skips_flattening(person_schema) -> None:
    result = ValidationService(person_schema).validate_content(b'{"x":1,"x":2}', "dup.json")
    assert result.has_error()
    assert result.items == {}
    assert len(result.messages) == 1
    assert result.messages[0].startswith("Error while parsing file dup.json: ")
    assert "Duplicate field 'x'" in result.messages[0]


def test_duplicate_key_accepted_when_detection_disabled() -> None:
    service = ValidationService(config=ValidatorConfig(detect_duplicate_keys=False))
    result = service.validate_content(b'{"x":1,"x":2}', "dup.json")
    assert not result.has_error()
    assert result.items == {"x": "2"}


def test_lenient_json_options() -> None:
    config = ValidatorConfig(allow_json_comments=True, allow_trailing_comma=True)
    result = ValidationService(config=config).validate_content(
        b'{\n  // comment\n  "a": [1, 2,],\n}', "lenient.json"
    )
    assert not result.has_error()
    assert result.items == {"a[0]": "1", "a[1]": "2"}


def test_no_schema_accepts_any_document() -> None:
    service = ValidationService()
    for content in (b'{"anything": [1, {"goes": true}]}', b"[]", b'"text"', b"42"):
        result = service.validate_content(content, "doc.json")
        assert not result.has_error()
        assert result.messages == []


def test_invalid_schema_fails_construction() -> None:
    with pytest.raises(SchemaCompileError):
        ValidationService(b'{"type": "nonsense"}')


def test_remote_reference_fails_construction() -> None:
    with pytest.raises(SchemaCompileError):
        ValidationService({"$ref": "http://example.com/schema.json"})


def test_precompiled_schema_is_used(person_schema) -> None:
    schema = compile_schema(person_schema)
    service = ValidationService(schema)
    assert service.schema is schema


def test_schema_processing_fault_is_reported() -> None:
    result = ValidationService(_ExplodingSchema()).validate_content(b'{"a": 1}', "doc.json")
    assert result.has_error()
    assert result.messages == ["schema processing blew up"]
    assert result.exc is None
    assert result.items == {"a": "1"}


def test_validate_file(tmp_path, person_schema) -> None:
    path = write_file(tmp_path, "person.yml", "name: Grace\nage: 85\n")
    result = ValidationService(person_schema).validate(path)
    assert not result.has_error()
    assert result.source == path
    assert result.items == {"name": "Grace", "age": "85"}


def test_validate_empty_file(tmp_path) -> None:
    path = write_file(tmp_path, "empty.json", b"")
    assert ValidationService().validate(path).has_error()
    service = ValidationService(config=ValidatorConfig(is_empty_file_allowed=True))
    assert not service.validate(path).has_error()


def test_validate_missing_file(tmp_path) -> None:
    path = tmp_path / "missing.json"
    result = ValidationService().validate(path)
    assert result.has_error()
    assert result.messages[0].startswith(f"Error while parsing file {path}: ")


def test_results_are_independent_between_calls() -> None:
    service = ValidationService()
    bad = service.validate_content(b"{", "bad.json")
    good = service.validate_content(json.dumps({"a": 1}).encode(), "good.json")
    assert bad.has_error()
    assert not good.has_error()
    assert good.messages == []


def test_result_error_flag_is_sticky() -> None:
    result = ValidationResult("doc.json")
    assert not result.has_error()
    result.encountered_error()
    result.add_message("first")
    result.add_messages(["second", "third"])
    assert result.has_error()
    assert result.messages == ["first", "second", "third"]


def test_result_from_exception() -> None:
    exc = SchemaCompileError("broken schema")
    result = ValidationResult.from_exception(exc, source="schema.json")
    assert result.has_error()
    assert result.exc is exc
    assert result.messages == ["broken schema"]
    assert result.items == {}


def test_shared_service_across_threads(person_schema) -> None:
    service = ValidationService(person_schema)
    documents = [
        (json.dumps({"name": f"user{i}", "age": i, "tags": ["t"] * (i % 3)}).encode(), f"ok{i}.json")
        for i in range(20)
    ] + [
        (f"age: {i}\ntags: [{i}]\n".encode(), f"bad{i}.yaml")
        for i in range(20)
    ]

    def summary(document):
        result = service.validate_content(*document)
        return result.has_error(), result.messages, result.items

    sequential = [summary(document) for document in documents]
    with ThreadPoolExecutor(max_workers=8) as executor:
        concurrent = list(executor.map(summary, documents))
    assert concurrent == sequential
    assert sum(1 for has_error, _, _ in sequential if has_error) == 20
