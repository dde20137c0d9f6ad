# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""JSON Schema loading and compilation.

Schemas are compiled once into a ``jsonschema`` validator. Every reference is
resolved while compiling, from the schema itself or from local files, so
validating a document never performs I/O and never reaches the network.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Set, Union

import jsonschema
from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from jsonschema_specifications import REGISTRY as SPECIFICATIONS
from referencing import Registry
from referencing.exceptions import NoSuchResource, Unresolvable, Unretrievable
from referencing.jsonschema import DRAFT202012

from ..exceptions import SchemaCompileError
from .retrieval import LocalSchemaRetriever

logger = logging.getLogger(__name__)

DEFAULT_VALIDATOR = jsonschema.Draft202012Validator

# Drafts that spell the identifier keyword "id" instead of "$id"
_LEGACY_ID_DRAFTS = (jsonschema.Draft3Validator, jsonschema.Draft4Validator)

# Keywords holding instance data rather than subschemas
_DATA_KEYWORDS = frozenset(("const", "default", "enum", "examples"))

# Keywords mapping names to subschemas
_SCHEMA_MAP_KEYWORDS = frozenset(
    ("$defs", "definitions", "dependentSchemas", "dependencies", "patternProperties", "properties")
)


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def json_pointer(path: Iterable[Any]) -> str:
    """Build a JSON Pointer from a sequence of keys and indexes."""
    return "".join(f"/{_jp_escape(str(token))}" for token in path)


def format_error(error: jsonschema.ValidationError) -> str:
    """Render a validation error as a multi-line report entry."""
    schema_path = list(error.absolute_schema_path)[:-1]
    lines = [
        f"error: {error.message}",
        '    level: "error"',
        f"    schema: {json.dumps({'pointer': json_pointer(schema_path)})}",
        f"    instance: {json.dumps({'pointer': json_pointer(error.absolute_path)})}",
        '    domain: "validation"',
        f"    keyword: {json.dumps(error.validator)}",
    ]
    return "\n".join(lines)


class CompiledSchema:
    """An immutable compiled schema, safe to share between threads."""

    def __init__(self, validator: Validator, base_uri: Optional[str] = None):
        self._validator = validator
        self.base_uri = base_uri

    @property
    def schema(self) -> Any:
        return self._validator.schema

    def validate(self, instance: Any) -> List[str]:
        """Validate a document tree.

        Returns:
            One formatted message per error, in the order the validator
            reports them. Empty when the document conforms.
        """
        return [format_error(error) for error in self._validator.iter_errors(instance)]


def _decode_schema(schema_data: Union[bytes, str, dict, bool]) -> Any:
    if isinstance(schema_data, (dict, bool)):
        return schema_data
    if isinstance(schema_data, bytes):
        try:
            schema_data = schema_data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise SchemaCompileError(f"Invalid UTF-8 in JSON Schema: {exc}") from exc
    try:
        return json.loads(schema_data)
    except json.JSONDecodeError as exc:
        raise SchemaCompileError(f"Invalid JSON in JSON Schema: {exc}") from exc


def _describe_unresolvable(exc: Exception) -> str:
    # prefer the retrieve hook's own error over the wrappers around it
    cause = exc
    while cause.__cause__ is not None and not isinstance(cause, SchemaCompileError):
        cause = cause.__cause__
    return str(cause)


def _check_references(node: Any, resolver, specification, visited: Set[int]) -> None:
    """Dereference every ``$ref`` reachable from node, failing on the first miss."""
    if isinstance(node, list):
        for item in node:
            _check_references(item, resolver, specification, visited)
        return
    if not isinstance(node, dict) or id(node) in visited:
        return
    visited.add(id(node))

    if isinstance(node.get("$id"), str) or isinstance(node.get("id"), str):
        resolver = resolver.in_subresource(specification.create_resource(node))

    ref = node.get("$ref")
    if isinstance(ref, str):
        try:
            resolved = resolver.lookup(ref)
        except (Unresolvable, Unretrievable, NoSuchResource) as exc:
            raise SchemaCompileError(
                f"Unresolvable schema reference '{ref}': {_describe_unresolvable(exc)}"
            ) from exc
        logger.debug(f"Resolved schema reference {ref}")
        _check_references(resolved.contents, resolved.resolver, specification, visited)

    for key, value in node.items():
        if key in _DATA_KEYWORDS:
            continue
        if key in _SCHEMA_MAP_KEYWORDS and isinstance(value, dict):
            # member names are not keywords, e.g. a property called "enum"
            for subschema in value.values():
                _check_references(subschema, resolver, specification, visited)
            continue
        _check_references(value, resolver, specification, visited)


def compile_schema(
    schema_data: Union[bytes, str, dict, bool, None],
    *,
    base_uri: Optional[str] = None,
    search_paths: Sequence[str] = (),
    check_formats: bool = False,
) -> Optional[CompiledSchema]:
    """Compile a JSON Schema document.

    Args:
        schema_data: Schema source (JSON bytes or text, or an already decoded
            schema). None means no schema.
        base_uri: URI relative references are resolved against
        search_paths: Directories serving ``classpath:`` references
        check_formats: Whether ``format`` keywords are asserted

    Returns:
        The compiled schema, or None when no schema was given

    Raises:
        SchemaCompileError: If the schema is malformed or a reference
            cannot be resolved locally
    """
    if schema_data is None:
        return None

    schema = _decode_schema(schema_data)
    if not isinstance(schema, (dict, bool)):
        raise SchemaCompileError(
            f"JSON Schema must be an object or a boolean, got {type(schema).__name__}"
        )

    validator_cls = validator_for(schema, default=DEFAULT_VALIDATOR)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        raise SchemaCompileError(f"Invalid JSON Schema: {exc.message}") from exc

    if isinstance(schema, dict) and base_uri:
        id_keyword = "id" if validator_cls in _LEGACY_ID_DRAFTS else "$id"
        if id_keyword not in schema:
            schema = {id_keyword: base_uri, **schema}

    specification = DRAFT202012.detect(schema)
    root = specification.create_resource(schema)
    retriever = LocalSchemaRetriever(search_paths, specification=specification)
    # bundled metaschemas resolve from memory
    registry = Registry(retrieve=retriever).combine(SPECIFICATIONS)

    if isinstance(schema, dict):
        resolver = registry.resolver_with_root(root)
        _check_references(schema, resolver, specification, set())

    format_checker = validator_cls.FORMAT_CHECKER if check_formats else None
    validator = validator_cls(schema, registry=registry, format_checker=format_checker)
    logger.debug(f"Compiled JSON Schema with {validator_cls.__name__}")
    return CompiledSchema(validator, base_uri=base_uri)


def load_schema_file(file_path: Union[str, Path], **kwargs) -> CompiledSchema:
    """Load and compile a JSON Schema file.

    Relative references in the schema resolve against the file's location.

    Raises:
        SchemaCompileError: If the file cannot be read or compiled
    """
    path = Path(file_path)
    if not path.is_file():
        raise SchemaCompileError(f"Schema file not found: {path}")
    try:
        with open(path, "rb") as stream:
            data = stream.read()
    except OSError as exc:
        raise SchemaCompileError(f"Failed to read schema file {path}: {exc}") from exc
    kwargs.setdefault("base_uri", path.resolve().as_uri())
    return compile_schema(data, **kwargs)
