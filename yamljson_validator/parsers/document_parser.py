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

"""YAML/JSON document parser producing plain Python value trees."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..config import ValidatorConfig
from ..exceptions import ParseError
from ..utils.scalars import scalar_text
from .json_text import strip_json_comments, strip_trailing_commas

logger = logging.getLogger(__name__)

YAML_EXTENSIONS = (".yml", ".yaml")

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_MERGE_TAG = "tag:yaml.org,2002:merge"


def is_yaml_file(file_name: Union[str, Path]) -> bool:
    """Return True when the file name selects the YAML dialect."""
    return os.fspath(file_name).lower().endswith(YAML_EXTENSIONS)


class _DocumentLoader(yaml.SafeLoader):
    """Safe loader whose output is always JSON compatible.

    Timestamps stay plain strings and non-string mapping keys are rendered
    to text, so the tree can be handed to a JSON Schema validator as is.
    """

    detect_duplicate_keys = False

    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }

    def __init__(self, stream):
        super().__init__(stream)
        # anchors of collections still being composed
        self._open_anchors = set()

    def compose_node(self, parent, index):
        if self.check_event(yaml.AliasEvent):
            event = self.peek_event()
            if event.anchor in self._open_anchors:
                raise yaml.composer.ComposerError(
                    None, None, f"found recursive alias '*{event.anchor}'", event.start_mark
                )
        return super().compose_node(parent, index)

    def compose_sequence_node(self, anchor):
        self._open_anchors.add(anchor)
        try:
            return super().compose_sequence_node(anchor)
        finally:
            self._open_anchors.discard(anchor)

    def compose_mapping_node(self, anchor):
        self._open_anchors.add(anchor)
        try:
            return super().compose_mapping_node(anchor)
        finally:
            self._open_anchors.discard(anchor)

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            raise yaml.constructor.ConstructorError(
                None, None, f"expected a mapping node, but found {node.id}", node.start_mark
            )
        if self.detect_duplicate_keys:
            self._check_duplicate_keys(node)
        self.flatten_mapping(node)

        # keys are compared by their text so 1, 1.0 and true stay distinct
        mapping = {}
        for key_node, value_node in node.value:
            mapping[self._key_text(node, key_node)] = self.construct_object(value_node, deep=deep)
        return mapping

    def _key_text(self, node: yaml.MappingNode, key_node: yaml.Node) -> str:
        if not isinstance(key_node, yaml.ScalarNode):
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                "found a non-scalar key",
                key_node.start_mark,
            )
        return scalar_text(self.construct_object(key_node))

    def _check_duplicate_keys(self, node: yaml.MappingNode) -> None:
        # merged entries may be overridden, only explicit keys must be unique
        seen = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG:
                continue
            key = self._key_text(node, key_node)
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key '{key}'",
                    key_node.start_mark,
                )
            seen.add(key)


_DocumentLoader.add_constructor(_TIMESTAMP_TAG, yaml.SafeLoader.construct_yaml_str)


class _StrictDocumentLoader(_DocumentLoader):
    detect_duplicate_keys = True


class _NoContent:
    """Marker for input without any document: empty, blank or only comments."""

    def __repr__(self) -> str:
        return "NO_CONTENT"


NO_CONTENT = _NoContent()


def _reject_constant(name: str) -> Any:
    raise ParseError(f"Non-standard JSON token '{name}'")


def _unique_object(pairs):
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise ParseError(f"Duplicate field '{key}'")
        obj[key] = value
    return obj


def read_document(file_path: Union[str, Path]) -> bytes:
    """Read the raw bytes of a document.

    Raises:
        ParseError: If the file cannot be read
    """
    path = Path(file_path)
    if not path.is_file():
        raise ParseError(f"Document file not found: {path}")
    try:
        with open(path, "rb") as stream:
            return stream.read()
    except OSError as exc:
        raise ParseError(f"Failed to read document file {path}: {exc}") from exc


class DocumentParser:
    """Decode YAML or JSON bytes into a tree of dicts, lists and scalars.

    The parser keeps no state between calls; one instance can be shared.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None):
        config = config or ValidatorConfig()
        self.detect_duplicate_keys = config.detect_duplicate_keys
        self.allow_json_comments = config.allow_json_comments
        self.allow_trailing_comma = config.allow_trailing_comma
        self._yaml_loader = _StrictDocumentLoader if self.detect_duplicate_keys else _DocumentLoader

    def parse(self, data: Union[bytes, str], file_name: Union[str, Path]) -> Any:
        """Parse document content.

        Args:
            data: Raw document content
            file_name: Name of the document, selects the dialect by extension

        Returns:
            The document tree, or NO_CONTENT when the input holds no document
            at all (a literal null document parses to None)

        Raises:
            ParseError: If the content is malformed or has a duplicate key
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        if is_yaml_file(file_name):
            logger.debug(f"Parsing {file_name} as YAML")
            return self._parse_yaml(data)
        logger.debug(f"Parsing {file_name} as JSON")
        return self._parse_json(data)

    def parse_file(self, file_path: Union[str, Path]) -> Any:
        """Read and parse a document file."""
        return self.parse(read_document(file_path), file_path)

    def _parse_yaml(self, data: bytes) -> Any:
        try:
            loader = self._yaml_loader(data)
            try:
                node = loader.get_single_node()
                if node is None:
                    return NO_CONTENT
                return loader.construct_document(node)
            finally:
                loader.dispose()
        except yaml.YAMLError as exc:
            raise ParseError(f"Failed to parse YAML content: {exc}") from exc
        except Exception as exc:
            raise ParseError(f"Failed to process YAML content: {exc}") from exc

    def _parse_json(self, data: bytes) -> Any:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Invalid UTF-8 content: {exc}") from exc

        if self.allow_json_comments:
            text = strip_json_comments(text)
        if self.allow_trailing_comma:
            text = strip_trailing_commas(text)
        if not text.strip():
            return NO_CONTENT

        hook = _unique_object if self.detect_duplicate_keys else None
        try:
            return json.loads(text, object_pairs_hook=hook, parse_constant=_reject_constant)
        except ParseError:
            raise
        except json.JSONDecodeError as exc:
            raise ParseError(f"Failed to parse JSON content: {exc}") from exc
        except Exception as exc:
            raise ParseError(f"Failed to process JSON content: {exc}") from exc
