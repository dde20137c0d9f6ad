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

"""Validation orchestration for YAML and JSON documents."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from ..config import ValidatorConfig
from ..exceptions import ParseError
from ..flattener import flatten
from ..parsers.document_parser import NO_CONTENT, DocumentParser, read_document
from ..schema.schema_loader import CompiledSchema, compile_schema
from .result import ValidationResult

logger = logging.getLogger(__name__)

SchemaSource = Union[CompiledSchema, bytes, str, dict, bool, None]


class ValidationService:
    """Validate documents against an optional JSON Schema.

    The schema is compiled once, when the service is created, and is shared
    read-only by every call, so a service can be used from several threads.
    Per-document problems are reported in the returned result; ``validate``
    never raises for them.
    """

    def __init__(self, schema: SchemaSource = None, config: Optional[ValidatorConfig] = None):
        """Initialize the service.

        Args:
            schema: A compiled schema, JSON Schema source, or None to skip
                schema validation
            config: Parser and emptiness options

        Raises:
            SchemaCompileError: If the schema cannot be compiled
        """
        self.config = config or ValidatorConfig()
        if isinstance(schema, CompiledSchema):
            self.schema: Optional[CompiledSchema] = schema
        else:
            self.schema = compile_schema(
                schema,
                search_paths=self.config.schema_search_paths,
                check_formats=self.config.check_formats,
            )
        self.parser = DocumentParser(self.config)

    @property
    def is_empty_file_allowed(self) -> bool:
        return self.config.is_empty_file_allowed

    def validate(self, file_path: Union[str, Path]) -> ValidationResult:
        """Validate a document file."""
        path = Path(file_path)
        try:
            data = read_document(path)
        except ParseError as exc:
            result = ValidationResult(path)
            self._report_parse_error(result, path, exc)
            return result
        return self.validate_content(data, path)

    def validate_content(self, data: Union[bytes, str], source: Union[str, Path]) -> ValidationResult:
        """Validate document content.

        Args:
            data: Raw document content
            source: Document name, used for dialect selection and messages

        Returns:
            The validation result
        """
        result = ValidationResult(source)

        if self.is_empty_file_allowed and len(data) == 0:
            return result

        try:
            document = self.parser.parse(data, source)
        except ParseError as exc:
            self._report_parse_error(result, source, exc)
            return result

        if document is NO_CONTENT:
            if not self.is_empty_file_allowed:
                result.add_message(f"Empty file is not valid: {source}")
                result.encountered_error()
            return result

        self._validate_against_schema(document, result)
        result.items = flatten(document)
        return result

    @staticmethod
    def _report_parse_error(result: ValidationResult, source: Any, exc: ParseError) -> None:
        result.add_message(f"Error while parsing file {source}: {exc}")
        result.encountered_error()

    def _validate_against_schema(self, document: Any, result: ValidationResult) -> None:
        if self.schema is None:
            return
        try:
            messages = self.schema.validate(document)
        except Exception as exc:
            # a fault inside schema processing is reported like a violation
            logger.debug(f"Schema processing failed for {result.source}: {exc}")
            result.add_message(str(exc))
            result.encountered_error()
            return
        if messages:
            result.encountered_error()
        result.add_messages(messages)
