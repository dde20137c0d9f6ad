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

"""Validate YAML and JSON documents against an optional JSON Schema."""

from .config import ValidatorConfig
from .exceptions import ParseError, SchemaCompileError, ValidatorError
from .flattener import flatten
from .parsers import DocumentParser
from .schema import CompiledSchema, compile_schema, load_schema_file
from .validation import ValidationResult, ValidationService, find_document_files, validate_files

__all__ = [
    'CompiledSchema',
    'DocumentParser',
    'ParseError',
    'SchemaCompileError',
    'ValidationResult',
    'ValidationService',
    'ValidatorConfig',
    'ValidatorError',
    'compile_schema',
    'find_document_files',
    'flatten',
    'load_schema_file',
    'validate_files',
]
