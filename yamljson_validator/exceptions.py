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

"""Custom exceptions for the YAML/JSON document validator."""


class ValidatorError(Exception):
    """Base exception for document validator errors."""
    pass


class ParseError(ValidatorError):
    """Exception raised when a document cannot be decoded."""
    pass


class SchemaCompileError(ValidatorError):
    """Exception raised when a JSON Schema cannot be loaded or compiled.

    This is fatal for the validator that was being constructed.
    """
    pass
