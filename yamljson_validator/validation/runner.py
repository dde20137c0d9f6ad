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

"""Batch validation of document files."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..config import ValidatorConfig
from ..exceptions import SchemaCompileError
from ..schema.schema_loader import load_schema_file
from .result import ValidationResult
from .service import ValidationService

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSIONS = ('.json', '.yml', '.yaml')


def find_document_files(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """Find all YAML and JSON documents in given paths.

    Directories are searched recursively. Explicitly named files are kept
    whatever their extension; they are decoded as JSON unless they end in
    ``.yml`` or ``.yaml``.
    """
    documents = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            logger.warning(f"Path does not exist: {path}")
            continue

        if path.is_file():
            documents.append(path)
        elif path.is_dir():
            for candidate in path.rglob('*'):
                if candidate.is_file() and candidate.name.lower().endswith(DOCUMENT_EXTENSIONS):
                    documents.append(candidate)
        else:
            logger.warning(f"Path is neither file nor directory: {path}")

    return sorted(set(documents))


def validate_files(
    file_paths: Iterable[Union[str, Path]],
    schema_path: Optional[Union[str, Path]] = None,
    config: Optional[ValidatorConfig] = None,
) -> List[ValidationResult]:
    """Validate a list of documents against one schema.

    Args:
        file_paths: Documents to validate
        schema_path: JSON Schema file, or None to only check syntax
        config: Validator options

    Returns:
        One result per document. If the schema cannot be compiled, a single
        failed result for the schema file instead.
    """
    config = config or ValidatorConfig()

    schema = None
    if schema_path is not None:
        try:
            schema = load_schema_file(
                schema_path,
                search_paths=config.schema_search_paths,
                check_formats=config.check_formats,
            )
        except SchemaCompileError as exc:
            logger.error(f"Cannot use schema {schema_path}: {exc}")
            return [ValidationResult.from_exception(exc, source=Path(schema_path))]

    service = ValidationService(schema, config)

    results = []
    for file_path in file_paths:
        result = service.validate(file_path)
        if result.has_error():
            logger.warning(f"{file_path} failed validation")
        else:
            logger.debug(f"{file_path} is valid")
        results.append(result)

    return results
