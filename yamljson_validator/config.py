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

"""Configuration management for the document validator."""

import os
import logging
from dataclasses import dataclass
from typing import Optional, TextIO, Tuple

from .utils.logging_utils import configure_split_stream_logging

ENV_PREFIX = "YAMLJSON_VALIDATOR_"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ValidatorConfig:
    """Options captured when a validation service is constructed."""
    is_empty_file_allowed: bool = False
    detect_duplicate_keys: bool = True
    allow_json_comments: bool = False
    allow_trailing_comma: bool = False
    check_formats: bool = False

    # local directories serving "classpath:" schema references
    schema_search_paths: Tuple[str, ...] = ()

    log_level: str = "INFO"
    print_level: str = "ERROR"

    @classmethod
    def from_env(cls) -> 'ValidatorConfig':
        """Create configuration from environment variables."""
        search_paths = os.getenv(ENV_PREFIX + 'SCHEMA_SEARCH_PATHS', '')
        return cls(
            is_empty_file_allowed=_env_flag('IS_EMPTY_FILE_ALLOWED', False),
            detect_duplicate_keys=_env_flag('DETECT_DUPLICATE_KEYS', True),
            allow_json_comments=_env_flag('ALLOW_JSON_COMMENTS', False),
            allow_trailing_comma=_env_flag('ALLOW_TRAILING_COMMA', False),
            check_formats=_env_flag('CHECK_FORMATS', False),
            schema_search_paths=tuple(p for p in search_paths.split(os.pathsep) if p),
            log_level=os.getenv(ENV_PREFIX + 'LOG_LEVEL', 'INFO'),
            print_level=os.getenv(ENV_PREFIX + 'PRINT_LEVEL', 'ERROR'),
        )

    def set_logging(
        self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None
    ) -> logging.Logger:
        """Setup logging based on configuration.

        Args:
            stdout: Stream for records below ``print_level`` (default sys.stdout)
            stderr: Stream for the remaining records (default sys.stderr)
        """
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.ERROR)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        configure_split_stream_logging(
            level=level, stderr_level=stderr_level, formatter=formatter, stdout=stdout, stderr=stderr
        )

        return logging.getLogger('yamljson_validator')
