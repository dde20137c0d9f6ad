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

import logging
import sys
from typing import Optional, TextIO


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def _stream_handler(stream: TextIO, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_split_stream_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> None:
    """Configure root logging for the validator CLI.

    Records below ``stderr_level`` go to ``stdout``, the rest to ``stderr``.
    Either stream can be replaced; the CLI passes ``sys.stderr`` as
    ``stdout`` when stdout carries a machine-readable report.

    Args:
        level: Root logger level
        stderr_level: Lowest level written to ``stderr``
        formatter: Formatter for both handlers (default ``name - level - message``)
        stdout: Stream for low-level records (default ``sys.stdout``)
        stderr: Stream for the remaining records (default ``sys.stderr``)
    """

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    stderr_level = max(stderr_level, logging.DEBUG)

    low = _stream_handler(stdout or sys.stdout, logging.DEBUG, formatter)
    low.addFilter(_MaxLevelFilter(stderr_level - 1))
    root.addHandler(low)
    root.addHandler(_stream_handler(stderr or sys.stderr, stderr_level, formatter))
