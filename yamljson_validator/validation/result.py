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

"""Validation results."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union


class ValidationResult:
    """Outcome of validating a single document.

    The error flag is sticky: once set it is never cleared. ``exc`` is only
    set for failures that happened before any document could be validated,
    such as a schema that does not compile.
    """

    def __init__(self, source: Union[str, Path, None] = None, exc: Optional[BaseException] = None):
        """Initialize validation result.

        Args:
            source: Identifier of the validated document (usually its path)
            exc: Construction-level failure, if any
        """
        self.source = source
        self.exc = exc
        self.messages: List[str] = []
        self.items: Dict[str, str] = {}
        self._has_error = False

    @classmethod
    def from_exception(
        cls, exc: BaseException, source: Union[str, Path, None] = None
    ) -> 'ValidationResult':
        """Create a failed result carrying the exception that caused it."""
        result = cls(source, exc=exc)
        result.add_message(str(exc))
        return result

    def has_error(self) -> bool:
        return self._has_error or self.exc is not None

    def encountered_error(self) -> None:
        self._has_error = True

    def add_message(self, message: str) -> None:
        self.messages.append(message)

    def add_messages(self, messages: Iterable[str]) -> None:
        self.messages.extend(messages)

    def __repr__(self) -> str:
        return (
            f"ValidationResult(source={self.source!r}, has_error={self.has_error()}, "
            f"messages={len(self.messages)}, items={len(self.items)})"
        )
