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

"""Text rendering of scalar document values."""

from typing import Any


def scalar_text(value: Any) -> str:
    """Render a scalar the way it would be written in a JSON document.

    Strings are returned verbatim; booleans and null use their JSON literals.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
