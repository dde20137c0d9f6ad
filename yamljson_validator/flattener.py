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

"""Flatten a document tree into a path -> text mapping.

Paths use dots for object fields and brackets for array indexes, e.g.
``servers[0].host``. Only leaves are recorded.
"""

from typing import Any, Dict

from .utils.scalars import scalar_text


def _add_keys(current_path: str, node: Any, items: Dict[str, str]) -> None:
    if isinstance(node, dict):
        prefix = f"{current_path}." if current_path else ""
        for key, value in node.items():
            _add_keys(f"{prefix}{key}", value, items)
    elif isinstance(node, list):
        for index, value in enumerate(node):
            _add_keys(f"{current_path}[{index}]", value, items)
    else:
        items[current_path] = scalar_text(node)


def flatten(node: Any) -> Dict[str, str]:
    """Return the leaves of node keyed by their path, in document order."""
    items: Dict[str, str] = {}
    _add_keys("", node, items)
    return items
