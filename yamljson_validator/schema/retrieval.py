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

"""Local-only retrieval of referenced JSON Schema documents."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

from referencing import Resource, Specification
from referencing.jsonschema import DRAFT202012

from ..exceptions import SchemaCompileError

logger = logging.getLogger(__name__)

CLASSPATH_SCHEME = "classpath"


class LocalSchemaRetriever:
    """Retrieve hook for a ``referencing.Registry`` that never touches the network.

    ``file:`` URIs are read from disk and ``classpath:`` URIs are looked up in
    the configured search directories. Every other scheme is refused.
    Retrieved documents are cached, so once a schema has been compiled its
    references resolve from memory.
    """

    def __init__(
        self,
        search_paths: Iterable[str] = (),
        specification: Specification = DRAFT202012,
    ):
        self.search_paths = tuple(Path(p) for p in search_paths)
        self.specification = specification
        self._cache: Dict[str, Resource] = {}

    def __call__(self, uri: str) -> Resource:
        cached = self._cache.get(uri)
        if cached is not None:
            return cached

        path = self._local_path(uri)
        logger.debug(f"Loading referenced schema {uri} from {path}")
        try:
            with open(path, "r", encoding="utf-8") as stream:
                contents = json.load(stream)
        except OSError as exc:
            raise SchemaCompileError(f"Failed to read referenced schema {uri}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise SchemaCompileError(f"Invalid JSON in referenced schema {uri}: {exc}") from exc

        resource = Resource.from_contents(contents, default_specification=self.specification)
        self._cache[uri] = resource
        return resource

    def _local_path(self, uri: str) -> Path:
        parts = urlsplit(uri)
        if parts.scheme == "file":
            if parts.netloc not in ("", "localhost"):
                raise SchemaCompileError(f"Refusing to retrieve schema from remote host: {uri}")
            return Path(url2pathname(unquote(parts.path)))
        if parts.scheme == CLASSPATH_SCHEME:
            found = self._find_on_search_path(unquote(parts.path))
            if found is None:
                raise SchemaCompileError(
                    f"Schema {uri} not found in search paths: "
                    f"{', '.join(str(p) for p in self.search_paths) or '(none)'}"
                )
            return found
        if not parts.scheme:
            raise SchemaCompileError(f"Cannot resolve relative schema reference without a base URI: {uri}")
        raise SchemaCompileError(f"Refusing to retrieve schema over '{parts.scheme}': {uri}")

    def _find_on_search_path(self, resource_path: str) -> Optional[Path]:
        relative = resource_path.lstrip("/")
        if not relative:
            return None
        for directory in self.search_paths:
            candidate = directory / relative
            if candidate.is_file():
                return candidate
        return None
