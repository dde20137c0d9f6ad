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

"""Lenient JSON extensions: comments and trailing commas.

Both helpers rewrite the offending characters to spaces (newlines are kept)
so positions reported by the strict decoder still match the original text.
"""

import re

from ..exceptions import ParseError

_NON_NEWLINE = re.compile(r"[^\n]")


def _blank(segment: str) -> str:
    return _NON_NEWLINE.sub(" ", segment)


def _string_end(text: str, start: int) -> int:
    """Return the index just past the string literal opened at ``start``."""
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    # unterminated; let the decoder report it
    return n


def strip_json_comments(text: str) -> str:
    """Blank out ``//`` line comments and ``/* */`` block comments."""
    out = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
        elif text.startswith("//", i):
            end = text.find("\n", i)
            if end == -1:
                end = n
            out.append(_blank(text[i:end]))
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                line = text.count("\n", 0, i) + 1
                raise ParseError(f"Unterminated block comment starting at line {line}")
            end += 2
            out.append(_blank(text[i:end]))
            i = end
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Blank out a comma directly followed by ``]`` or ``}``.

    A comma that follows an opening bracket or another comma is left alone:
    that is a missing value, not a trailing comma.
    """
    out = []
    i = 0
    n = len(text)
    previous = ""
    while i < n:
        ch = text[i]
        if ch == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            previous = '"'
            i = end
            continue
        if ch == "," and previous not in ("[", "{", ","):
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "]}":
                out.append(" ")
                previous = ","
                i += 1
                continue
        out.append(ch)
        if not ch.isspace():
            previous = ch
        i += 1
    return "".join(out)
