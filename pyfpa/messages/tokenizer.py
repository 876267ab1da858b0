# Copyright 2024 inuex35
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

"""Tokenizer for FP_A lines.

A line looks like ``$FP,LLH,1,2231,207748.800000,...*5A\r\n``. Fields are
split on ',' with empty fields preserved and no whitespace trimming.
"""

import re
from typing import Optional

from ..core.constants import (FPA_CHECKSUM_FLAG, FPA_DELIMITER, FPA_MARKER,
                              FPA_MARKER_BARE)

_CHECKSUM_RE = re.compile(r'\*([0-9A-Fa-f]{2})$')


def split_message(line: str, delimiter: str = FPA_DELIMITER, maxsplit: int = -1) -> list[str]:
    """Split a line into tokens, keeping empty fields"""
    return line.split(delimiter, maxsplit)


def strip_terminator(line: str) -> str:
    """Remove the line ending and a trailing ``*HH`` checksum, if present"""
    line = line.rstrip("\r\n")
    return _CHECKSUM_RE.sub("", line)


def tokenize(line: str, maxsplit: int = -1) -> list[str]:
    """Strip terminators and split a raw line into tokens"""
    return split_message(strip_terminator(line), maxsplit=maxsplit)


def has_marker(tokens) -> bool:
    return bool(tokens) and tokens[0] in (FPA_MARKER, FPA_MARKER_BARE)


def with_marker(tokens: list[str]) -> list[str]:
    """Prepend the '$FP' marker to token lists that start at the header"""
    if has_marker(tokens):
        return list(tokens)
    return [FPA_MARKER, *tokens]


def nmea_checksum(body: str) -> int:
    """XOR of all characters between '$' and '*'"""
    checksum = 0
    for byte in body.encode("ascii", errors="replace"):
        checksum ^= byte
    return checksum


def verify_checksum(line: str) -> Optional[bool]:
    """Check the ``*HH`` suffix of a raw line.

    Returns None when the line carries no checksum.
    """
    line = line.rstrip("\r\n")
    match = _CHECKSUM_RE.search(line)
    if match is None:
        return None
    body = line[:match.start()]
    if body.startswith("$"):
        body = body[1:]
    return nmea_checksum(body) == int(match.group(1), 16)


def append_checksum(body: str) -> str:
    """Return ``$body*HH`` for a body without '$'"""
    return f"${body}{FPA_CHECKSUM_FLAG}{nmea_checksum(body):02X}"


__all__ = ['split_message', 'strip_terminator', 'tokenize', 'nmea_checksum',
           'verify_checksum', 'append_checksum', 'has_marker', 'with_marker']
