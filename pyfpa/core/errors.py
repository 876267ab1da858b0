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

"""Decode errors raised by the FP_A message layer.

Every error is recoverable at message granularity: the offending line is
dropped and the caller decides whether to skip, log or escalate. All errors
derive from ``ValueError`` so callers that only care about "bad input" can
catch that.
"""

from typing import Optional, Union


class FpaDecodeError(ValueError):
    """Base class for all FP_A decode failures"""

    def __init__(self, message: str, header: Optional[str] = None):
        super().__init__(message)
        self.header = header


class UnknownMessageType(FpaDecodeError):
    """Header token is not in the message registry"""

    def __init__(self, header: Optional[str]):
        super().__init__(f"Unknown FP_A message type: {header!r}", header)


class UnsupportedVersion(FpaDecodeError):
    """Header is known but no decoder handles the observed version"""

    def __init__(self, header: str, version: Union[int, str]):
        super().__init__(f"Unsupported {header} version: {version!r}", header)
        self.version = version


class MalformedMessage(FpaDecodeError):
    """Token count does not match the registered (header, version) size"""

    def __init__(self, header: str, expected: int, actual: int):
        super().__init__(
            f"Malformed {header} message: expected {expected} tokens, got {actual}",
            header,
        )
        self.expected = expected
        self.actual = actual


class FieldParseError(FpaDecodeError):
    """A single field's token could not be converted to its target type"""

    def __init__(self, header: Optional[str], index: int, field: str, token: str,
                 reason: str = ""):
        message = f"Failed to parse {field} (token {index}) of {header}: {token!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, header)
        self.index = index
        self.field = field
        self.token = token
        self.reason = reason

    def shifted(self, offset: int) -> 'FieldParseError':
        """Same error with the token position moved by ``offset``"""
        return FieldParseError(self.header, self.index + offset, self.field, self.token,
                               self.reason)


__all__ = [
    'FpaDecodeError', 'UnknownMessageType', 'UnsupportedVersion',
    'MalformedMessage', 'FieldParseError',
]
